"""
Exceptions raised by the styled declaration analysis
"""


class StyledSortError(Exception):
    """Base class for all styled-sort errors"""


class AstFormatError(StyledSortError):
    """The supplied syntax tree is not a usable ESTree program"""


class ParserCommandError(StyledSortError):
    """The external parser command failed"""

    def __init__(self, command: list[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"Parser command {' '.join(command)!r} exited with {returncode}: "
            f"{stderr.strip()}"
        )


class UnresolvableOrderError(StyledSortError):
    """Declarations cannot be put in an order that satisfies every dependency"""

    def __init__(self, message: str, cycle: list[str] | None = None):
        self.cycle = cycle or []
        super().__init__(message)
