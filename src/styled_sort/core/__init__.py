"""
Core analysis for styled declaration ordering.
"""

from .errors import (
    AstFormatError,
    ParserCommandError,
    StyledSortError,
    UnresolvableOrderError,
)
from .rule import LintContext, SortStyledDeclarations

__all__ = [
    "AstFormatError",
    "LintContext",
    "ParserCommandError",
    "SortStyledDeclarations",
    "StyledSortError",
    "UnresolvableOrderError",
]
