"""
Helpers for ESTree syntax trees supplied by an external JavaScript parser.

Nodes are the plain dictionaries produced by decoding the parser's JSON
output (``@babel/parser``, ``espree`` or ``acorn`` with ranges enabled).
Offsets are taken from ``range: [start, end]`` when present, otherwise from
the ``start``/``end`` keys.
"""

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import AstFormatError

logger = logging.getLogger(__name__)

Node = dict[str, Any]

# Keys carrying position metadata rather than child nodes
METADATA_KEYS = {"loc", "range", "start", "end", "comments", "tokens", "extra"}


def is_node(value: Any) -> bool:
    """Check if a value looks like an ESTree node"""
    return isinstance(value, dict) and "type" in value


def node_type(node: Node | None) -> str | None:
    """Return the node type or None for missing nodes"""
    if not is_node(node):
        return None
    return node["type"]


def has_range(node: Node) -> bool:
    return "range" in node or ("start" in node and "end" in node)


def node_range(node: Node) -> tuple[int, int]:
    """Return the (start, end) source offsets of a node"""
    if "range" in node:
        start, end = node["range"]
        return int(start), int(end)
    if "start" in node and "end" in node:
        return int(node["start"]), int(node["end"])
    raise AstFormatError(f"Node {node_type(node)} has no source range")


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield direct child nodes in source field order"""
    for key, value in node.items():
        if key in METADATA_KEYS or key == "type":
            continue
        if is_node(value):
            yield value
        elif isinstance(value, list):
            for item in value:
                if is_node(item):
                    yield item


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal of a node and all of its descendants"""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_child_nodes(current))))


def offset_to_position(text: str, offset: int) -> tuple[int, int]:
    """Convert a character offset to a 1-based (line, column) pair"""
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


@dataclass
class SourceFile:
    """A source file together with its parsed program"""

    path: Path | None
    text: str
    program: Node

    def __post_init__(self):
        if node_type(self.program) == "File":
            # @babel/parser wraps the program in a File node
            self.program = self.program.get("program")
        if node_type(self.program) != "Program":
            raise AstFormatError(
                f"Expected a Program node, got {node_type(self.program)!r}"
            )
        if not isinstance(self.program.get("body"), list):
            raise AstFormatError("Program node has no statement list")

    @property
    def body(self) -> list[Node]:
        """Top-level statements"""
        return self.program["body"]

    def verify(self) -> None:
        """Check that the tree was parsed from the current text.

        Every top-level statement must lie inside the text and every declared
        identifier must be found at its recorded offset.

        Raises:
            AstFormatError: The tree describes some other text
        """
        label = self.path or "content"
        for statement in self.body:
            start, end = node_range(statement)
            if end > len(self.text):
                raise AstFormatError(
                    f"AST does not match {label}: statement at {start}-{end} "
                    f"ends past the end of the text ({len(self.text)})"
                )
            for node in walk(statement):
                if node_type(node) != "VariableDeclarator":
                    continue
                identifier = node.get("id")
                if node_type(identifier) != "Identifier" or not has_range(identifier):
                    continue
                # TypeScript annotations are part of the identifier range
                id_start = node_range(identifier)[0]
                if not self.text.startswith(identifier["name"], id_start):
                    raise AstFormatError(
                        f"AST does not match {label}: expected "
                        f"{identifier['name']!r} at offset {id_start}"
                    )

    @classmethod
    def from_json(
        cls,
        text: str,
        ast_json: str,
        path: Path | None = None,
    ) -> "SourceFile":
        """Build a source file from source text and the parser's JSON output"""
        try:
            program = json.loads(ast_json)
        except json.JSONDecodeError as e:
            raise AstFormatError(f"Invalid AST JSON for {path or 'content'}: {e}")
        return cls(path=path, text=text, program=program)

    @classmethod
    def from_files(cls, source_path: Path, ast_path: Path) -> "SourceFile":
        """Load source text and its AST dump from disk"""
        logger.debug(f"Loading AST for {source_path} from {ast_path}")
        text = source_path.read_text(encoding="utf-8")
        ast_json = ast_path.read_text(encoding="utf-8")
        return cls.from_json(text, ast_json, path=source_path)
