"""
Pytest configuration and shared fixtures
"""

import json
import sys
from pathlib import Path
from typing import Any

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from styled_sort.core.estree import SourceFile  # noqa: E402


def ident(name: str, start: int | None = None) -> dict[str, Any]:
    """Identifier node, with a range when its offset is known"""
    node: dict[str, Any] = {"type": "Identifier", "name": name}
    if start is not None:
        node["range"] = [start, start + len(name)]
    return node


def expression(source: str) -> dict[str, Any]:
    """Node for simple tag/callee sources: css, styled.div, styled(Button),
    styled.div.attrs(props)"""
    if source.endswith(")"):
        callee, args = source[:-1].rsplit("(", 1)
        return {
            "type": "CallExpression",
            "callee": expression(callee),
            "arguments": [ident(a.strip()) for a in args.split(",") if a.strip()],
        }
    parts = source.split(".")
    node = ident(parts[0])
    for prop in parts[1:]:
        node = {
            "type": "MemberExpression",
            "object": node,
            "property": ident(prop),
            "computed": False,
        }
    return node


def template(css: str, refs: tuple[str, ...]) -> tuple[str, dict[str, Any]]:
    """Template literal source and node interpolating the given names"""
    source = "`" + css + "".join("${" + ref + "}" for ref in refs) + "`"
    node = {
        "type": "TemplateLiteral",
        "quasis": [
            {"type": "TemplateElement", "value": {"raw": css, "cooked": css}}
        ],
        "expressions": [ident(ref) for ref in refs],
    }
    return source, node


class SourceBuilder:
    """Assembles source text and a matching ESTree program statement by
    statement, one statement per line"""

    def __init__(self):
        self.text = ""
        self.body: list[dict[str, Any]] = []

    def _add(self, snippet: str, node: dict[str, Any] | None) -> "SourceBuilder":
        start = len(self.text)
        if node is not None:
            node["range"] = [start, start + len(snippet)]
            self.body.append(node)
        self.text += snippet + "\n"
        return self

    def _declaration(
        self,
        name: str,
        init_source: str,
        init: dict[str, Any],
        export: bool,
    ) -> "SourceBuilder":
        prefix = "export " if export else ""
        snippet = f"{prefix}const {name} = {init_source};"
        start = len(self.text) + len(prefix)
        declaration = {
            "type": "VariableDeclaration",
            "kind": "const",
            "declarations": [
                {
                    "type": "VariableDeclarator",
                    "id": ident(name, start + len("const ")),
                    "init": init,
                }
            ],
            "range": [start, start + len(snippet) - len(prefix)],
        }
        if export:
            node = {
                "type": "ExportNamedDeclaration",
                "declaration": declaration,
                "specifiers": [],
            }
        else:
            node = declaration
        return self._add(snippet, node)

    def styled(
        self,
        name: str,
        tag: str = "styled.div",
        css: str = "color: red;",
        refs: tuple[str, ...] = (),
        export: bool = False,
    ) -> "SourceBuilder":
        """const Name = tag`css${ref}...`;"""
        quasi_source, quasi = template(css, refs)
        init = {
            "type": "TaggedTemplateExpression",
            "tag": expression(tag),
            "quasi": quasi,
        }
        return self._declaration(name, tag + quasi_source, init, export)

    def chained(
        self,
        name: str,
        callee: str = "styled.div",
        args: tuple[str, ...] = (),
    ) -> "SourceBuilder":
        """const Name = callee(arg, ...);"""
        init = {
            "type": "CallExpression",
            "callee": expression(callee),
            "arguments": [ident(arg) for arg in args],
        }
        return self._declaration(name, f"{callee}({', '.join(args)})", init, False)

    def variable(self, name: str, value: int = 1) -> "SourceBuilder":
        """const name = value;"""
        init = {"type": "Literal", "value": value, "raw": str(value)}
        return self._declaration(name, str(value), init, False)

    def statement(self, snippet: str, node_type: str = "EmptyStatement"):
        """Arbitrary statement that holds no styled usage"""
        return self._add(snippet, {"type": node_type})

    def comment(self, snippet: str) -> "SourceBuilder":
        """Text with no node of its own"""
        return self._add(snippet, None)

    def usage(self, *names: str) -> "SourceBuilder":
        """render(<>\\n<A />\\n<B />\\n</>);"""
        snippet = "render(<>"
        start = len(self.text)
        children = []
        for name in names:
            snippet += "\n"
            offset = start + len(snippet)
            element = f"<{name} />"
            snippet += element
            children.append(
                {
                    "type": "JSXElement",
                    "openingElement": {
                        "type": "JSXOpeningElement",
                        "name": {"type": "JSXIdentifier", "name": name},
                        "attributes": [],
                        "selfClosing": True,
                        "range": [offset, offset + len(element)],
                    },
                    "children": [],
                    "closingElement": None,
                }
            )
        snippet += "\n</>);"
        node = {
            "type": "ExpressionStatement",
            "expression": {
                "type": "CallExpression",
                "callee": ident("render"),
                "arguments": [{"type": "JSXFragment", "children": children}],
            },
        }
        return self._add(snippet, node)

    @property
    def program(self) -> dict[str, Any]:
        return {"type": "Program", "body": self.body, "range": [0, len(self.text)]}

    def build(self, path: Path | None = None) -> SourceFile:
        return SourceFile(path=path, text=self.text, program=self.program)

    def write(self, path: Path, ast_suffix: str = ".estree.json") -> Path:
        """Write the source and its sidecar AST dump"""
        path.write_text(self.text, encoding="utf-8")
        sidecar = path.with_name(path.name + ast_suffix)
        sidecar.write_text(json.dumps(self.program), encoding="utf-8")
        return path


@pytest.fixture
def builder() -> type[SourceBuilder]:
    """Factory for source files with matching syntax trees"""
    return SourceBuilder


@pytest.fixture
def dependent_pair(builder) -> SourceBuilder:
    """B interpolates A but is declared first; A is used first"""
    return builder().styled("B", refs=("A",)).styled("A").usage("A", "B")


@pytest.fixture
def reversed_usage(builder) -> SourceBuilder:
    """A, B, C declared in order but used as C, B, A"""
    return builder().styled("A").styled("B").styled("C").usage("C", "B", "A")


@pytest.fixture
def expr():
    """Build expression nodes from simple sources like styled.div(x)"""
    return expression


@pytest.fixture
def tagged(expr):
    """Build a tagged template node for a tag source"""

    def make(tag: str, refs: tuple[str, ...] = ()) -> dict[str, Any]:
        return {
            "type": "TaggedTemplateExpression",
            "tag": expr(tag),
            "quasi": template("", refs)[1],
        }

    return make
