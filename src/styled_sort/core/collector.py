"""
Collects the styled declarations of a program.

Only top-level, single-binding declarations with a plain identifier and a
styled-like initializer are tracked. Everything else is invisible to the
ordering analysis.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .classification import Classification, classify_initializer
from .estree import Node, node_range, node_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackedDeclaration:
    """A styled declaration found at the top level of a file"""

    name: str
    position: int
    source_range: tuple[int, int]
    initializer: Node
    anchor: Node
    classification: Classification

    @property
    def start(self) -> int:
        return self.source_range[0]

    @property
    def end(self) -> int:
        return self.source_range[1]


@dataclass
class Collection:
    """Tracked declarations of one file plus lookups keyed by name"""

    declarations: list[TrackedDeclaration] = field(default_factory=list)
    by_name: dict[str, TrackedDeclaration] = field(default_factory=dict)
    positions: dict[str, int] = field(default_factory=dict)
    anchors: dict[str, Node] = field(default_factory=dict)

    @property
    def names(self) -> list[str]:
        return [declaration.name for declaration in self.declarations]

    def add(self, declaration: TrackedDeclaration) -> None:
        self.declarations.append(declaration)
        self.by_name[declaration.name] = declaration
        self.positions[declaration.name] = declaration.position
        self.anchors[declaration.name] = declaration.anchor

    def __len__(self) -> int:
        return len(self.declarations)


def unwrap_declaration(statement: Node) -> Node | None:
    """Return the variable declaration held by a statement, if any"""
    kind = node_type(statement)
    if kind == "VariableDeclaration":
        return statement
    if kind == "ExportNamedDeclaration":
        declaration = statement.get("declaration")
        if node_type(declaration) == "VariableDeclaration":
            return declaration
    return None


def collect(body: Iterable[Node], marker_names: Iterable[str]) -> Collection:
    """Select the tracked declarations from a top-level statement list.

    Args:
        body: Top-level statements of the program
        marker_names: Identifiers that qualify an initializer as styled-like

    Returns:
        Collection of tracked declarations in source order
    """
    markers = list(marker_names)
    collection = Collection()

    for statement in body:
        declaration = unwrap_declaration(statement)
        if declaration is None:
            continue

        declarators = declaration.get("declarations") or []
        if len(declarators) != 1:
            continue

        declarator = declarators[0]
        identifier = declarator.get("id")
        if node_type(identifier) != "Identifier":
            continue

        init = declarator.get("init")
        classification = classify_initializer(init, markers)
        if not classification.is_tracked:
            continue

        name = identifier["name"]
        if name in collection.by_name:
            logger.debug(f"Duplicate styled declaration {name}, keeping the first")
            continue

        collection.add(
            TrackedDeclaration(
                name=name,
                position=len(collection),
                source_range=node_range(statement),
                initializer=init,
                anchor=identifier,
                classification=classification,
            )
        )

    logger.debug(f"Collected {len(collection)} styled declarations")
    return collection
