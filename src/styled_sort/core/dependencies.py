"""
Dependency extraction between styled declarations.

Prerequisites are keyed by the referring declaration: ``prerequisites[R]``
lists every tracked name that must be declared before ``R``.
"""

import logging
from collections.abc import Iterator

from .collector import Collection
from .estree import Node, node_type

logger = logging.getLogger(__name__)

Prerequisites = dict[str, tuple[str, ...]]


def referenced_identifiers(node: Node | None) -> Iterator[str]:
    """Yield identifier names evaluated while the initializer runs.

    Function bodies are skipped: they run lazily, at render time.
    """
    if node is None:
        return
    kind = node_type(node)

    if kind == "Identifier":
        yield node["name"]
    elif kind == "TaggedTemplateExpression":
        yield from referenced_identifiers(node.get("tag"))
        yield from referenced_identifiers(node.get("quasi"))
    elif kind == "TemplateLiteral":
        for expression in node.get("expressions", []):
            yield from referenced_identifiers(expression)
    elif kind in ("CallExpression", "NewExpression"):
        yield from referenced_identifiers(node.get("callee"))
        for argument in node.get("arguments", []):
            yield from referenced_identifiers(argument)
    elif kind == "MemberExpression":
        yield from referenced_identifiers(node.get("object"))
        if node.get("computed"):
            yield from referenced_identifiers(node.get("property"))
    elif kind == "ConditionalExpression":
        yield from referenced_identifiers(node.get("test"))
        yield from referenced_identifiers(node.get("consequent"))
        yield from referenced_identifiers(node.get("alternate"))
    elif kind in ("LogicalExpression", "BinaryExpression"):
        yield from referenced_identifiers(node.get("left"))
        yield from referenced_identifiers(node.get("right"))
    elif kind == "ArrayExpression":
        for element in node.get("elements", []):
            yield from referenced_identifiers(element)
    elif kind == "ObjectExpression":
        for prop in node.get("properties", []):
            if node_type(prop) == "SpreadElement":
                yield from referenced_identifiers(prop.get("argument"))
            else:
                if prop.get("computed"):
                    yield from referenced_identifiers(prop.get("key"))
                yield from referenced_identifiers(prop.get("value"))
    elif kind == "SpreadElement":
        yield from referenced_identifiers(node.get("argument"))


def extract_prerequisites(collection: Collection) -> Prerequisites:
    """Build the prerequisite relation between tracked declarations.

    Args:
        collection: Tracked declarations of the file

    Returns:
        Mapping from each tracked name to the tracked names it references,
        in first-seen order without duplicates or self references
    """
    prerequisites: Prerequisites = {}

    for declaration in collection.declarations:
        names = dict.fromkeys(
            name
            for name in referenced_identifiers(declaration.initializer)
            if name in collection.by_name and name != declaration.name
        )
        prerequisites[declaration.name] = tuple(names)
        if names:
            logger.debug(f"{declaration.name} depends on {', '.join(names)}")

    return prerequisites


def find_cycle(prerequisites: Prerequisites) -> list[str] | None:
    """Find one dependency cycle.

    Returns:
        The cycle as a path that starts and ends with the same name
        (e.g. ``["A", "B", "A"]``), or None when the relation is acyclic
    """
    visited: set[str] = set()

    for root in prerequisites:
        if root in visited:
            continue
        path: list[str] = [root]
        on_path = {root}
        stack = [iter(prerequisites.get(root, ()))]

        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                finished = path.pop()
                on_path.discard(finished)
                visited.add(finished)
                continue
            if child in on_path:
                return path[path.index(child) :] + [child]
            if child in visited:
                continue
            path.append(child)
            on_path.add(child)
            stack.append(iter(prerequisites.get(child, ())))

    return None
