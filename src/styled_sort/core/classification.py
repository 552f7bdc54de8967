#!/usr/bin/env python3
"""
Shape classification for declaration initializers.
Decides once per declaration whether its initializer is a styled-like
expression and which form it takes.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .estree import Node, node_type

DEFAULT_MARKER_NAMES: list[str] = [
    "styled",
    "css",
    "keyframes",
    "createGlobalStyle",
]


class StyledShape(Enum):
    """Forms a tracked initializer can take."""

    NOT_TRACKED = "not_tracked"
    TAGGED_TEMPLATE = "tagged_template"  # styled.div`...`, css`...`
    TAGGED_CALL = "tagged_call"  # styled(Button)`...`, styled.a.attrs({})`...`
    CHAINED_CALL = "chained_call"  # styled.div({...}), styled(Button)({...})


@dataclass(frozen=True)
class Classification:
    """Result of classifying one initializer."""

    shape: StyledShape
    marker: str | None = None

    @property
    def is_tracked(self) -> bool:
        return self.shape is not StyledShape.NOT_TRACKED


NOT_TRACKED = Classification(StyledShape.NOT_TRACKED)


def resolve_root(node: Node | None) -> str | None:
    """Follow member objects and call callees down to the root identifier.

    Returns:
        The identifier name, or None when the chain ends in anything else
    """
    while node is not None:
        kind = node_type(node)
        if kind == "Identifier":
            return node["name"]
        if kind == "MemberExpression":
            node = node.get("object")
        elif kind == "CallExpression":
            node = node.get("callee")
        else:
            return None
    return None


def classify_initializer(
    init: Node | None,
    marker_names: Iterable[str],
) -> Classification:
    """Classify a declaration initializer.

    Args:
        init: Initializer expression node (may be None)
        marker_names: Identifiers that qualify a tag or callee as styled-like

    Returns:
        Classification with the matched marker name
    """
    markers = set(marker_names)
    kind = node_type(init)

    if kind == "TaggedTemplateExpression":
        tag = init.get("tag")
        root = resolve_root(tag)
        if root not in markers:
            return NOT_TRACKED
        if node_type(tag) == "CallExpression":
            return Classification(StyledShape.TAGGED_CALL, root)
        return Classification(StyledShape.TAGGED_TEMPLATE, root)

    if kind == "CallExpression":
        root = resolve_root(init.get("callee"))
        if root in markers:
            return Classification(StyledShape.CHAINED_CALL, root)

    return NOT_TRACKED
