"""
Usage ranking of styled declarations.

A declaration's rank is the offset of its first tag-like usage (``<Name>``)
in the file. Declarations never used as a tag rank ``math.inf``.
"""

import logging
import math
from collections.abc import Iterable
from enum import Enum

from .collector import Collection
from .estree import Node, node_range, node_type, walk

logger = logging.getLogger(__name__)

UsageRank = dict[str, float]


class UsageStrategy(Enum):
    """How tag-like usages are located"""

    STRUCTURAL = "structural"  # JSX opening elements in the syntax tree
    TEXT = "text"  # literal search for "<Name>" and friends


TEXT_USAGE_SUFFIXES: list[str] = [">", " ", "\n", "/"]


def structural_usages(body: Iterable[Node], collection: Collection) -> UsageRank:
    """Rank names by the first JSX element that opens with them.

    The statements of the tracked declarations themselves are skipped.
    """
    ranks: UsageRank = {name: math.inf for name in collection.names}
    declared = {declaration.source_range for declaration in collection.declarations}

    for statement in body:
        if node_range(statement) in declared:
            continue
        for node in walk(statement):
            if node_type(node) != "JSXOpeningElement":
                continue
            tag = node.get("name")
            if node_type(tag) != "JSXIdentifier":
                continue
            name = tag["name"]
            if name in ranks:
                ranks[name] = min(ranks[name], node_range(node)[0])

    return ranks


def text_usages(text: str, collection: Collection) -> UsageRank:
    """Rank names by literal ``<Name>`` style occurrences in the file text"""
    ranks: UsageRank = {}
    for name in collection.names:
        offsets = [
            text.find(f"<{name}{suffix}") for suffix in TEXT_USAGE_SUFFIXES
        ]
        found = [offset for offset in offsets if offset != -1]
        ranks[name] = min(found) if found else math.inf
    return ranks


def rank_usages(
    body: Iterable[Node],
    text: str,
    collection: Collection,
    strategy: UsageStrategy = UsageStrategy.STRUCTURAL,
) -> UsageRank:
    """Compute the usage rank of every tracked name"""
    if strategy is UsageStrategy.TEXT:
        ranks = text_usages(text, collection)
    else:
        ranks = structural_usages(body, collection)

    unused = [name for name, rank in ranks.items() if rank == math.inf]
    if unused:
        logger.debug(f"No tag usage found for: {', '.join(unused)}")
    return ranks
