"""
Reconciles usage order with declaration dependencies.

The usage-ranked order is adjusted pass by pass until a pass leaves it
unchanged. Every pass is a pure function of the previous order.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .dependencies import Prerequisites, find_cycle
from .errors import UnresolvableOrderError
from .usage import UsageRank

logger = logging.getLogger(__name__)

DEFAULT_MAX_PASSES = 1000


@dataclass(frozen=True)
class ReconcileResult:
    """Final order and the number of passes it took"""

    order: tuple[str, ...]
    passes: int


def initial_order(names: Iterable[str], ranks: UsageRank) -> tuple[str, ...]:
    """Stable sort of names by usage rank"""
    return tuple(sorted(names, key=lambda name: ranks[name]))


def adjust_order(
    order: tuple[str, ...],
    prerequisites: Prerequisites,
) -> tuple[str, ...]:
    """Run one adjustment pass.

    Each name is visited once, in the order it had at the start of the pass.
    When some of its prerequisites sit after it, the name moves to just after
    the last of them.
    """
    current = list(order)

    for name in order:
        index = current.index(name)
        late = [
            current.index(dependency)
            for dependency in prerequisites.get(name, ())
            if dependency in current and current.index(dependency) > index
        ]
        if not late:
            continue
        target = max(late)
        current.pop(index)
        # The prerequisite shifted left by one, so target is just after it
        current.insert(target, name)

    return tuple(current)


def reconcile(
    names: Iterable[str],
    ranks: UsageRank,
    prerequisites: Prerequisites,
    max_passes: int = DEFAULT_MAX_PASSES,
) -> ReconcileResult:
    """Compute the desired declaration order.

    Args:
        names: Tracked names in declaration order
        ranks: Usage rank per name
        prerequisites: Names each declaration must follow
        max_passes: Ceiling on adjustment passes

    Returns:
        ReconcileResult with the desired order

    Raises:
        UnresolvableOrderError: The relation is cyclic or the passes do not settle
    """
    cycle = find_cycle(prerequisites)
    if cycle:
        raise UnresolvableOrderError(
            f"Dependency cycle: {' -> '.join(cycle)}", cycle=cycle
        )

    order = initial_order(names, ranks)
    logger.debug(f"Usage order: {', '.join(order)}")

    for passes in range(1, max_passes + 1):
        adjusted = adjust_order(order, prerequisites)
        if adjusted == order:
            logger.debug(f"Order settled after {passes} passes: {', '.join(order)}")
            return ReconcileResult(order=order, passes=passes)
        order = adjusted

    raise UnresolvableOrderError(f"Order did not settle after {max_passes} passes")
