"""
The sort-styled-components rule.

Runs the collect -> dependencies -> usage rank -> reconcile pipeline over one
file and reports every styled declaration that is out of place.
"""

import logging
from dataclasses import dataclass, field

from .collector import Collection, collect
from .config import RuleConfig
from .dependencies import extract_prerequisites
from .errors import UnresolvableOrderError
from .estree import SourceFile
from .patcher import Diagnostic, splice_after
from .reconciler import reconcile
from .usage import UsageStrategy, rank_usages

logger = logging.getLogger(__name__)

RULE_ID = "sort-styled-components"


@dataclass
class LintContext:
    """Per-file state handed to the rule by the host"""

    source: SourceFile
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic.locate(self.source.text))


class SortStyledDeclarations:
    """Checks that styled declarations follow their usage order"""

    id = RULE_ID
    fixable = "whitespace"

    def __init__(self, options: RuleConfig | None = None):
        self.options = options or RuleConfig()
        self.strategy = UsageStrategy(self.options.usage_strategy)

    def check(self, context: LintContext) -> list[Diagnostic]:
        """Analyze one file and report through the context.

        Returns:
            The diagnostics reported for this file
        """
        source = context.source
        collection = collect(source.body, self.options.marker_names)
        if len(collection) < 2:
            return context.diagnostics

        prerequisites = extract_prerequisites(collection)
        ranks = rank_usages(source.body, source.text, collection, self.strategy)

        try:
            result = reconcile(
                collection.names,
                ranks,
                prerequisites,
                max_passes=self.options.max_passes,
            )
        except UnresolvableOrderError as e:
            logger.warning(f"{source.path or 'content'}: {e}")
            context.report(self._unresolvable(collection, e))
            return context.diagnostics

        for diagnostic in self._displaced(source, collection, result.order):
            context.report(diagnostic)
        return context.diagnostics

    def _displaced(
        self,
        source: SourceFile,
        collection: Collection,
        order: tuple[str, ...],
    ) -> list[Diagnostic]:
        """Diagnostics for declarations that come before where they belong.

        A declaration is displaced when it is declared ahead of the one that
        immediately precedes it in the desired order. A file is clean exactly
        when its declarations already follow the desired order.
        """
        diagnostics = []

        for index, name in enumerate(order[1:], start=1):
            declaration = collection.by_name[name]
            reference = collection.by_name[order[index - 1]]
            if reference.position < declaration.position:
                continue

            diagnostics.append(
                Diagnostic(
                    name=name,
                    anchor=declaration.anchor,
                    message=f"Declaration of {name} should be after {reference.name}",
                    violated_predecessor=reference.name,
                    fix=splice_after(
                        source.text, declaration, reference, self.options.separator
                    ),
                )
            )

        return diagnostics

    def _unresolvable(
        self,
        collection: Collection,
        error: UnresolvableOrderError,
    ) -> Diagnostic:
        involved = [
            collection.by_name[name] for name in error.cycle if name in collection.by_name
        ]
        first = min(
            involved or collection.declarations,
            key=lambda declaration: declaration.position,
        )
        detail = " -> ".join(error.cycle) if error.cycle else str(error)
        return Diagnostic(
            name=first.name,
            anchor=first.anchor,
            message=f"Unresolvable ordering of styled declarations: {detail}",
        )
