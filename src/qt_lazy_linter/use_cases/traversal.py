"""Single pre-order walk dispatching every node to every enabled check."""

import logging
from enum import Enum
from typing import Iterator, Optional

import astroid  # type: ignore[import-untyped]

from qt_lazy_linter.domain.config import RunConfiguration
from qt_lazy_linter.domain.entities import Diagnostic, FileReport, MatchOutcome
from qt_lazy_linter.domain.protocols import SourceManagerProtocol, TypeResolverProtocol
from qt_lazy_linter.domain.registry import CheckRegistry
from qt_lazy_linter.use_cases.checks.base import CheckBase
from qt_lazy_linter.use_cases.context import AnalysisContext
from qt_lazy_linter.use_cases.report import Report

logger = logging.getLogger(__name__)


class NodeCategory(Enum):
    DECLARATION = "declaration"
    STATEMENT = "statement"


_DECLARATION_TYPES = (
    astroid.nodes.ClassDef,
    astroid.nodes.FunctionDef,
    astroid.nodes.AsyncFunctionDef,
)

# Category -> hook name on CheckBase.
_HOOKS: dict[NodeCategory, str] = {
    NodeCategory.DECLARATION: "visit_declaration",
    NodeCategory.STATEMENT: "visit_statement",
}


def categorize(node: astroid.nodes.NodeNG) -> Optional[NodeCategory]:
    """None for the module root, which is never dispatched."""
    if isinstance(node, astroid.nodes.Module):
        return None
    if isinstance(node, _DECLARATION_TYPES):
        return NodeCategory.DECLARATION
    return NodeCategory.STATEMENT


def walk_preorder(root: astroid.nodes.NodeNG) -> Iterator[astroid.nodes.NodeNG]:
    """Parents before children, children in get_children() order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(list(node.get_children())))


class TraversalEngine:
    """Runs the checks a configuration selects over one module at a time."""

    def __init__(self, registry: CheckRegistry, config: RunConfiguration) -> None:
        self.registry = registry
        self.config = config
        # Raises UnknownCheckError before any file is touched.
        self.descriptors = registry.select(config)

    def run(
        self,
        module: astroid.nodes.Module,
        source_manager: SourceManagerProtocol,
        type_resolver: TypeResolverProtocol,
        file_path: Optional[str] = None,
    ) -> FileReport:
        file_path = file_path or source_manager.file_path
        context = AnalysisContext(module, source_manager, self.config, self.registry, type_resolver)
        checks = [d.factory(d.name, context) for d in self.descriptors]
        report = Report()

        for node in walk_preorder(module):
            category = categorize(node)
            if category is None:
                continue
            hook_name = _HOOKS[category]
            for check in checks:
                report.record(self._dispatch(check, hook_name, node, context))

        return report.finalize(file_path)

    @staticmethod
    def _dispatch(
        check: CheckBase, hook_name: str, node: astroid.nodes.NodeNG, context: AnalysisContext
    ) -> MatchOutcome:
        try:
            return getattr(check, hook_name)(node)
        except Exception as exc:  # noqa: BLE001
            location = context.source_manager.location_of(node)
            logger.warning(
                "%s:%s: check '%s' failed in %s: %s",
                context.file_path,
                location,
                check.name,
                hook_name,
                exc,
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            return MatchOutcome.from_diagnostic(Diagnostic.internal_error(location, check.name, str(exc)))
