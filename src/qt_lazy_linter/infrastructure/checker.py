"""
Pylint plugin entry point - composition root for the checker plugin.
Lives in infrastructure as it creates the container and wires dependencies.

    pylint --load-plugins=qt_lazy_linter.infrastructure.checker
"""

from typing import TYPE_CHECKING, Optional

import astroid  # type: ignore[import-untyped]
from pylint.checkers import BaseChecker

from qt_lazy_linter.domain.entities import Diagnostic, DiagnosticKind
from qt_lazy_linter.domain.registry import CheckRegistry
from qt_lazy_linter.infrastructure.di.container import QtLazyContainer
from qt_lazy_linter.use_cases.run_checks import RunChecksUseCase

if TYPE_CHECKING:
    from pylint.lint import PyLinter

INTERNAL_ERROR_MSG = "qt-lazy-internal-error"
MANUAL_FIXIT_MSG = "qt-lazy-manual-fixit"

_FIXED_MSGS = {
    "E8898": (
        "Internal error in check %s: %s",
        INTERNAL_ERROR_MSG,
        "A qt-lazy check failed on this node; other checks kept running.",
    ),
    "W8899": (
        "%s needs a manual fix (%s): %s",
        MANUAL_FIXIT_MSG,
        "A fix is known to be needed but could not be derived safely.",
    ),
}


def build_msgs(registry: CheckRegistry) -> dict[str, tuple[str, str, str]]:
    """One W88xx message per registered check, numbered in registration order."""
    msgs: dict[str, tuple[str, str, str]] = {}
    for index, descriptor in enumerate(registry.descriptors(), start=1):
        msgs[f"W88{index:02d}"] = ("%s", descriptor.name, descriptor.description or descriptor.name)
    msgs.update(_FIXED_MSGS)
    return msgs


class QtLazyChecker(BaseChecker):
    """Runs the qt-lazy checks over each module pylint visits."""

    name: str = "qt-lazy"

    def __init__(
        self,
        linter: "PyLinter",
        registry: Optional[CheckRegistry] = None,
        run_checks: Optional[RunChecksUseCase] = None,
    ) -> None:
        container = None
        if registry is None or run_checks is None:
            container = QtLazyContainer.get_instance()
        self.registry = registry if registry is not None else container.get_registry()
        self.msgs = build_msgs(self.registry)
        super().__init__(linter)
        if run_checks is None:
            config = container.get_config_loader().build_run_configuration()
            # pylint only reports; never write files from a lint run.
            run_checks = container.build_run_checks(config.with_overrides(apply_fixes=False))
        self._run_checks = run_checks

    def visit_module(self, node: astroid.nodes.Module) -> None:
        source = self._module_source(node)
        if source is None:
            return
        file_path = node.file or node.name
        report = self._run_checks.check_module(node, source, file_path)
        if report.error:
            self.add_message(INTERNAL_ERROR_MSG, node=node, args=("front-end", report.error))
            return
        for diagnostic in report.diagnostics:
            self._add_diagnostic(node, diagnostic)
        for ticket in report.escalations:
            self.add_message(
                MANUAL_FIXIT_MSG,
                node=node,
                line=ticket.location.line,
                col_offset=ticket.location.column,
                args=(ticket.check_name, ticket.fixit.flag_name, ticket.reason),
            )

    def _add_diagnostic(self, node: astroid.nodes.Module, diagnostic: Diagnostic) -> None:
        if diagnostic.kind is DiagnosticKind.INTERNAL_ERROR:
            self.add_message(
                INTERNAL_ERROR_MSG,
                node=node,
                line=diagnostic.location.line,
                col_offset=diagnostic.location.column,
                args=(diagnostic.check_name, diagnostic.message),
            )
            return
        self.add_message(
            diagnostic.check_name,
            node=node,
            line=diagnostic.location.line,
            col_offset=diagnostic.location.column,
            args=(diagnostic.message,),
        )

    @staticmethod
    def _module_source(node: astroid.nodes.Module) -> Optional[str]:
        if node.file_bytes is not None:
            data = node.file_bytes
            return data.decode(node.file_encoding or "utf-8") if isinstance(data, bytes) else data
        if not node.file:
            return None
        with node.stream() as stream:
            return stream.read().decode(node.file_encoding or "utf-8")


def register(linter: "PyLinter") -> None:
    """Register checkers."""
    linter.register_checker(QtLazyChecker(linter))
