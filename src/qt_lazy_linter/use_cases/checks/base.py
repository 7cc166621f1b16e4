"""Contract every check implements."""

from typing import TYPE_CHECKING, Iterable, Optional

import astroid  # type: ignore[import-untyped]

from qt_lazy_linter.domain.entities import (
    Diagnostic,
    Edit,
    EscalationTicket,
    FixItDescriptor,
    Location,
    MatchOutcome,
)
from qt_lazy_linter.domain.protocols import SourceManagerProtocol, TypeResolverProtocol

if TYPE_CHECKING:
    from qt_lazy_linter.use_cases.context import AnalysisContext


class CheckBase:
    """
    A named matcher instantiated once per run.

    Hooks return a MatchOutcome; raising is allowed, the traversal engine
    turns it into an internal-error diagnostic at the node.
    """

    def __init__(self, name: str, context: "AnalysisContext") -> None:
        self.name = name
        self.context = context
        self._descriptor = context.registry.lookup(name)

    def visit_declaration(self, node: astroid.nodes.NodeNG) -> MatchOutcome:
        return MatchOutcome.no_match()

    def visit_statement(self, node: astroid.nodes.NodeNG) -> MatchOutcome:
        return MatchOutcome.no_match()

    @property
    def source_manager(self) -> SourceManagerProtocol:
        return self.context.source_manager

    @property
    def type_resolver(self) -> TypeResolverProtocol:
        return self.context.type_resolver

    def location_of(self, node: astroid.nodes.NodeNG) -> Location:
        return self.context.source_manager.location_of(node)

    def fixit(self, fixit_id: int) -> Optional[FixItDescriptor]:
        if self._descriptor is None:
            return None
        return self._descriptor.fixit(fixit_id)

    def is_fixit_enabled(self, fixit_id: int) -> bool:
        """A fix-it is enabled when it is registered for this check and its flag is selected."""
        descriptor = self.fixit(fixit_id)
        return descriptor is not None and self.context.is_fixit_enabled(descriptor.flag_name)

    def warning(
        self,
        node: astroid.nodes.NodeNG,
        message: str,
        edits: Iterable[Edit] = (),
        fixit_id: Optional[int] = None,
    ) -> MatchOutcome:
        edits = tuple(edits)
        return MatchOutcome.from_diagnostic(
            Diagnostic(
                location=self.location_of(node),
                message=message,
                check_name=self.name,
                edits=edits,
                fixit=self.fixit(fixit_id) if fixit_id is not None and edits else None,
            )
        )

    def internal_error(self, node: astroid.nodes.NodeNG, detail: str = "") -> MatchOutcome:
        return MatchOutcome.from_diagnostic(Diagnostic.internal_error(self.location_of(node), self.name, detail))

    def manual_fixit(self, node: astroid.nodes.NodeNG, message: str, fixit_id: int, reason: str) -> MatchOutcome:
        """The pattern matched but the edit must be done by hand."""
        fixit = self.fixit(fixit_id)
        location = self.location_of(node)
        diagnostic = Diagnostic(location=location, message=message, check_name=self.name, fixit=fixit)
        if fixit is None:
            return MatchOutcome.from_diagnostic(diagnostic)
        ticket = EscalationTicket(location=location, fixit=fixit, check_name=self.name, reason=reason)
        return MatchOutcome.escalation(diagnostic, ticket)
