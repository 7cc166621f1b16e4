"""Per-file accumulator for diagnostics and escalation tickets."""

import logging

from qt_lazy_linter.domain.entities import (
    Diagnostic,
    Edit,
    EscalationTicket,
    FileReport,
    MatchKind,
    MatchOutcome,
    RunStatus,
    edits_overlap,
)

logger = logging.getLogger(__name__)

OVERLAPPING_EDIT_REASON = "overlapping edit"


class Report:
    """
    Single-writer report of one file's run.

    Diagnostics are kept in emission order until finalize(), which sorts
    them by location and resolves edits that touch the same text.
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []
        self._tickets: list[EscalationTicket] = []

    def emit(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    def queue_manual_fixit(self, ticket: EscalationTicket) -> None:
        self._tickets.append(ticket)

    def record(self, outcome: MatchOutcome) -> None:
        if outcome.kind is MatchKind.NO_MATCH:
            return
        if outcome.diagnostic is not None:
            self.emit(outcome.diagnostic)
        if outcome.kind is MatchKind.ESCALATION and outcome.ticket is not None:
            self.queue_manual_fixit(outcome.ticket)

    def finalize(self, file_path: str) -> FileReport:
        """
        Build the immutable FileReport.

        Edits are committed first-come in source order. A diagnostic whose
        edits would overlap already committed ones keeps its message, loses
        its edits, and is escalated instead.
        """
        # Stable sort: same-location diagnostics keep dispatch order.
        ordered = sorted(self._diagnostics, key=lambda d: d.location)
        committed: list[Edit] = []
        diagnostics: list[Diagnostic] = []
        tickets = list(self._tickets)

        for diagnostic in ordered:
            if diagnostic.edits and self._conflicts(diagnostic, committed):
                logger.info(
                    "%s:%s: edits of %s overlap an earlier fix; escalating",
                    file_path,
                    diagnostic.location,
                    diagnostic.check_name,
                )
                diagnostics.append(diagnostic.without_edits())
                if diagnostic.fixit is not None:
                    tickets.append(
                        EscalationTicket(
                            location=diagnostic.location,
                            fixit=diagnostic.fixit,
                            check_name=diagnostic.check_name,
                            reason=OVERLAPPING_EDIT_REASON,
                        )
                    )
                continue
            committed.extend(diagnostic.edits)
            diagnostics.append(diagnostic)

        tickets.sort(key=lambda t: t.location)
        return FileReport(
            file_path=file_path,
            diagnostics=tuple(diagnostics),
            escalations=tuple(tickets),
            status=self._status(diagnostics, tickets),
        )

    @staticmethod
    def _conflicts(diagnostic: Diagnostic, committed: list[Edit]) -> bool:
        return any(edits_overlap(new, old) for new in diagnostic.edits for old in committed)

    @staticmethod
    def _status(diagnostics: list[Diagnostic], tickets: list[EscalationTicket]) -> RunStatus:
        if tickets:
            return RunStatus.DIAGNOSTICS_WITH_ESCALATIONS
        if diagnostics:
            return RunStatus.DIAGNOSTICS_ONLY
        return RunStatus.CLEAN

