"""Unit tests for locations, edits, diagnostics and run status."""

import unittest

import pytest

from qt_lazy_linter.domain.entities import (
    Diagnostic,
    DiagnosticKind,
    EscalationTicket,
    FileReport,
    FixItDescriptor,
    Insertion,
    Location,
    MatchKind,
    MatchOutcome,
    Replacement,
    RunStatus,
    RunSummary,
    SourceRange,
    edits_overlap,
)

FIXIT = FixItDescriptor(1, "fix-something", "some-check")


def _replacement(start: tuple[int, int], end: tuple[int, int], text: str = "x") -> Replacement:
    return Replacement(SourceRange(Location(*start), Location(*end)), text)


class TestLocation(unittest.TestCase):
    def test_invalid_location_is_not_valid(self) -> None:
        assert not Location.invalid().is_valid()
        assert Location(1, 0).is_valid()

    def test_locations_order_by_line_then_column(self) -> None:
        assert Location(1, 10) < Location(2, 0)
        assert Location(2, 3) < Location(2, 4)

    def test_range_validity_requires_ordered_valid_ends(self) -> None:
        assert SourceRange(Location(1, 0), Location(1, 0)).is_valid()
        assert not SourceRange(Location(1, 5), Location(1, 0)).is_valid()
        assert not SourceRange(Location.invalid(), Location(1, 0)).is_valid()

    def test_range_is_half_open(self) -> None:
        source_range = SourceRange(Location(1, 0), Location(1, 4))
        assert source_range.contains(Location(1, 0))
        assert not source_range.contains(Location(1, 4))


class TestEditsOverlap:
    def test_disjoint_replacements(self) -> None:
        assert not edits_overlap(_replacement((1, 0), (1, 3)), _replacement((1, 3), (1, 6)))

    def test_intersecting_replacements(self) -> None:
        assert edits_overlap(_replacement((1, 0), (1, 4)), _replacement((1, 3), (1, 6)))

    def test_insertion_strictly_inside_replacement(self) -> None:
        assert edits_overlap(Insertion(Location(1, 2), "("), _replacement((1, 0), (1, 4)))

    def test_insertion_at_replacement_boundary(self) -> None:
        assert not edits_overlap(Insertion(Location(1, 4), ")"), _replacement((1, 0), (1, 4)))
        assert not edits_overlap(_replacement((1, 0), (1, 4)), Insertion(Location(1, 0), "f("))

    def test_insertions_at_same_point(self) -> None:
        assert edits_overlap(Insertion(Location(1, 2), "a"), Insertion(Location(1, 2), "b"))
        assert not edits_overlap(Insertion(Location(1, 2), "a"), Insertion(Location(1, 3), "b"))


class TestDiagnostic:
    def test_edits_are_sorted(self) -> None:
        later = Insertion(Location(1, 9), ")")
        earlier = Insertion(Location(1, 2), "f(")
        diagnostic = Diagnostic(Location(1, 0), "msg", "some-check", edits=(later, earlier), fixit=FIXIT)
        assert diagnostic.edits == (earlier, later)

    def test_overlapping_edits_are_rejected(self) -> None:
        with pytest.raises(ValueError):
            Diagnostic(
                Location(1, 0),
                "msg",
                "some-check",
                edits=(_replacement((1, 0), (1, 4)), _replacement((1, 2), (1, 6))),
            )

    def test_internal_error_has_no_edits(self) -> None:
        diagnostic = Diagnostic.internal_error(Location(3, 4), "some-check", "boom")
        assert diagnostic.kind is DiagnosticKind.INTERNAL_ERROR
        assert diagnostic.message == "internal error: boom"
        assert diagnostic.edits == ()

    def test_without_edits_keeps_message(self) -> None:
        diagnostic = Diagnostic(
            Location(1, 0), "msg", "some-check", edits=(_replacement((1, 0), (1, 1)),), fixit=FIXIT
        )
        stripped = diagnostic.without_edits()
        assert stripped.edits == ()
        assert stripped.message == "msg"
        assert stripped.fixit == FIXIT

    def test_to_dict(self) -> None:
        diagnostic = Diagnostic(Location(2, 1), "msg", "some-check", edits=(Insertion(Location(2, 1), "a"),), fixit=FIXIT)
        data = diagnostic.to_dict()
        assert data["line"] == 2
        assert data["fixit"] == "fix-something"
        assert data["edits"] == [{"type": "insertion", "at": "2:1", "text": "a"}]


class TestMatchOutcome:
    def test_no_match_is_shared(self) -> None:
        assert MatchOutcome.no_match() is MatchOutcome.no_match()
        assert not MatchOutcome.no_match().matched

    def test_escalation_strips_edits(self) -> None:
        diagnostic = Diagnostic(
            Location(1, 0), "msg", "some-check", edits=(_replacement((1, 0), (1, 1)),), fixit=FIXIT
        )
        ticket = EscalationTicket(Location(1, 0), FIXIT, "some-check", "reason")
        outcome = MatchOutcome.escalation(diagnostic, ticket)
        assert outcome.kind is MatchKind.ESCALATION
        assert outcome.diagnostic.edits == ()
        assert outcome.ticket is ticket


class TestRunStatus:
    def test_exit_codes(self) -> None:
        assert RunStatus.CLEAN.exit_code == 0
        assert RunStatus.DIAGNOSTICS_ONLY.exit_code == 1
        assert RunStatus.DIAGNOSTICS_WITH_ESCALATIONS.exit_code == 2
        assert RunStatus.FATAL_ERROR.exit_code == 3

    def test_worst(self) -> None:
        assert RunStatus.worst([]) is RunStatus.CLEAN
        assert (
            RunStatus.worst([RunStatus.DIAGNOSTICS_ONLY, RunStatus.FATAL_ERROR, RunStatus.CLEAN])
            is RunStatus.FATAL_ERROR
        )

    def test_summary_status_is_worst_report(self) -> None:
        summary = RunSummary(
            reports=[
                FileReport("a.py", status=RunStatus.DIAGNOSTICS_ONLY),
                FileReport.fatal("b.py", "cannot parse"),
            ]
        )
        assert summary.status is RunStatus.FATAL_ERROR
        assert summary.to_dict()["status"] == "fatal-error"

    def test_file_report_edits_sorted(self) -> None:
        first = Diagnostic(Location(2, 0), "b", "c", edits=(_replacement((2, 0), (2, 1)),), fixit=FIXIT)
        second = Diagnostic(Location(1, 0), "a", "c", edits=(_replacement((1, 0), (1, 1)),), fixit=FIXIT)
        report = FileReport("a.py", diagnostics=(first, second))
        assert [edit.start for edit in report.edits()] == [Location(1, 0), Location(2, 0)]
