"""Domain entities: locations, edits, diagnostics and run results."""

from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
from typing import Any, Optional, Union


@dataclass(frozen=True, order=True)
class Location:
    """A position in one file: 1-based line, 0-based character column."""

    line: int
    column: int

    @classmethod
    def invalid(cls) -> "Location":
        return cls(0, -1)

    def is_valid(self) -> bool:
        return self.line >= 1 and self.column >= 0

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceRange:
    """
    Half-open span [start, end) of one file's text.

    Structural validity only; whether both ends sit on real token
    boundaries is for the source manager to decide.
    """

    start: Location
    end: Location

    def is_valid(self) -> bool:
        return self.start.is_valid() and self.end.is_valid() and self.start <= self.end

    def contains(self, location: Location) -> bool:
        return self.start <= location < self.end


@dataclass(frozen=True)
class Insertion:
    """Insert text at a location."""

    at: Location
    text: str

    @property
    def start(self) -> Location:
        return self.at

    @property
    def end(self) -> Location:
        return self.at


@dataclass(frozen=True)
class Replacement:
    """Replace the text of a range with a literal string."""

    range: SourceRange
    text: str

    @property
    def start(self) -> Location:
        return self.range.start

    @property
    def end(self) -> Location:
        return self.range.end


Edit = Union[Insertion, Replacement]


def edits_overlap(first: Edit, second: Edit) -> bool:
    """
    Check whether two edits touch the same text.

    Two insertions at the same point overlap: their relative order would be
    undefined once applied.
    """
    if isinstance(first, Insertion) and isinstance(second, Insertion):
        return first.at == second.at
    if isinstance(first, Insertion):
        return second.start < first.at < second.end
    if isinstance(second, Insertion):
        return first.start < second.at < first.end
    return first.start < second.end and second.start < first.end


def edit_sort_key(edit: Edit) -> tuple[Location, Location]:
    return (edit.start, edit.end)


@dataclass(frozen=True)
class FixItDescriptor:
    """One automatic rewrite a check can perform, toggled by flag_name."""

    id: int
    flag_name: str
    owning_check: str


class DiagnosticKind(Enum):
    """Whether a diagnostic reports a match or a failure of the framework."""

    WARNING = "warning"
    INTERNAL_ERROR = "internal-error"


@dataclass(frozen=True)
class Diagnostic:
    """A warning at a location, optionally carrying the edits that fix it."""

    location: Location
    message: str
    check_name: str
    edits: tuple[Edit, ...] = ()
    fixit: Optional[FixItDescriptor] = None
    kind: DiagnosticKind = DiagnosticKind.WARNING

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.edits, key=edit_sort_key))
        for first, second in combinations(ordered, 2):
            # A wrap is two insertions at distinct points, never the same one.
            if edits_overlap(first, second):
                raise ValueError(f"Overlapping edits in diagnostic at {self.location}")
        object.__setattr__(self, "edits", ordered)

    @classmethod
    def internal_error(cls, location: Location, check_name: str, detail: str = "") -> "Diagnostic":
        message = "internal error" if not detail else f"internal error: {detail}"
        return cls(
            location=location,
            message=message,
            check_name=check_name,
            kind=DiagnosticKind.INTERNAL_ERROR,
        )

    def without_edits(self) -> "Diagnostic":
        return Diagnostic(
            location=self.location,
            message=self.message,
            check_name=self.check_name,
            fixit=self.fixit,
            kind=self.kind,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.location.line,
            "column": self.location.column,
            "check": self.check_name,
            "kind": self.kind.value,
            "message": self.message,
            "fixit": self.fixit.flag_name if self.fixit else None,
            "edits": [_edit_to_dict(edit) for edit in self.edits],
        }


def _edit_to_dict(edit: Edit) -> dict[str, Any]:
    if isinstance(edit, Insertion):
        return {"type": "insertion", "at": str(edit.at), "text": edit.text}
    return {
        "type": "replacement",
        "start": str(edit.range.start),
        "end": str(edit.range.end),
        "text": edit.text,
    }


@dataclass(frozen=True)
class EscalationTicket:
    """A fix that is known to be needed but could not be derived safely."""

    location: Location
    fixit: FixItDescriptor
    check_name: str
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.location.line,
            "column": self.location.column,
            "check": self.check_name,
            "fixit": self.fixit.flag_name,
            "reason": self.reason,
        }


class MatchKind(Enum):
    NO_MATCH = "no-match"
    DIAGNOSTIC = "diagnostic"
    ESCALATION = "escalation"


@dataclass(frozen=True)
class MatchOutcome:
    """
    Result of visiting one node with one check.

    An escalation carries both the (edit-less) diagnostic the user sees and
    the ticket asking for manual intervention.
    """

    kind: MatchKind
    diagnostic: Optional[Diagnostic] = None
    ticket: Optional[EscalationTicket] = None

    @classmethod
    def no_match(cls) -> "MatchOutcome":
        return _NO_MATCH

    @classmethod
    def from_diagnostic(cls, diagnostic: Diagnostic) -> "MatchOutcome":
        return cls(kind=MatchKind.DIAGNOSTIC, diagnostic=diagnostic)

    @classmethod
    def escalation(cls, diagnostic: Diagnostic, ticket: EscalationTicket) -> "MatchOutcome":
        return cls(kind=MatchKind.ESCALATION, diagnostic=diagnostic.without_edits(), ticket=ticket)

    @property
    def matched(self) -> bool:
        return self.kind is not MatchKind.NO_MATCH


_NO_MATCH = MatchOutcome(kind=MatchKind.NO_MATCH)


class RunStatus(Enum):
    """Outcome of a run, ordered from best to worst."""

    CLEAN = "clean"
    DIAGNOSTICS_ONLY = "diagnostics-only"
    DIAGNOSTICS_WITH_ESCALATIONS = "diagnostics-with-escalations"
    FATAL_ERROR = "fatal-error"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)

    @property
    def exit_code(self) -> int:
        return self.rank

    @classmethod
    def worst(cls, statuses: "list[RunStatus]") -> "RunStatus":
        return max(statuses, key=lambda status: status.rank, default=cls.CLEAN)


_STATUS_ORDER = [
    RunStatus.CLEAN,
    RunStatus.DIAGNOSTICS_ONLY,
    RunStatus.DIAGNOSTICS_WITH_ESCALATIONS,
    RunStatus.FATAL_ERROR,
]


@dataclass(frozen=True)
class FileReport:
    """Everything one run produced for one file."""

    file_path: str
    diagnostics: tuple[Diagnostic, ...] = ()
    escalations: tuple[EscalationTicket, ...] = ()
    status: RunStatus = RunStatus.CLEAN
    error: Optional[str] = None

    @classmethod
    def fatal(cls, file_path: str, error: str) -> "FileReport":
        return cls(file_path=file_path, status=RunStatus.FATAL_ERROR, error=error)

    def edits(self) -> list[Edit]:
        """All committed edits of the file, sorted and non-overlapping."""
        collected = [edit for diagnostic in self.diagnostics for edit in diagnostic.edits]
        return sorted(collected, key=edit_sort_key)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file_path,
            "status": self.status.value,
            "error": self.error,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "escalations": [t.to_dict() for t in self.escalations],
        }


@dataclass(frozen=True)
class RunSummary:
    """Result of running the checks over a set of files."""

    reports: list[FileReport] = field(default_factory=list)
    modified_files: list[str] = field(default_factory=list)

    @property
    def status(self) -> RunStatus:
        return RunStatus.worst([report.status for report in self.reports])

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "modified_files": list(self.modified_files),
            "files": [report.to_dict() for report in self.reports],
        }
