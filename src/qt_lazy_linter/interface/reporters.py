"""Interface for run reporting."""

import json
from typing import Protocol

import typer

from qt_lazy_linter.domain.entities import DiagnosticKind, RunStatus, RunSummary


class RunReporter(Protocol):
    """Protocol for reporting run results."""

    def report(self, summary: RunSummary) -> None:
        """Report run results to the user."""
        ...


class TextReporter:
    """One line per diagnostic, compiler style, then a summary line."""

    _STATUS_COLORS = {
        RunStatus.CLEAN: typer.colors.GREEN,
        RunStatus.DIAGNOSTICS_ONLY: typer.colors.YELLOW,
        RunStatus.DIAGNOSTICS_WITH_ESCALATIONS: typer.colors.MAGENTA,
        RunStatus.FATAL_ERROR: typer.colors.RED,
    }

    def report(self, summary: RunSummary) -> None:
        diagnostics = 0
        escalations = 0
        for report in summary.reports:
            if report.error:
                typer.secho(f"{report.file_path}: error: {report.error}", fg=typer.colors.RED, err=True)
                continue
            for diagnostic in report.diagnostics:
                prefix = f"{report.file_path}:{diagnostic.location.line}:{diagnostic.location.column}"
                if diagnostic.kind is DiagnosticKind.INTERNAL_ERROR:
                    typer.secho(f"{prefix}: [{diagnostic.check_name}] {diagnostic.message}", fg=typer.colors.RED)
                    continue
                fix_note = " (fix available)" if diagnostic.edits else ""
                typer.echo(f"{prefix}: warning: {diagnostic.message} [{diagnostic.check_name}]{fix_note}")
            for ticket in report.escalations:
                typer.secho(
                    f"{report.file_path}:{ticket.location.line}:{ticket.location.column}: "
                    f"manual fix needed [{ticket.fixit.flag_name}]: {ticket.reason}",
                    fg=typer.colors.MAGENTA,
                )
            diagnostics += len(report.diagnostics)
            escalations += len(report.escalations)

        status = summary.status
        line = (
            f"{diagnostics} diagnostic(s), {escalations} escalation(s) in {len(summary.reports)} file(s): "
            f"{status.value}"
        )
        if summary.modified_files:
            line += f"; fixed {len(summary.modified_files)} file(s)"
        typer.secho(line, fg=self._STATUS_COLORS[status], bold=True)


class JsonReporter:
    """The whole summary as one JSON document."""

    def report(self, summary: RunSummary) -> None:
        typer.echo(json.dumps(summary.to_dict(), indent=2))
