"""CLI entry points for qtlazy - Thin Controller using Typer."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

import typer

from qt_lazy_linter.domain.config import ConfigurationLoader, RunConfiguration
from qt_lazy_linter.domain.entities import RunStatus
from qt_lazy_linter.domain.exceptions import ConfigurationError, UnknownCheckError
from qt_lazy_linter.domain.registry import CheckLevel, CheckRegistry
from qt_lazy_linter.interface.reporters import RunReporter
from qt_lazy_linter.use_cases.run_checks import RunChecksUseCase

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# B008: avoid function call in default; use module-level singletons for Typer Options
_CHECK_OPTION = typer.Option(None, "--check", "-c", help="Check to run (repeatable, 'all' for every check)")
_DISABLE_OPTION = typer.Option(None, "--disable", "-d", help="Check to skip (repeatable)")
_FIXIT_OPTION = typer.Option(None, "--fixit", help="Fix-it flag to synthesize (repeatable, default: all)")


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigurationLoader
    registry: CheckRegistry
    text_reporter: RunReporter
    json_reporter: RunReporter
    run_checks_factory: Callable[[RunConfiguration], RunChecksUseCase]


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def resolve_target_path(path: Optional[Path]) -> str:
        """Resolve target path: explicit path, else src/ if exists, else '.' (public API)."""
        if path and str(path) != ".":
            return str(path)
        cwd = Path.cwd()
        src_dir = cwd / "src"
        if src_dir.exists() and src_dir.is_dir():
            return "src"
        return "."

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT, force=True)

    @staticmethod
    def build_configuration(
        deps: CLIDependencies,
        checks: Optional[List[str]],
        disabled: Optional[List[str]],
        level: Optional[str],
        fixits: Optional[List[str]],
        fix: bool,
    ) -> RunConfiguration:
        """File configuration first, then command-line overrides."""
        config = deps.config_loader.build_run_configuration()
        for flag in fixits or []:
            if deps.registry.fixit_for_flag(flag) is None:
                raise ConfigurationError(f"Unknown fix-it flag '{flag}'")
        try:
            max_level = CheckLevel.parse(level) if level is not None else None
        except ValueError as exc:
            raise ConfigurationError(f"Invalid level {level!r}") from exc
        return config.with_overrides(
            checks=tuple(checks) if checks else None,
            disabled_checks=config.disabled_checks.union(disabled) if disabled else None,
            max_level=max_level,
            fixits=frozenset(fixits) if fixits else None,
            apply_fixes=True if fix else None,
        )

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies. No Service Locator."""
        app = typer.Typer(
            name="qtlazy",
            help="Find and fix slow or error-prone uses of the Qt Python bindings.",
            add_completion=False,
        )

        @app.command()
        def check(
            path: Optional[Path] = typer.Argument(None, help="File or directory to check (default: src/ or .)"),  # noqa: B008, RUF100
            check: Optional[List[str]] = _CHECK_OPTION,
            disable: Optional[List[str]] = _DISABLE_OPTION,
            level: Optional[str] = typer.Option(None, "--level", "-l", help="Highest level to run: 0-3 or hidden"),
            fixit: Optional[List[str]] = _FIXIT_OPTION,
            fix: bool = typer.Option(False, "--fix", help="Write synthesized edits back to disk"),
            output_format: str = typer.Option("text", "--format", "-f", help="Output format: text or json"),
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
        ) -> None:
            """Run the selected checks; the exit code is the run status (0 clean .. 3 fatal)."""
            CLIAppFactory.configure_logging(verbose)
            if output_format not in ("text", "json"):
                typer.secho(f"Error: unknown format '{output_format}'", fg=typer.colors.RED, err=True)
                sys.exit(RunStatus.FATAL_ERROR.exit_code)
            target_path = CLIAppFactory.resolve_target_path(path)
            try:
                config = CLIAppFactory.build_configuration(deps, check, disable, level, fixit, fix)
                use_case = deps.run_checks_factory(config)
                summary = use_case.execute(target_path)
            except (ConfigurationError, UnknownCheckError) as exc:
                typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
                sys.exit(RunStatus.FATAL_ERROR.exit_code)

            reporter = deps.json_reporter if output_format == "json" else deps.text_reporter
            reporter.report(summary)
            sys.exit(summary.status.exit_code)

        @app.command(name="list-checks")
        def list_checks() -> None:
            """List registered checks with their level and fix-its."""
            for name in deps.registry.all_names():
                descriptor = deps.registry.get(name)
                level = descriptor.level.name.lower()
                fixits = ", ".join(f.flag_name for f in descriptor.fixits) or "-"
                typer.echo(f"{name:<32} {level:<8} {fixits}")
                if descriptor.description:
                    typer.echo(f"    {descriptor.description}")

        return app


create_app = CLIAppFactory.create_app
