"""Use Case: run the selected checks over files and optionally apply their fixes."""

import logging
from typing import Callable, Optional

import astroid  # type: ignore[import-untyped]

from qt_lazy_linter.domain.config import RunConfiguration
from qt_lazy_linter.domain.entities import FileReport, RunStatus, RunSummary
from qt_lazy_linter.domain.exceptions import FrontEndError
from qt_lazy_linter.domain.protocols import (
    FileSystemProtocol,
    FixerGatewayProtocol,
    FrontEndProtocol,
    SourceManagerProtocol,
    TypeResolverProtocol,
)
from qt_lazy_linter.domain.registry import CheckRegistry
from qt_lazy_linter.use_cases.fixits import render_edits
from qt_lazy_linter.use_cases.traversal import TraversalEngine

logger = logging.getLogger(__name__)

SourceManagerFactory = Callable[[str, str], SourceManagerProtocol]


class RunChecksUseCase:
    """Parse each file once, walk it, collect its report, and write fixes when asked."""

    def __init__(
        self,
        front_end: FrontEndProtocol,
        type_resolver: TypeResolverProtocol,
        fixer_gateway: FixerGatewayProtocol,
        filesystem: FileSystemProtocol,
        registry: CheckRegistry,
        config: RunConfiguration,
        source_manager_factory: SourceManagerFactory,
    ) -> None:
        self.front_end = front_end
        self.type_resolver = type_resolver
        self.fixer_gateway = fixer_gateway
        self.filesystem = filesystem
        self.registry = registry
        self.config = config
        self.source_manager_factory = source_manager_factory
        self._engine: Optional[TraversalEngine] = None

    @property
    def engine(self) -> TraversalEngine:
        if self._engine is None:
            self._engine = TraversalEngine(self.registry, self.config)
        return self._engine

    def execute(self, target_path: str) -> RunSummary:
        """Check every Python file under target_path."""
        # Check selection fails on unknown names before any file is read.
        engine = self.engine
        files = self.filesystem.glob_python_files(target_path)
        reports: list[FileReport] = []
        modified: list[str] = []
        for file_path in files:
            report, fixed = self._execute_one_file(engine, file_path)
            reports.append(report)
            if fixed:
                modified.append(file_path)
        logger.info("Checked %d file(s), modified %d", len(reports), len(modified))
        return RunSummary(reports=reports, modified_files=modified)

    def _execute_one_file(self, engine: TraversalEngine, file_path: str) -> tuple[FileReport, bool]:
        try:
            source = self.front_end.read_source(file_path)
            source_manager = self.source_manager_factory(source, file_path)
            module = self.front_end.parse_source(source, file_path)
        except FrontEndError as exc:
            logger.warning("Skipping %s: %s", file_path, exc)
            return FileReport.fatal(file_path, str(exc)), False

        report = engine.run(module, source_manager, self.type_resolver, file_path)
        if not self.config.apply_fixes:
            return report, False
        return report, self._apply(report, source_manager)

    def check_source(self, source: str, file_path: str = "<string>") -> FileReport:
        """Check one in-memory source text; never writes."""
        try:
            source_manager = self.source_manager_factory(source, file_path)
            module = self.front_end.parse_source(source, file_path)
        except FrontEndError as exc:
            logger.warning("Skipping %s: %s", file_path, exc)
            return FileReport.fatal(file_path, str(exc))
        return self.engine.run(module, source_manager, self.type_resolver, file_path)

    def check_module(self, module: astroid.nodes.Module, source: str, file_path: str) -> FileReport:
        """Check a module someone else already parsed (the pylint plugin)."""
        try:
            source_manager = self.source_manager_factory(source, file_path)
        except FrontEndError as exc:
            logger.warning("Skipping %s: %s", file_path, exc)
            return FileReport.fatal(file_path, str(exc))
        return self.engine.run(module, source_manager, self.type_resolver, file_path)

    def _apply(self, report: FileReport, source_manager: SourceManagerProtocol) -> bool:
        if report.status is RunStatus.FATAL_ERROR:
            return False
        edits = report.edits()
        if not edits:
            return False
        fixed = render_edits(source_manager, edits)
        return self.fixer_gateway.write_source(report.file_path, source_manager.source, fixed)
