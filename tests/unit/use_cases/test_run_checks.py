"""Unit tests for RunChecksUseCase."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from qt_lazy_linter.domain.config import RunConfiguration
from qt_lazy_linter.domain.entities import RunStatus
from qt_lazy_linter.domain.exceptions import UnknownCheckError
from qt_lazy_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from qt_lazy_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from qt_lazy_linter.infrastructure.gateways.fixer_gateway import EditFixerGateway
from qt_lazy_linter.infrastructure.gateways.source_gateway import TokenSourceManager
from qt_lazy_linter.use_cases.checks import build_default_registry
from qt_lazy_linter.use_cases.run_checks import RunChecksUseCase

UTC_CALL = "t = QDateTime.currentDateTime().toUTC()\n"


def _use_case(config: RunConfiguration, fixer_gateway=None) -> RunChecksUseCase:
    gateway = AstroidGateway()
    return RunChecksUseCase(
        front_end=gateway,
        type_resolver=gateway,
        fixer_gateway=fixer_gateway or EditFixerGateway(),
        filesystem=FileSystemGateway(),
        registry=build_default_registry(),
        config=config,
        source_manager_factory=TokenSourceManager,
    )


class TestExecute:
    def test_reports_every_file_in_order(self, tmp_path: Path) -> None:
        (tmp_path / "b.py").write_text(UTC_CALL, encoding="utf-8")
        (tmp_path / "a.py").write_text("x = 1\n", encoding="utf-8")

        summary = _use_case(RunConfiguration()).execute(str(tmp_path))

        assert [Path(r.file_path).name for r in summary.reports] == ["a.py", "b.py"]
        assert summary.reports[0].status is RunStatus.CLEAN
        assert summary.reports[1].status is RunStatus.DIAGNOSTICS_ONLY
        assert summary.status is RunStatus.DIAGNOSTICS_ONLY
        assert summary.modified_files == []

    def test_check_only_never_writes(self, tmp_path: Path) -> None:
        target = tmp_path / "clock.py"
        target.write_text(UTC_CALL, encoding="utf-8")
        fixer = Mock()

        _use_case(RunConfiguration(), fixer).execute(str(target))

        fixer.write_source.assert_not_called()
        assert target.read_text(encoding="utf-8") == UTC_CALL

    def test_apply_fixes(self, tmp_path: Path) -> None:
        target = tmp_path / "clock.py"
        target.write_text(UTC_CALL, encoding="utf-8")

        summary = _use_case(RunConfiguration(apply_fixes=True)).execute(str(target))

        assert summary.modified_files == [str(target)]
        assert target.read_text(encoding="utf-8") == "t = QDateTime.currentDateTimeUtc()\n"

    def test_unparsable_file_is_fatal_and_others_still_run(self, tmp_path: Path) -> None:
        (tmp_path / "bad.py").write_text("def (:\n", encoding="utf-8")
        (tmp_path / "good.py").write_text(UTC_CALL, encoding="utf-8")

        summary = _use_case(RunConfiguration()).execute(str(tmp_path))

        bad, good = summary.reports
        assert bad.status is RunStatus.FATAL_ERROR
        assert bad.error
        assert len(good.diagnostics) == 1
        assert summary.status is RunStatus.FATAL_ERROR

    def test_unknown_check_raises(self, tmp_path: Path) -> None:
        (tmp_path / "a.py").write_text("x = 1\n", encoding="utf-8")
        use_case = _use_case(RunConfiguration(checks=("missing-check",)))
        with pytest.raises(UnknownCheckError):
            use_case.execute(str(tmp_path))


class TestInMemory:
    def test_check_source(self) -> None:
        report = _use_case(RunConfiguration()).check_source(UTC_CALL, "clock.py")
        assert report.file_path == "clock.py"
        assert len(report.diagnostics) == 1

    def test_check_source_syntax_error(self) -> None:
        report = _use_case(RunConfiguration()).check_source("x = (\n", "broken.py")
        assert report.status is RunStatus.FATAL_ERROR

    def test_check_module(self) -> None:
        module = AstroidGateway().parse_source(UTC_CALL, "clock.py")
        report = _use_case(RunConfiguration()).check_module(module, UTC_CALL, "clock.py")
        assert report.diagnostics[0].check_name == "qdatetime-utc"
