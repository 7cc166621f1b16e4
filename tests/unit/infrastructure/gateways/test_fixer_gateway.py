"""Unit tests for EditFixerGateway."""

import os
import stat
from pathlib import Path

import pytest

from qt_lazy_linter.infrastructure.gateways.fixer_gateway import EditFixerGateway


class TestEditFixerGateway:
    def test_writes_changed_source(self, tmp_path: Path) -> None:
        target = tmp_path / "m.py"
        target.write_text("a = 1\n", encoding="utf-8")
        assert EditFixerGateway().write_source(str(target), "a = 1\n", "a = 2\n")
        assert target.read_text(encoding="utf-8") == "a = 2\n"

    def test_unchanged_source_is_not_written(self, tmp_path: Path) -> None:
        target = tmp_path / "m.py"
        target.write_text("a = 1\n", encoding="utf-8")
        assert not EditFixerGateway().write_source(str(target), "a = 1\n", "a = 1\n")

    def test_refuses_unparsable_result(self, tmp_path: Path, caplog) -> None:
        target = tmp_path / "m.py"
        target.write_text("a = 1\n", encoding="utf-8")
        assert not EditFixerGateway().write_source(str(target), "a = 1\n", "a = (\n")
        assert target.read_text(encoding="utf-8") == "a = 1\n"
        assert "does not parse" in caplog.text

    def test_no_temporary_files_left(self, tmp_path: Path) -> None:
        target = tmp_path / "m.py"
        target.write_text("a = 1\n", encoding="utf-8")
        EditFixerGateway().write_source(str(target), "a = 1\n", "a = 2\n")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["m.py"]

    @pytest.mark.skipif(os.name != "posix", reason="file modes")
    def test_keeps_file_mode(self, tmp_path: Path) -> None:
        target = tmp_path / "script.py"
        target.write_text("a = 1\n", encoding="utf-8")
        target.chmod(0o755)
        EditFixerGateway().write_source(str(target), "a = 1\n", "a = 2\n")
        assert stat.S_IMODE(target.stat().st_mode) == 0o755

    def test_python_version_grammar(self) -> None:
        gateway = EditFixerGateway(python_version="3.8")
        assert gateway.is_valid_source("x = 1\n")
        assert not gateway.is_valid_source("x = (\n")
