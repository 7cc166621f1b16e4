"""Unit tests for pyproject.toml discovery."""

from pathlib import Path

from qt_lazy_linter.infrastructure.config_file_loader import ConfigFileLoader


def test_loads_tool_section_from_parent(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[tool.qt-lazy]\nchecks = ["qdatetime-utc"]\nlevel = 2\n', encoding="utf-8"
    )
    nested = tmp_path / "src" / "pkg"
    nested.mkdir(parents=True)

    assert ConfigFileLoader.find_pyproject(nested) == (tmp_path / "pyproject.toml").resolve()
    assert ConfigFileLoader.load_config_from_fs(nested) == {"checks": ["qdatetime-utc"], "level": 2}


def test_missing_section(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
    assert ConfigFileLoader.load_config_from_fs(tmp_path) == {}


def test_broken_toml_warns(tmp_path: Path, caplog) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.qt-lazy\n", encoding="utf-8")
    assert ConfigFileLoader.load_config_from_fs(tmp_path) == {}
    assert "Configuration Warning" in caplog.text
