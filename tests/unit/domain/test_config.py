"""Unit tests for RunConfiguration and ConfigurationLoader."""

import logging
import unittest

import pytest

from qt_lazy_linter.domain.config import DEFAULT_PARENT_CLASSES, ConfigurationLoader, RunConfiguration
from qt_lazy_linter.domain.exceptions import ConfigurationError
from qt_lazy_linter.domain.registry import CheckLevel


class TestConfigurationLoader(unittest.TestCase):
    def test_defaults(self) -> None:
        config = ConfigurationLoader({}).build_run_configuration()
        assert config == RunConfiguration()
        assert config.max_level is CheckLevel.LEVEL1
        assert config.fixits is None
        assert config.is_fixit_enabled("fix-anything")

    def test_full_table(self) -> None:
        loader = ConfigurationLoader(
            {
                "checks": ["qdatetime-utc"],
                "disabled_checks": ["ctor-missing-parent-argument"],
                "level": "level2",
                "fixits": ["fix-qdatetime-utc"],
                "apply_fixes": True,
                "parent_classes": ["MyBaseObject"],
                "python_version": "3.10",
            }
        )
        config = loader.build_run_configuration()
        assert config.checks == ("qdatetime-utc",)
        assert config.disabled_checks == frozenset({"ctor-missing-parent-argument"})
        assert config.max_level is CheckLevel.LEVEL2
        assert config.is_fixit_enabled("fix-qdatetime-utc")
        assert not config.is_fixit_enabled("fix-qt4-qstring-from-array")
        assert config.apply_fixes
        assert "MyBaseObject" in config.parent_classes
        assert DEFAULT_PARENT_CLASSES <= config.parent_classes
        assert config.python_version == "3.10"

    def test_single_string_is_a_list(self) -> None:
        assert ConfigurationLoader({"checks": "all"}).checks == ("all",)

    def test_bad_list_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            _ = ConfigurationLoader({"checks": [1, 2]}).checks

    def test_bad_level_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            _ = ConfigurationLoader({"level": "loud"}).max_level

    def test_unknown_keys_warn(self) -> None:
        with self.assertLogs("qt_lazy_linter.domain.config", level=logging.WARNING) as logs:
            ConfigurationLoader({"colour": "blue"})
        assert "colour" in logs.output[0]


class TestRunConfiguration:
    def test_with_overrides_skips_none(self) -> None:
        config = RunConfiguration(checks=("a",))
        changed = config.with_overrides(checks=None, apply_fixes=True)
        assert changed.checks == ("a",)
        assert changed.apply_fixes

    def test_empty_fixit_set_disables_all(self) -> None:
        assert not RunConfiguration(fixits=frozenset()).is_fixit_enabled("fix-qdatetime-utc")
