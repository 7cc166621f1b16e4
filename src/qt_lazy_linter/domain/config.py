"""Run configuration and the [tool.qt-lazy] loader."""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Optional

from qt_lazy_linter.domain.exceptions import ConfigurationError
from qt_lazy_linter.domain.registry import CheckLevel

logger = logging.getLogger(__name__)

# Qt classes whose instances take ownership through a parent pointer.
DEFAULT_PARENT_CLASSES: frozenset[str] = frozenset(
    {
        "QObject",
        "QWidget",
        "QMainWindow",
        "QDialog",
        "QFrame",
        "QThread",
        "QTimer",
        "QAbstractItemModel",
        "QAbstractListModel",
        "QAbstractTableModel",
        "QGraphicsObject",
        "QQuickItem",
    }
)

_KNOWN_KEYS: frozenset[str] = frozenset(
    {
        "checks",
        "disabled_checks",
        "level",
        "fixits",
        "apply_fixes",
        "parent_classes",
        "python_version",
    }
)


@dataclass(frozen=True)
class RunConfiguration:
    """
    Everything the driver threads into a run before it starts.

    fixits=None means every registered fix-it is synthesized; apply_fixes
    decides whether the resulting edits are written to disk.
    """

    checks: tuple[str, ...] = ()
    disabled_checks: frozenset[str] = frozenset()
    max_level: CheckLevel = CheckLevel.LEVEL1
    fixits: Optional[frozenset[str]] = None
    apply_fixes: bool = False
    parent_classes: frozenset[str] = DEFAULT_PARENT_CLASSES
    python_version: Optional[str] = None

    def is_fixit_enabled(self, flag_name: str) -> bool:
        return self.fixits is None or flag_name in self.fixits

    def with_overrides(self, **changes: object) -> "RunConfiguration":
        """Return a copy with every non-None override applied."""
        applied = {key: value for key, value in changes.items() if value is not None}
        return dataclasses.replace(self, **applied)


class ConfigurationLoader:
    """Typed accessors over the raw [tool.qt-lazy] table."""

    def __init__(self, config: Optional[dict[str, object]] = None) -> None:
        self._config: dict[str, object] = dict(config or {})
        self.validate_config(self._config)

    @property
    def config(self) -> dict[str, object]:
        return self._config

    def validate_config(self, config: dict[str, object]) -> None:
        unknown = sorted(set(config) - _KNOWN_KEYS)
        if unknown:
            logger.warning("Configuration Warning: unknown [tool.qt-lazy] keys ignored: %s", ", ".join(unknown))

    def _get_list(self, key: str) -> list[str]:
        raw = self._config.get(key, [])
        if isinstance(raw, str):
            return [raw]
        if not isinstance(raw, (list, tuple, set)):
            raise ConfigurationError(f"[tool.qt-lazy] '{key}' must be a list of strings")
        items: list[str] = []
        for item in raw:
            if not isinstance(item, str):
                raise ConfigurationError(f"[tool.qt-lazy] '{key}' must be a list of strings")
            items.append(item)
        return items

    @property
    def checks(self) -> tuple[str, ...]:
        return tuple(self._get_list("checks"))

    @property
    def disabled_checks(self) -> frozenset[str]:
        return frozenset(self._get_list("disabled_checks"))

    @property
    def max_level(self) -> CheckLevel:
        raw = self._config.get("level", CheckLevel.LEVEL1)
        try:
            return CheckLevel.parse(raw)
        except ValueError as exc:
            raise ConfigurationError(f"[tool.qt-lazy] invalid level {raw!r}") from exc

    @property
    def fixits(self) -> Optional[frozenset[str]]:
        if "fixits" not in self._config:
            return None
        return frozenset(self._get_list("fixits"))

    @property
    def apply_fixes(self) -> bool:
        return bool(self._config.get("apply_fixes", False))

    @property
    def parent_classes(self) -> frozenset[str]:
        """Configured parent-tracking classes, merged with the Qt defaults."""
        return DEFAULT_PARENT_CLASSES.union(self._get_list("parent_classes"))

    @property
    def python_version(self) -> Optional[str]:
        raw = self._config.get("python_version")
        return str(raw) if raw is not None else None

    def build_run_configuration(self) -> RunConfiguration:
        return RunConfiguration(
            checks=self.checks,
            disabled_checks=self.disabled_checks,
            max_level=self.max_level,
            fixits=self.fixits,
            apply_fixes=self.apply_fixes,
            parent_classes=self.parent_classes,
            python_version=self.python_version,
        )
