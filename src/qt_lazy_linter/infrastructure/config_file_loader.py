"""Load [tool.qt-lazy] from pyproject.toml. Infrastructure I/O only."""

import logging
import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib as toml_lib
else:
    import tomli as toml_lib  # type: ignore[import-not-found]

logger = logging.getLogger(__name__)

TOOL_SECTION = "qt-lazy"


class ConfigFileLoader:
    """
    Loads config from the nearest pyproject.toml, walking up from start.
    """

    @staticmethod
    def find_pyproject(start: Optional[Path] = None) -> Optional[Path]:
        current_path = (start or Path.cwd()).resolve()
        for directory in (current_path, *current_path.parents):
            config_file = directory / "pyproject.toml"
            if config_file.is_file():
                return config_file
        return None

    @staticmethod
    def load_config_from_fs(start: Optional[Path] = None) -> dict[str, object]:
        """Return the [tool.qt-lazy] table, or {} when there is none."""
        config_file = ConfigFileLoader.find_pyproject(start)
        if config_file is None:
            return {}
        try:
            with config_file.open("rb") as f:
                data = toml_lib.load(f)
        except (OSError, toml_lib.TOMLDecodeError) as exc:
            logger.warning("Configuration Warning: cannot read %s: %s", config_file, exc)
            return {}
        tool_section = data.get("tool", {}) or {}
        return dict(tool_section.get(TOOL_SECTION, {}) or {})
