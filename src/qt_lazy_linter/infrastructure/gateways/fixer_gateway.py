"""LibCST validated fixer gateway."""

import logging
import os
import tempfile
from typing import Optional

import libcst as cst

from qt_lazy_linter.domain.protocols import FixerGatewayProtocol

logger = logging.getLogger(__name__)


class EditFixerGateway(FixerGatewayProtocol):
    """Gateway for writing fixed source back to disk, after LibCST checks it still parses."""

    def __init__(self, python_version: Optional[str] = None) -> None:
        self.python_version = python_version

    def _parser_config(self) -> Optional[cst.PartialParserConfig]:
        if not self.python_version:
            return None
        try:
            return cst.PartialParserConfig(python_version=self.python_version)
        except ValueError as exc:
            logger.warning("Ignoring python_version %r: %s", self.python_version, exc)
            return None

    def is_valid_source(self, source: str) -> bool:
        config = self._parser_config()
        try:
            if config is None:
                cst.parse_module(source)
            else:
                cst.parse_module(source, config=config)
        except cst.ParserSyntaxError:
            return False
        return True

    def write_source(self, file_path: str, original: str, fixed: str) -> bool:
        """
        Write fixed over file_path.

        Args:
            file_path: Path to the file to modify
            original: Text the edits were computed against
            fixed: Text after applying the edits

        Returns:
            True if the file was modified, False otherwise
        """
        if fixed == original:
            return False
        if not self.is_valid_source(fixed):
            logger.error("Refusing to write %s: fixed source does not parse", file_path)
            return False

        directory = os.path.dirname(os.path.abspath(file_path))
        fd, tmp_path = tempfile.mkstemp(prefix=".qtlazy-", suffix=".py", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(fixed)
            if os.path.exists(file_path):
                os.chmod(tmp_path, os.stat(file_path).st_mode & 0o7777)
            os.replace(tmp_path, file_path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.info("Fixed %s", file_path)
        return True
