"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

from pathlib import Path
from typing import List

from qt_lazy_linter.domain.protocols import FileSystemProtocol


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def resolve_path(self, path: str) -> str:
        """Resolve and normalize a path string."""
        return str(Path(path).resolve())

    def glob_python_files(self, path: str) -> List[str]:
        """Get all Python files in path (recursive if directory), sorted."""
        path_obj = Path(path).resolve()
        if path_obj.is_dir():
            return sorted(str(p) for p in path_obj.glob("**/*.py") if p.is_file())
        return [str(path_obj)] if path_obj.suffix == ".py" else []
