"""Shared per-run state handed to every check."""

from typing import TYPE_CHECKING, Iterator, Optional

import astroid  # type: ignore[import-untyped]

from qt_lazy_linter.domain.config import RunConfiguration
from qt_lazy_linter.domain.protocols import SourceManagerProtocol, TypeResolverProtocol

if TYPE_CHECKING:
    from qt_lazy_linter.domain.registry import CheckRegistry


class AnalysisContext:
    """
    Read-only view of one file's run.

    The parent-link map is a non-owning index from node identity to the
    node's syntactic parent. It is built on first use, by walking the tree
    once, and only ever appended to.
    """

    def __init__(
        self,
        module: astroid.nodes.Module,
        source_manager: SourceManagerProtocol,
        config: RunConfiguration,
        registry: "CheckRegistry",
        type_resolver: TypeResolverProtocol,
    ) -> None:
        self.module = module
        self.source_manager = source_manager
        self.config = config
        self.registry = registry
        self.type_resolver = type_resolver
        self._parent_map: Optional[dict[int, astroid.nodes.NodeNG]] = None

    @property
    def file_path(self) -> str:
        return self.source_manager.file_path

    @property
    def parent_map(self) -> dict[int, astroid.nodes.NodeNG]:
        if self._parent_map is None:
            self._parent_map = self._build_parent_map(self.module)
        return self._parent_map

    @staticmethod
    def _build_parent_map(root: astroid.nodes.NodeNG) -> dict[int, astroid.nodes.NodeNG]:
        parents: dict[int, astroid.nodes.NodeNG] = {}
        stack = [root]
        while stack:
            node = stack.pop()
            for child in node.get_children():
                parents.setdefault(id(child), node)
                stack.append(child)
        return parents

    def parent(self, node: astroid.nodes.NodeNG) -> Optional[astroid.nodes.NodeNG]:
        return self.parent_map.get(id(node))

    def ancestors(self, node: astroid.nodes.NodeNG) -> Iterator[astroid.nodes.NodeNG]:
        """Walk upward from node (exclusive) to the module."""
        current = self.parent(node)
        while current is not None:
            yield current
            current = self.parent(current)

    def is_fixit_enabled(self, flag_name: str) -> bool:
        return self.config.is_fixit_enabled(flag_name)
