from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    import astroid  # type: ignore[import-untyped]

    from qt_lazy_linter.domain.entities import Location, SourceRange


class SourceManagerProtocol(Protocol):
    """Maps AST nodes to locations and answers token-boundary queries for one file."""

    file_path: str
    source: str

    def location_of(self, node: "astroid.nodes.NodeNG") -> "Location":
        """Start of the node, or an invalid location when it has none."""
        ...

    def end_location_of(self, node: "astroid.nodes.NodeNG") -> "Location":
        """Exclusive end of the node, or an invalid location."""
        ...

    def last_token_location(self, node: "astroid.nodes.NodeNG") -> "Location":
        """Start of the node's last token, or an invalid location."""
        ...

    def loc_for_end_of_token(self, location: "Location", offset: int = 0) -> "Location":
        """End of the token starting at location, after skipping offset more tokens."""
        ...

    def is_token_start(self, location: "Location") -> bool:
        ...

    def is_token_end(self, location: "Location") -> bool:
        ...

    def is_valid_range(self, source_range: "SourceRange") -> bool:
        ...

    def text_for_range(self, source_range: "SourceRange") -> Optional[str]:
        ...

    def offset_of(self, location: "Location") -> int:
        """Absolute character offset of a location in the source text."""
        ...


class TypeResolverProtocol(Protocol):
    """Resolves the class name an expression evaluates to (e.g. 'QString', 'bytes')."""

    def type_name_of(self, node: "astroid.nodes.NodeNG") -> Optional[str]:
        ...

    def class_names_of(self, node: "astroid.nodes.ClassDef") -> set[str]:
        """Names of the class's bases and resolvable ancestors."""
        ...

    def annotation_names(self, annotation: Optional["astroid.nodes.NodeNG"]) -> set[str]:
        """Class names mentioned by an annotation (Optional[QObject] -> {'Optional', 'QObject'})."""
        ...

    def arg_annotation(
        self, def_node: "astroid.nodes.AssignName", args: "astroid.nodes.Arguments"
    ) -> Optional["astroid.nodes.NodeNG"]:
        """Annotation of one parameter of args, if any."""
        ...


class FrontEndProtocol(Protocol):
    """Produces one AST per file. Raises FrontEndError when it cannot."""

    def parse_source(self, source: str, file_path: str) -> "astroid.nodes.Module":
        ...

    def read_source(self, file_path: str) -> str:
        ...


class FixerGatewayProtocol(Protocol):
    """Writes fixed source text back to disk."""

    def write_source(self, file_path: str, original: str, fixed: str) -> bool:
        """Validate and write fixed text. Returns True if the file was modified."""
        ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def resolve_path(self, path: str) -> str:
        ...

    def glob_python_files(self, path: str) -> list[str]:
        """Get all Python files in path (recursive if directory), sorted."""
        ...
