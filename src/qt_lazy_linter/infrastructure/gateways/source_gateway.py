"""Token-level location resolver for one file, built on the tokenize module."""

import io
import tokenize
from typing import Optional

import astroid  # type: ignore[import-untyped]

from qt_lazy_linter.domain.entities import Location, SourceRange
from qt_lazy_linter.domain.exceptions import FrontEndError
from qt_lazy_linter.domain.protocols import SourceManagerProtocol

# Layout tokens carry no source text an edit could anchor on.
_LAYOUT_TOKENS: frozenset[int] = frozenset(
    {
        tokenize.ENCODING,
        tokenize.NL,
        tokenize.NEWLINE,
        tokenize.INDENT,
        tokenize.DEDENT,
        tokenize.ENDMARKER,
        tokenize.COMMENT,
    }
)


class TokenSourceManager(SourceManagerProtocol):
    """
    Source manager over the token stream of one file.

    Columns are character offsets. astroid reports UTF-8 byte offsets
    (they come from the CPython parser), so node positions are converted
    on the way in.
    """

    def __init__(self, source: str, file_path: str = "<string>") -> None:
        self.source = source
        self.file_path = file_path
        self._lines = source.splitlines(keepends=True)
        self._line_offsets = self._compute_line_offsets(self._lines)
        self._tokens = self._tokenize(source, file_path)
        self._index_by_start: dict[Location, int] = {}
        self._index_by_end: dict[Location, int] = {}
        for index, token in enumerate(self._tokens):
            self._index_by_start[Location(*token.start)] = index
            self._index_by_end[Location(*token.end)] = index

    @staticmethod
    def _compute_line_offsets(lines: list[str]) -> list[int]:
        offsets = [0]
        for line in lines:
            offsets.append(offsets[-1] + len(line))
        return offsets

    @staticmethod
    def _tokenize(source: str, file_path: str) -> list[tokenize.TokenInfo]:
        try:
            return [
                token
                for token in tokenize.generate_tokens(io.StringIO(source).readline)
                if token.type not in _LAYOUT_TOKENS and token.string
            ]
        except (tokenize.TokenError, SyntaxError) as exc:
            raise FrontEndError(file_path, f"cannot tokenize: {exc}") from exc

    def _char_column(self, line: int, byte_column: int) -> int:
        if not 1 <= line <= len(self._lines):
            return byte_column
        text = self._lines[line - 1]
        if text.isascii():
            return byte_column
        return len(text.encode("utf-8")[:byte_column].decode("utf-8", errors="ignore"))

    def location_of(self, node: astroid.nodes.NodeNG) -> Location:
        line = getattr(node, "lineno", None)
        column = getattr(node, "col_offset", None)
        if not line or column is None:
            return Location.invalid()
        return Location(line, self._char_column(line, column))

    def end_location_of(self, node: astroid.nodes.NodeNG) -> Location:
        line = getattr(node, "end_lineno", None)
        column = getattr(node, "end_col_offset", None)
        if not line or column is None:
            return Location.invalid()
        return Location(line, self._char_column(line, column))

    def last_token_location(self, node: astroid.nodes.NodeNG) -> Location:
        index = self._index_by_end.get(self.end_location_of(node))
        if index is None:
            return Location.invalid()
        return Location(*self._tokens[index].start)

    def loc_for_end_of_token(self, location: Location, offset: int = 0) -> Location:
        """
        Returns the end of the token that starts at location.

        For example, having this expression:
        QDateTime.currentDateTime()
        ^                            location_of(call)
                                  ^  last_token_location(call)
                 ^                   loc_for_end_of_token(location_of(call))
        """
        index = self._index_by_start.get(location)
        if index is None or offset < 0:
            return Location.invalid()
        index += offset
        if index >= len(self._tokens):
            return Location.invalid()
        return Location(*self._tokens[index].end)

    def is_token_start(self, location: Location) -> bool:
        return location in self._index_by_start

    def is_token_end(self, location: Location) -> bool:
        return location in self._index_by_end

    def is_valid_range(self, source_range: SourceRange) -> bool:
        if not source_range.is_valid():
            return False
        start, end = source_range.start, source_range.end
        start_ok = self.is_token_start(start) or self.is_token_end(start)
        end_ok = self.is_token_end(end) or self.is_token_start(end)
        return start_ok and end_ok

    def text_for_range(self, source_range: SourceRange) -> Optional[str]:
        if not self.is_valid_range(source_range):
            return None
        return self.source[self.offset_of(source_range.start):self.offset_of(source_range.end)]

    def offset_of(self, location: Location) -> int:
        if not location.is_valid():
            raise ValueError(f"Invalid location {location} in {self.file_path}")
        if location.line > len(self._lines):
            return len(self.source)
        return self._line_offsets[location.line - 1] + location.column

    def token_count(self) -> int:
        return len(self._tokens)
