"""Unit tests for TokenSourceManager."""

import unittest

import pytest

from qt_lazy_linter.domain.entities import Location, SourceRange
from qt_lazy_linter.domain.exceptions import FrontEndError
from qt_lazy_linter.infrastructure.gateways.source_gateway import TokenSourceManager
from tests.linter_test_utils import parse

CODE = "x = QDateTime.currentDateTime().toUTC()\n"


class TestTokenSourceManager(unittest.TestCase):
    def setUp(self) -> None:
        self.module, self.sm = parse(CODE)
        self.call = self.module.body[0].value

    def test_location_of_node(self) -> None:
        assert self.sm.location_of(self.call) == Location(1, 4)
        assert self.sm.end_location_of(self.call) == Location(1, 39)

    def test_last_token_location(self) -> None:
        assert self.sm.last_token_location(self.call) == Location(1, 38)

    def test_loc_for_end_of_token(self) -> None:
        assert self.sm.loc_for_end_of_token(Location(1, 4)) == Location(1, 13)

    def test_loc_for_end_of_token_with_offset(self) -> None:
        # QDateTime . currentDateTime
        assert self.sm.loc_for_end_of_token(Location(1, 4), offset=2) == Location(1, 29)

    def test_loc_for_end_of_token_off_boundary(self) -> None:
        assert not self.sm.loc_for_end_of_token(Location(1, 5)).is_valid()
        assert not self.sm.loc_for_end_of_token(Location(1, 38), offset=5).is_valid()

    def test_is_valid_range(self) -> None:
        assert self.sm.is_valid_range(SourceRange(Location(1, 4), Location(1, 39)))
        assert not self.sm.is_valid_range(SourceRange(Location(1, 5), Location(1, 39)))
        assert not self.sm.is_valid_range(SourceRange(Location(1, 4), Location(1, 10)))

    def test_text_for_range(self) -> None:
        text = self.sm.text_for_range(SourceRange(Location(1, 4), Location(1, 39)))
        assert text == "QDateTime.currentDateTime().toUTC()"
        assert self.sm.text_for_range(SourceRange(Location(1, 5), Location(1, 39))) is None

    def test_offset_of(self) -> None:
        sm = TokenSourceManager("a = 1\nbb = 2\n")
        assert sm.offset_of(Location(2, 0)) == 6
        with pytest.raises(ValueError):
            sm.offset_of(Location.invalid())


class TestTokenSourceManagerEdgeCases:
    def test_columns_are_characters_not_bytes(self) -> None:
        module, sm = parse('x = "é"; y = raw\n')
        name = module.body[1].value
        assert sm.location_of(name) == Location(1, 13)
        assert sm.loc_for_end_of_token(Location(1, 13)) == Location(1, 16)

    def test_multiline_node(self) -> None:
        code = "value = compute(\n    first,\n    second,\n)\n"
        module, sm = parse(code)
        call = module.body[0].value
        assert sm.last_token_location(call) == Location(4, 0)
        assert sm.end_location_of(call) == Location(4, 1)

    def test_tokenize_failure_is_front_end_error(self) -> None:
        with pytest.raises(FrontEndError):
            TokenSourceManager("x = (\n", "broken.py")

    def test_comments_are_not_tokens(self) -> None:
        sm = TokenSourceManager("x = 1  # note\n")
        assert not sm.is_token_start(Location(1, 7))
        assert sm.token_count() == 3
