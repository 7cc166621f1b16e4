"""Unit tests for source-range utilities and call chains."""

from qt_lazy_linter.domain.entities import Location
from qt_lazy_linter.use_cases.source_ranges import (
    biggest_location_in_node,
    call_list_for_chain,
    loc_for_end_of_token,
    range_for_node,
    receiver_of,
)
from tests.linter_test_utils import parse


class TestCallChains:
    def test_two_call_chain_outermost_first(self) -> None:
        module, _ = parse("a.first(x).second()\n")
        outer = module.body[0].value
        calls = call_list_for_chain(outer)
        assert [call.func.attrname for call in calls] == ["second", "first"]

    def test_single_call(self) -> None:
        module, _ = parse("items[0].run()\n")
        assert len(call_list_for_chain(module.body[0].value)) == 1

    def test_call_of_call(self) -> None:
        module, _ = parse("make()(1)\n")
        outer = module.body[0].value
        calls = call_list_for_chain(outer)
        assert calls == [outer, outer.func]

    def test_chain_through_subscript(self) -> None:
        module, _ = parse("load()[0].name()\n")
        calls = call_list_for_chain(module.body[0].value)
        assert len(calls) == 2
        assert calls[-1].func.name == "load"

    def test_receiver_of(self) -> None:
        module, _ = parse("obj.method(1)\nfunc(2)\n")
        method_call = module.body[0].value
        assert receiver_of(method_call) is method_call.func.expr
        assert receiver_of(module.body[1].value) is None
        assert receiver_of(method_call.func) is method_call.func.expr


class TestRanges:
    def test_range_for_node_covers_descendants(self) -> None:
        code = "x = foo(bar, [1, 2])\n"
        module, sm = parse(code)
        call = module.body[0].value
        source_range = range_for_node(sm, call)
        assert sm.text_for_range(source_range) == "foo(bar, [1, 2])"

    def test_range_for_multiline_node(self) -> None:
        code = "x = foo(\n    bar,\n)\n"
        module, sm = parse(code)
        source_range = range_for_node(sm, module.body[0].value)
        assert source_range.start == Location(1, 4)
        assert source_range.end == Location(3, 1)

    def test_biggest_location(self) -> None:
        module, sm = parse("QDateTime.currentDateTime().toUTC()\n")
        assert biggest_location_in_node(sm, module.body[0].value) == Location(1, 34)
        assert not biggest_location_in_node(sm, None).is_valid()

    def test_end_of_invalid_location_is_invalid(self) -> None:
        _, sm = parse("x = 1\n")
        assert not loc_for_end_of_token(sm, Location.invalid()).is_valid()
        assert loc_for_end_of_token(sm, Location(1, 0)) == Location(1, 1)
