"""
Fix-it synthesis: turn a matched pattern into exact source edits.

Every helper returns None instead of an edit when a range does not land on
real token boundaries; callers decide whether that is an internal error or
an escalation.
"""

from typing import Iterable, Optional

import astroid  # type: ignore[import-untyped]

from qt_lazy_linter.domain.entities import (
    Edit,
    Insertion,
    Location,
    Replacement,
    SourceRange,
    edit_sort_key,
    edits_overlap,
)
from qt_lazy_linter.domain.protocols import SourceManagerProtocol
from qt_lazy_linter.use_cases.source_ranges import (
    biggest_location_in_node,
    call_list_for_chain,
    loc_for_end_of_token,
    range_for_node,
)


def create_replacement(source_range: SourceRange, text: str) -> Replacement:
    return Replacement(source_range, text)


def create_insertion(at: Location, text: str) -> Insertion:
    return Insertion(at, text)


def insert_parent_method_call(method: str, source_range: SourceRange) -> list[Edit]:
    """
    Wrap the text of source_range into a call to method.

    foo  ->  method(foo)
    """
    return [
        create_insertion(source_range.start, f"{method}("),
        create_insertion(source_range.end, ")"),
    ]


def wrap_node_in_call(
    sm: SourceManagerProtocol, method: str, node: astroid.nodes.NodeNG
) -> Optional[list[Edit]]:
    """Wrap the whole text of node (descendants included) into method(...)."""
    source_range = range_for_node(sm, node)
    if not sm.is_valid_range(source_range):
        return None
    return insert_parent_method_call(method, source_range)


def replace_token(sm: SourceManagerProtocol, location: Location, text: str) -> Optional[Replacement]:
    """Replace the single token starting at location."""
    source_range = SourceRange(location, loc_for_end_of_token(sm, location))
    if not sm.is_valid_range(source_range):
        return None
    return create_replacement(source_range, text)


def transform_two_calls_into_one(
    sm: SourceManagerProtocol, outer_call: astroid.nodes.Call, replacement: str
) -> Optional[Replacement]:
    """
    Replace a chain of exactly two calls with replacement.

    QDateTime.currentDateTime().toUTC()
    ^                                   start of the first call
                                      ^ end of the last token of the outer call

    The end is taken from the furthest token anywhere under the outer call,
    then extended to that token's end. Both calls must start at the same
    token; (QDateTime.currentDateTime()).toUTC() has no single range to
    replace.
    """
    calls = call_list_for_chain(outer_call)
    if len(calls) != 2:
        return None

    first_call = calls[-1]
    start = sm.location_of(first_call)
    if start != sm.location_of(outer_call):
        return None
    end = loc_for_end_of_token(sm, biggest_location_in_node(sm, outer_call))
    source_range = SourceRange(start, end)
    if not sm.is_valid_range(source_range):
        return None
    return create_replacement(source_range, replacement)


def render_edits(sm: SourceManagerProtocol, edits: Iterable[Edit]) -> str:
    """
    Apply edits to the source text in one pass.

    Edits must not overlap; insertions and replacements sharing a boundary
    keep their source order.
    """
    ordered = sorted(edits, key=edit_sort_key)
    for first, second in zip(ordered, ordered[1:]):
        if edits_overlap(first, second):
            raise ValueError(f"Overlapping edits at {first.start} and {second.start}")

    source = sm.source
    pieces: list[str] = []
    cursor = 0
    for edit in ordered:
        start = sm.offset_of(edit.start)
        end = sm.offset_of(edit.end)
        if start < cursor:
            raise ValueError(f"Edit at {edit.start} starts before the previous edit ends")
        pieces.append(source[cursor:start])
        pieces.append(edit.text)
        cursor = end
    pieces.append(source[cursor:])
    return "".join(pieces)
