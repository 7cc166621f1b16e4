"""Source-range utilities: token boundaries, subtree extents and call chains."""

from typing import Optional

import astroid  # type: ignore[import-untyped]

from qt_lazy_linter.domain.entities import Location, SourceRange
from qt_lazy_linter.domain.protocols import SourceManagerProtocol


def loc_for_end_of_token(sm: SourceManagerProtocol, location: Location, offset: int = 0) -> Location:
    """Location right after the token starting at location, skipping offset more tokens."""
    if not location.is_valid():
        return Location.invalid()
    return sm.loc_for_end_of_token(location, offset)


def biggest_location_in_node(sm: SourceManagerProtocol, node: Optional[astroid.nodes.NodeNG]) -> Location:
    """
    Goes through node and all of its descendants and returns the biggest
    last-token location.

    A node's own end is not always the furthest point of its text, e.g. when
    a nested call's argument ends past what the outer node reports.
    """
    if node is None:
        return Location.invalid()
    biggest = sm.last_token_location(node)
    for child in node.get_children():
        candidate = biggest_location_in_node(sm, child)
        if candidate.is_valid() and (not biggest.is_valid() or biggest < candidate):
            biggest = candidate
    return biggest


def range_for_node(sm: SourceManagerProtocol, node: astroid.nodes.NodeNG) -> SourceRange:
    """From the node's start to right after its furthest token."""
    start = sm.location_of(node)
    end = loc_for_end_of_token(sm, biggest_location_in_node(sm, node))
    return SourceRange(start, end)


def terminal_name(node: Optional[astroid.nodes.NodeNG]) -> Optional[str]:
    """QtCore.QString -> 'QString', QString -> 'QString'."""
    if isinstance(node, astroid.nodes.Name):
        return node.name
    if isinstance(node, astroid.nodes.Attribute):
        return node.attrname
    return None


def receiver_of(node: astroid.nodes.NodeNG) -> Optional[astroid.nodes.NodeNG]:
    """
    The expression whose value node consumes, per expression kind.

    recv.method(...) -> recv
    func(...)        -> None (start of a chain)
    func(...)(...)   -> func(...)
    value[...]       -> value
    recv.attr        -> recv
    """
    if isinstance(node, astroid.nodes.Call):
        func = node.func
        if isinstance(func, astroid.nodes.Attribute):
            return func.expr
        if isinstance(func, (astroid.nodes.Call, astroid.nodes.Subscript)):
            return func
        return None
    if isinstance(node, astroid.nodes.Subscript):
        return node.value
    if isinstance(node, astroid.nodes.Attribute):
        return node.expr
    return None


def call_list_for_chain(last_call: astroid.nodes.Call) -> list[astroid.nodes.Call]:
    """
    Calls of a chain, outermost first.

    For a.first(x).second() this returns [second-call, first-call]; the
    last element is the call that starts the chain.
    """
    calls: list[astroid.nodes.Call] = []
    current: Optional[astroid.nodes.NodeNG] = last_call
    while current is not None:
        if isinstance(current, astroid.nodes.Call):
            calls.append(current)
        current = receiver_of(current)
    return calls
