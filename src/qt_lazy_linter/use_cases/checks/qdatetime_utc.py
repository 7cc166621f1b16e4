"""
qdatetime-utc: QDateTime.currentDateTime() immediately converted to UTC.

QDateTime.currentDateTime().toUTC() computes local time first, then converts
it back. QDateTime.currentDateTimeUtc() and the epoch helpers do it in one
step.
"""

import astroid  # type: ignore[import-untyped]

from qt_lazy_linter.domain.entities import MatchOutcome
from qt_lazy_linter.domain.registry import CheckDescriptor, CheckLevel
from qt_lazy_linter.use_cases.checks.base import CheckBase
from qt_lazy_linter.use_cases.fixits import transform_two_calls_into_one
from qt_lazy_linter.use_cases.source_ranges import call_list_for_chain, range_for_node

CHECK_NAME = "qdatetime-utc"
FIXIT_ALL = 1

_FIRST_CALL = "currentDateTime"

# Second call -> equivalent single call on QDateTime.
_CONVERSIONS: dict[str, str] = {
    "toUTC": "currentDateTimeUtc()",
    "toTime_t": "currentDateTimeUtc().toTime_t()",
    "toMSecsSinceEpoch": "currentMSecsSinceEpoch()",
    "toSecsSinceEpoch": "currentSecsSinceEpoch()",
}


class QDateTimeUtcCheck(CheckBase):
    """Collapses currentDateTime().toUTC() style chains into one call."""

    def visit_statement(self, node: astroid.nodes.NodeNG) -> MatchOutcome:
        if not isinstance(node, astroid.nodes.Call) or not isinstance(node.func, astroid.nodes.Attribute):
            return MatchOutcome.no_match()
        replacement_call = _CONVERSIONS.get(node.func.attrname)
        if replacement_call is None or node.args or node.keywords:
            return MatchOutcome.no_match()

        calls = call_list_for_chain(node)
        if len(calls) < 2:
            return MatchOutcome.no_match()

        first_call = calls[-1]
        if not self._is_current_date_time(first_call):
            return MatchOutcome.no_match()

        message = f"Use QDateTime.{replacement_call} instead"
        if len(calls) > 2:
            # Intermediate calls may change the value; report only.
            return self.warning(node, message)
        if not self.is_fixit_enabled(FIXIT_ALL):
            return self.warning(node, message)

        receiver_text = self.source_manager.text_for_range(range_for_node(self.source_manager, first_call.func.expr))
        if receiver_text is None:
            return self.manual_fixit(node, message, FIXIT_ALL, "cannot resolve QDateTime receiver")
        edit = transform_two_calls_into_one(self.source_manager, node, f"{receiver_text}.{replacement_call}")
        if edit is None:
            return self.manual_fixit(node, message, FIXIT_ALL, "cannot resolve call chain boundaries")
        return self.warning(node, message, [edit], fixit_id=FIXIT_ALL)

    def _is_current_date_time(self, call: astroid.nodes.Call) -> bool:
        func = call.func
        if not isinstance(func, astroid.nodes.Attribute) or func.attrname != _FIRST_CALL:
            return False
        if call.args or call.keywords:
            return False
        receiver = func.expr
        if isinstance(receiver, astroid.nodes.Name) and receiver.name == "QDateTime":
            return True
        if isinstance(receiver, astroid.nodes.Attribute) and receiver.attrname == "QDateTime":
            return True
        return self.type_resolver.type_name_of(receiver) == "QDateTime"


DESCRIPTOR = CheckDescriptor.build(
    name=CHECK_NAME,
    level=CheckLevel.LEVEL0,
    factory=QDateTimeUtcCheck,
    fixits=[(FIXIT_ALL, "fix-qdatetime-utc")],
    description="Use QDateTime.currentDateTimeUtc() instead of currentDateTime().toUTC()",
)
