"""
qt4-qstring-from-array: QString built implicitly from raw bytes.

With the Qt4 bindings QString(b"...") and friends decode through the codec
set by QTextCodec.setCodecForCStrings(), which is rarely what the author
meant. Making the encoding explicit with QString.fromLatin1() keeps the
current behavior and survives the port to newer bindings.
"""

from typing import Optional

import astroid  # type: ignore[import-untyped]

from qt_lazy_linter.domain.entities import MatchOutcome
from qt_lazy_linter.domain.registry import CheckDescriptor, CheckLevel
from qt_lazy_linter.use_cases.checks.base import CheckBase
from qt_lazy_linter.use_cases.fixits import replace_token, wrap_node_in_call
from qt_lazy_linter.use_cases.source_ranges import terminal_name

CHECK_NAME = "qt4-qstring-from-array"
FIXIT_TO_FROM_LATIN1 = 1

QSTRING = "QString"
FROM_LATIN1 = "QString.fromLatin1"

# Resolved type name -> how the message names it.
_RAW_TYPES: dict[str, str] = {
    "bytes": "bytes",
    "bytearray": "QByteArray",
    "QByteArray": "QByteArray",
}

_COMPARISON_METHODS: dict[str, str] = {
    "==": "__eq__",
    "!=": "__ne__",
    "<": "__lt__",
    "<=": "__le__",
    ">": "__gt__",
    ">=": "__ge__",
}

_MEMBER_METHODS: frozenset[str] = frozenset({"append", "prepend"})


class QStringFromArrayCheck(CheckBase):
    """Flags QString construction from bytes and QByteArray."""

    def visit_statement(self, node: astroid.nodes.NodeNG) -> MatchOutcome:
        if isinstance(node, astroid.nodes.Call):
            if terminal_name(node.func) == QSTRING:
                return self._check_ctor_call(node)
            if isinstance(node.func, astroid.nodes.Attribute) and node.func.attrname in _MEMBER_METHODS:
                return self._check_member_call(node)
            return MatchOutcome.no_match()
        if isinstance(node, astroid.nodes.Compare):
            return self._check_comparison(node)
        if isinstance(node, astroid.nodes.AugAssign) and node.op == "+=":
            return self._check_operator(node, "__iadd__", node.target, node.value)
        return MatchOutcome.no_match()

    def _raw_kind(self, node: astroid.nodes.NodeNG) -> Optional[str]:
        type_name = self.type_resolver.type_name_of(node)
        if type_name is None:
            return None
        return _RAW_TYPES.get(type_name)

    def _is_qstring(self, node: astroid.nodes.NodeNG) -> bool:
        return self.type_resolver.type_name_of(node) == QSTRING

    def _single_argument(self, call: astroid.nodes.Call) -> Optional[astroid.nodes.NodeNG]:
        if len(call.args) != 1 or call.keywords:
            return None
        arg = call.args[0]
        if isinstance(arg, astroid.nodes.Starred):
            return None
        return arg

    def _check_ctor_call(self, call: astroid.nodes.Call) -> MatchOutcome:
        arg = self._single_argument(call)
        if arg is None:
            return MatchOutcome.no_match()
        kind = self._raw_kind(arg)
        if kind is None:
            return MatchOutcome.no_match()

        message = f"QString({kind}) constructor being called"
        if not self.is_fixit_enabled(FIXIT_TO_FROM_LATIN1):
            return self.warning(call, message)

        # QString(raw) and QtCore.QString(raw): only the QString token changes.
        sm = self.source_manager
        token = sm.last_token_location(call.func)
        edit = replace_token(sm, token, FROM_LATIN1) if token.is_valid() else None
        if edit is None:
            return self.manual_fixit(call, message, FIXIT_TO_FROM_LATIN1, "cannot resolve the QString token")
        return self.warning(call, message, [edit], fixit_id=FIXIT_TO_FROM_LATIN1)

    def _check_member_call(self, call: astroid.nodes.Call) -> MatchOutcome:
        arg = self._single_argument(call)
        if arg is None or not self._is_qstring(call.func.expr):
            return MatchOutcome.no_match()
        return self._wrap_operand(call, call.func.attrname, arg)

    def _check_comparison(self, node: astroid.nodes.Compare) -> MatchOutcome:
        if len(node.ops) != 1:
            return MatchOutcome.no_match()
        operator, right = node.ops[0]
        method = _COMPARISON_METHODS.get(operator)
        if method is None:
            return MatchOutcome.no_match()
        return self._check_operator(node, method, node.left, right)

    def _check_operator(
        self,
        node: astroid.nodes.NodeNG,
        method: str,
        left: astroid.nodes.NodeNG,
        right: astroid.nodes.NodeNG,
    ) -> MatchOutcome:
        if not self._is_qstring(left):
            return MatchOutcome.no_match()
        return self._wrap_operand(node, method, right)

    def _wrap_operand(self, node: astroid.nodes.NodeNG, method: str, operand: astroid.nodes.NodeNG) -> MatchOutcome:
        kind = self._raw_kind(operand)
        if kind is None:
            return MatchOutcome.no_match()

        message = f"QString.{method}({kind}) being called"
        if not self.is_fixit_enabled(FIXIT_TO_FROM_LATIN1):
            return self.warning(node, message)

        edits = wrap_node_in_call(self.source_manager, FROM_LATIN1, operand)
        if edits is None:
            return self.internal_error(node)
        return self.warning(node, message, edits, fixit_id=FIXIT_TO_FROM_LATIN1)


DESCRIPTOR = CheckDescriptor.build(
    name=CHECK_NAME,
    level=CheckLevel.HIDDEN,
    factory=QStringFromArrayCheck,
    fixits=[(FIXIT_TO_FROM_LATIN1, "fix-qt4-qstring-from-array")],
    description="Make the encoding explicit when building a QString from bytes (Qt4 bindings)",
)
