"""
ctor-missing-parent-argument: QObject subclasses that cannot be parented.

A QObject-derived class whose __init__ takes no parent cannot be placed in
an ownership tree, and one that takes a parent but drops it leaks the
object. Never auto-fixed: where the argument belongs in the base call is
ambiguous.
"""

from typing import Iterator, Optional

import astroid  # type: ignore[import-untyped]

from qt_lazy_linter.domain.entities import MatchOutcome
from qt_lazy_linter.domain.registry import CheckDescriptor, CheckLevel
from qt_lazy_linter.use_cases.checks.base import CheckBase
from qt_lazy_linter.use_cases.source_ranges import terminal_name

CHECK_NAME = "ctor-missing-parent-argument"

PARENT_PARAMETER = "parent"


class CtorMissingParentArgumentCheck(CheckBase):
    """Checks __init__ of parent-tracking Qt subclasses."""

    def visit_declaration(self, node: astroid.nodes.NodeNG) -> MatchOutcome:
        if not isinstance(node, astroid.nodes.ClassDef):
            return MatchOutcome.no_match()

        parent_classes = self.context.config.parent_classes
        base_names = self.type_resolver.class_names_of(node)
        if not base_names & parent_classes:
            return MatchOutcome.no_match()

        init = self._own_init(node)
        if init is None:
            # The inherited __init__ already takes the parent.
            return MatchOutcome.no_match()
        if init.args.vararg or init.args.kwarg:
            # *args/**kwargs may carry the parent through.
            return MatchOutcome.no_match()

        parent_arg = self._parent_parameter(init)
        if parent_arg is None:
            return self.warning(node, f"{node.name} should take a parent argument in __init__")

        if not any(self._forwards_to_base(use, node) for use in self._uses_of(parent_arg.name, init)):
            return self.warning(
                init,
                f"{node.name}.__init__ receives '{parent_arg.name}' but does not forward it to the base initializer",
            )
        return MatchOutcome.no_match()

    @staticmethod
    def _own_init(node: astroid.nodes.ClassDef) -> Optional[astroid.nodes.FunctionDef]:
        for child in node.body:
            if isinstance(child, astroid.nodes.FunctionDef) and child.name == "__init__":
                return child
        return None

    def _parent_parameter(self, init: astroid.nodes.FunctionDef) -> Optional[astroid.nodes.AssignName]:
        args = init.args
        candidates = list(getattr(args, "posonlyargs", None) or []) + list(args.args or [])
        candidates = candidates[1:] + list(getattr(args, "kwonlyargs", None) or [])
        parent_classes = self.context.config.parent_classes
        for arg in candidates:
            if arg.name == PARENT_PARAMETER:
                return arg
        for arg in candidates:
            annotation = self.type_resolver.arg_annotation(arg, args)
            if self.type_resolver.annotation_names(annotation) & parent_classes:
                return arg
        return None

    @staticmethod
    def _uses_of(name: str, init: astroid.nodes.FunctionDef) -> Iterator[astroid.nodes.Name]:
        for statement in init.body:
            for use in statement.nodes_of_class(astroid.nodes.Name):
                if use.name == name:
                    yield use

    def _forwards_to_base(self, use: astroid.nodes.Name, cls: astroid.nodes.ClassDef) -> bool:
        """True when use is passed straight to super().__init__ or Base.__init__."""
        enclosing = self._enclosing_call(use)
        if enclosing is None:
            return False
        call, direct = enclosing
        return direct and self._is_base_init_call(call, cls)

    def _enclosing_call(self, use: astroid.nodes.Name) -> Optional[tuple[astroid.nodes.Call, bool]]:
        """First call above use, and whether use is one of its arguments as is."""
        child: astroid.nodes.NodeNG = use
        for ancestor in self.context.ancestors(use):
            if isinstance(ancestor, astroid.nodes.Call):
                if child is ancestor.func:
                    return None
                direct = child is use or (isinstance(child, astroid.nodes.Keyword) and child.value is use)
                return ancestor, direct
            child = ancestor
        return None

    @staticmethod
    def _is_base_init_call(call: astroid.nodes.Call, cls: astroid.nodes.ClassDef) -> bool:
        func = call.func
        if not isinstance(func, astroid.nodes.Attribute) or func.attrname != "__init__":
            return False
        receiver = func.expr
        if isinstance(receiver, astroid.nodes.Call):
            return isinstance(receiver.func, astroid.nodes.Name) and receiver.func.name == "super"
        base_names = {terminal_name(base) for base in cls.bases}
        name = terminal_name(receiver)
        return name is not None and name in base_names


DESCRIPTOR = CheckDescriptor.build(
    name=CHECK_NAME,
    level=CheckLevel.LEVEL2,
    factory=CtorMissingParentArgumentCheck,
    description="QObject subclasses should take a parent in __init__ and forward it to the base class",
)
