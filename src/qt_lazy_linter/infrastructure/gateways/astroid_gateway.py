import re
import tokenize
from pathlib import Path
from typing import Optional, Set

import astroid  # type: ignore[import-untyped]

from qt_lazy_linter.domain.exceptions import FrontEndError
from qt_lazy_linter.domain.protocols import FrontEndProtocol, TypeResolverProtocol
from qt_lazy_linter.use_cases.source_ranges import terminal_name

# Return types of Qt methods that astroid cannot see when the bindings are
# compiled extensions (or not installed at all). Keyed by (class, method).
_KNOWN_QT_RETURNS: dict[tuple[str, str], str] = {
    ("QString", "toLatin1"): "QByteArray",
    ("QString", "toUtf8"): "QByteArray",
    ("QString", "toLocal8Bit"): "QByteArray",
    ("QString", "toAscii"): "QByteArray",
    ("QString", "arg"): "QString",
    ("QString", "trimmed"): "QString",
    ("QString", "toLower"): "QString",
    ("QString", "toUpper"): "QString",
    ("QByteArray", "data"): "bytes",
    ("QByteArray", "constData"): "bytes",
    ("QByteArray", "toHex"): "QByteArray",
    ("QDateTime", "currentDateTime"): "QDateTime",
    ("QDateTime", "currentDateTimeUtc"): "QDateTime",
    ("QDateTime", "toUTC"): "QDateTime",
    ("QDateTime", "toLocalTime"): "QDateTime",
}

_BUILTIN_VALUE_TYPES: frozenset[str] = frozenset({"bytes", "bytearray", "str", "memoryview"})

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _looks_like_class(name: Optional[str]) -> bool:
    return bool(name) and name[0].isupper()


class AstroidGateway(FrontEndProtocol, TypeResolverProtocol):
    """Front end (astroid parsing) and type discovery for Qt and bytes values."""

    def read_source(self, file_path: str) -> str:
        """Read a file honoring its PEP 263 coding cookie."""
        try:
            with tokenize.open(file_path) as f:
                return f.read()
        except (OSError, SyntaxError, UnicodeDecodeError) as exc:
            raise FrontEndError(file_path, f"cannot read: {exc}") from exc

    def parse_source(self, source: str, file_path: str) -> astroid.nodes.Module:
        try:
            return astroid.parse(source, module_name=Path(file_path).stem, path=file_path)
        except (astroid.AstroidBuildingError, SyntaxError, ValueError) as exc:
            raise FrontEndError(file_path, f"cannot parse: {exc}") from exc

    def parse_file(self, file_path: str) -> astroid.nodes.Module:
        return self.parse_source(self.read_source(file_path), file_path)

    def type_name_of(self, node: astroid.nodes.NodeNG) -> Optional[str]:
        """
        Best-effort class name of the value an expression evaluates to.

        Annotations and assignments are read first ("stickers"), then
        astroid inference is tried.
        """
        return self._type_name_of(node, set())

    def _type_name_of(self, node: Optional[astroid.nodes.NodeNG], visited: Set[int]) -> Optional[str]:
        if node is None or id(node) in visited:
            return None
        visited.add(id(node))

        if isinstance(node, astroid.nodes.Const):
            return type(node.value).__name__
        if isinstance(node, astroid.nodes.Call):
            res = self._type_name_of_call(node, visited)
            if res:
                return res
        if isinstance(node, (astroid.nodes.Name, astroid.nodes.AssignName)):
            res = self._type_name_of_name(node, visited)
            if res:
                return res
        return self._inferred_type_name(node)

    def _type_name_of_call(self, node: astroid.nodes.Call, visited: Set[int]) -> Optional[str]:
        func = node.func
        try:
            for inf in func.infer():
                if isinstance(inf, astroid.nodes.ClassDef):
                    return inf.name
                if isinstance(inf, astroid.nodes.FunctionDef) and inf.returns is not None:
                    return self._annotation_type_name(inf.returns)
                break
        except astroid.InferenceError:
            pass

        name = terminal_name(func)
        if isinstance(func, astroid.nodes.Attribute):
            receiver_name = terminal_name(func.expr)
            # Named constructors: QString.fromLatin1(...), QByteArray.fromHex(...)
            if name and name.startswith("from") and _looks_like_class(receiver_name):
                return receiver_name
            receiver_type = self._type_name_of(func.expr, visited)
            if receiver_type is None and _looks_like_class(receiver_name):
                receiver_type = receiver_name
            if receiver_type and name and (receiver_type, name) in _KNOWN_QT_RETURNS:
                return _KNOWN_QT_RETURNS[(receiver_type, name)]
            return None
        if _looks_like_class(name) or name in _BUILTIN_VALUE_TYPES:
            return name
        return None

    def _type_name_of_name(
        self, node: "astroid.nodes.Name | astroid.nodes.AssignName", visited: Set[int]
    ) -> Optional[str]:
        if isinstance(node.parent, astroid.nodes.AugAssign):
            # x += y reads x first: only the bindings before the statement count.
            here = (node.lineno, node.col_offset)
            assignments = [
                a for a in node.scope().locals.get(node.name, []) if (a.lineno, a.col_offset) < here
            ]
        else:
            try:
                _, assignments = node.lookup(node.name)
            except (AttributeError, astroid.InferenceError):
                return None
        for def_node in reversed(assignments):
            parent = def_node.parent
            if isinstance(parent, astroid.nodes.AnnAssign) and parent.annotation is not None:
                return self._annotation_type_name(parent.annotation)
            if isinstance(parent, astroid.nodes.Arguments):
                res = self._arg_annotation_type_name(def_node, parent)
                if res:
                    return res
                continue
            if isinstance(parent, astroid.nodes.Assign):
                res = self._type_name_of(parent.value, visited)
                if res:
                    return res
        return None

    def _arg_annotation_type_name(
        self, def_node: astroid.nodes.NodeNG, args: astroid.nodes.Arguments
    ) -> Optional[str]:
        """Helper to find annotation for a specific argument definition."""
        annotation = self.arg_annotation(def_node, args)
        if annotation is not None:
            return self._annotation_type_name(annotation)
        return None

    @staticmethod
    def arg_annotation(
        def_node: astroid.nodes.NodeNG, args: astroid.nodes.Arguments
    ) -> Optional[astroid.nodes.NodeNG]:
        pairs = (
            list(zip(getattr(args, "posonlyargs", None) or [], getattr(args, "posonlyargs_annotations", None) or []))
            + list(zip(args.args or [], args.annotations or []))
            + list(zip(getattr(args, "kwonlyargs", None) or [], getattr(args, "kwonlyargs_annotations", None) or []))
        )
        for arg, annotation in pairs:
            if arg is def_node:
                return annotation
        return None

    def _annotation_type_name(self, annotation: astroid.nodes.NodeNG) -> Optional[str]:
        """Optional[QString] / 'QString | None' / QtCore.QString -> 'QString'."""
        if isinstance(annotation, (astroid.nodes.Name, astroid.nodes.Attribute)):
            return terminal_name(annotation)
        if isinstance(annotation, astroid.nodes.Const) and isinstance(annotation.value, str):
            names = [n for n in _IDENTIFIER_RE.findall(annotation.value) if n not in ("Optional", "None")]
            return names[-1] if names else None
        if isinstance(annotation, astroid.nodes.Subscript) and terminal_name(annotation.value) == "Optional":
            return self._annotation_type_name(annotation.slice)
        if isinstance(annotation, astroid.nodes.BinOp) and annotation.op == "|":
            for side in (annotation.left, annotation.right):
                if not (isinstance(side, astroid.nodes.Const) and side.value is None):
                    return self._annotation_type_name(side)
        return None

    def _inferred_type_name(self, node: astroid.nodes.NodeNG) -> Optional[str]:
        try:
            for inf in node.infer():
                if inf is astroid.Uninferable:
                    continue
                if isinstance(inf, astroid.Instance):
                    return str(inf.pytype()).rsplit(".", 1)[-1]
                return None
        except astroid.InferenceError:
            pass
        return None

    def class_names_of(self, node: astroid.nodes.ClassDef) -> set[str]:
        names: set[str] = set()
        for base in node.bases:
            name = terminal_name(base)
            if name:
                names.add(name)
        try:
            for ancestor in node.ancestors():
                names.add(ancestor.name)
        except astroid.InferenceError:
            pass
        return names

    def annotation_names(self, annotation: Optional[astroid.nodes.NodeNG]) -> set[str]:
        if annotation is None:
            return set()
        names: set[str] = set()
        for sub in annotation.nodes_of_class((astroid.nodes.Name, astroid.nodes.Attribute, astroid.nodes.Const)):
            if isinstance(sub, astroid.nodes.Const):
                if isinstance(sub.value, str):
                    names.update(_IDENTIFIER_RE.findall(sub.value))
                continue
            name = terminal_name(sub)
            if name:
                names.add(name)
        return names
