import logging
from collections import Counter
from pathlib import Path
from typing import Callable, Collection, List, Optional, Sequence, Tuple

import libcst as cst
from libcst.helpers import get_full_name_for_node
from libcst.metadata import ByteSpanPositionProvider, PositionProvider

from unself.spec import (
    PLACEHOLDER_NAMES,
    OccurrenceKey,
    ParsedUnit,
    ReceiverOccurrence,
    SkippedReceiver,
)

log = logging.getLogger(__name__)

SkipHandler = Callable[[SkippedReceiver], None]

_STATIC_DECORATORS = {"staticmethod", "builtins.staticmethod"}
# Subscripts that only add one level of indirection around the owning type.
_TYPE_WRAPPERS = {"type", "Type", "typing.Type", "builtins.type"}


def _code(node: cst.CSTNode) -> str:
    return cst.Module(body=[]).code_for_node(node)


def receiver_param(node: cst.FunctionDef) -> Optional[cst.Param]:
    """
    Returns the receiver of a method declared directly in a class body.

    Fails closed: static methods and methods without any positional
    parameter have no receiver.
    """
    for decorator in node.decorators:
        if get_full_name_for_node(decorator.decorator) in _STATIC_DECORATORS:
            return None
    positional = [*node.params.posonly_params, *node.params.params]
    if not positional:
        return None
    return positional[0]


def _simple_name(expr: cst.BaseExpression, class_name: str) -> Optional[str]:
    if isinstance(expr, cst.Name):
        return class_name if expr.value == "Self" else expr.value
    if isinstance(expr, cst.SimpleString):
        # A forward reference: strip the quotes, the rest must be a bare name.
        text = expr.evaluated_value
        if isinstance(text, str):
            text = text.strip()
            if text == "Self":
                return class_name
            if text.isidentifier():
                return text
    return None


def resolve_receiver_type(
    param: cst.Param, class_name: str
) -> Tuple[Optional[str], Optional[str]]:
    """
    Resolves the owning type name of a receiver.

    Returns ``(type_name, None)`` on success and ``(None, reason)`` when the
    declared type is not a simple named type.
    """
    if param.annotation is None:
        return class_name, None

    expr = param.annotation.annotation
    name = _simple_name(expr, class_name)
    if name is not None:
        return name, None

    if (
        isinstance(expr, cst.Subscript)
        and get_full_name_for_node(expr.value) in _TYPE_WRAPPERS
        and len(expr.slice) == 1
        and isinstance(expr.slice[0].slice, cst.Index)
    ):
        name = _simple_name(expr.slice[0].slice.value, class_name)
        if name is not None:
            return name, None

    return None, f"receiver type '{_code(expr)}' is not a simple named type"


class _ReceiverVisitor(cst.CSTVisitor):
    METADATA_DEPENDENCIES = (PositionProvider, ByteSpanPositionProvider)

    def __init__(
        self,
        path: Path,
        excluded: Collection[OccurrenceKey],
        on_skip: Optional[SkipHandler],
    ):
        super().__init__()
        self.path = path
        self.excluded = excluded
        self.on_skip = on_skip
        self.found: Optional[ReceiverOccurrence] = None
        self._stack: List[Tuple[str, str]] = []  # (kind, name), kind in {class, def}
        self._seen: Counter = Counter()

    def _qualname(self, name: str) -> str:
        parts: List[str] = []
        for kind, scope_name in self._stack:
            parts.append(scope_name)
            if kind == "def":
                parts.append("<locals>")
        parts.append(name)
        return ".".join(parts)

    def visit_ClassDef(self, node: cst.ClassDef) -> bool:
        self._stack.append(("class", node.name.value))
        return self.found is None

    def leave_ClassDef(self, original_node: cst.ClassDef) -> None:
        self._stack.pop()

    def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
        if self.found is None and self._stack and self._stack[-1][0] == "class":
            self._inspect_method(node, self._stack[-1][1])
        self._stack.append(("def", node.name.value))
        return self.found is None

    def leave_FunctionDef(self, original_node: cst.FunctionDef) -> None:
        self._stack.pop()

    def _inspect_method(self, node: cst.FunctionDef, class_name: str) -> None:
        method = self._qualname(node.name.value)
        # Property getters and setters share a qualname; the ordinal tells them apart.
        ordinal = self._seen[method]
        self._seen[method] += 1

        param = receiver_param(node)
        if param is None or param.name.value not in PLACEHOLDER_NAMES:
            return
        if (self.path, method, ordinal) in self.excluded:
            return

        position = self.get_metadata(PositionProvider, param.name).start
        type_name, reason = resolve_receiver_type(param, class_name)
        if type_name is None:
            log.debug(f"{self.path}:{position.line}: skipping {method}: {reason}")
            if self.on_skip:
                self.on_skip(
                    SkippedReceiver(
                        path=self.path,
                        line=position.line,
                        column=position.column,
                        method=method,
                        name=param.name.value,
                        reason=reason or "",
                        ordinal=ordinal,
                    )
                )
            return

        span = self.get_metadata(ByteSpanPositionProvider, param.name)
        self.found = ReceiverOccurrence(
            path=self.path,
            offset=span.start,
            line=position.line,
            column=position.column,
            type_name=type_name,
            name=param.name.value,
            method=method,
            ordinal=ordinal,
        )


class ReceiverScanner:
    """
    Finds the first method receiver named ``this`` or ``self``.

    Files are visited in the given order and declarations depth-first in
    source order. At most one occurrence is returned per call.
    """

    def scan(
        self,
        units: Sequence[ParsedUnit],
        excluded: Collection[OccurrenceKey] = frozenset(),
        on_skip: Optional[SkipHandler] = None,
    ) -> Optional[ReceiverOccurrence]:
        for unit in units:
            visitor = _ReceiverVisitor(unit.path, excluded, on_skip)
            unit.wrapper.visit(visitor)
            if visitor.found is not None:
                return visitor.found
        return None
