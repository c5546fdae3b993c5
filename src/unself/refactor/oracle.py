import keyword
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

import libcst as cst
from libcst.metadata import ByteSpanPositionProvider, FunctionScope, Scope, ScopeProvider

from unself.spec import (
    AmbiguousBindingError,
    InvalidNameError,
    RenameConflictError,
    RenameError,
    RenamePlan,
)
from .engine.transaction import FileSystemAdapter, RealFileSystem, TransactionManager
from .transforms.rename_transformer import BindingRenamerTransformer

log = logging.getLogger(__name__)


def _is_within(scope: Scope, root: Scope) -> bool:
    current = scope
    while True:
        if current is root:
            return True
        parent = current.parent
        # The builtin scope is its own parent.
        if parent is current:
            return False
        current = parent


class LibCSTRenameOracle:
    """
    Scope-verified rename of a function-local binding, addressed by byte offset.

    The binding's scope is the enclosing function, so a rename never reaches
    beyond the file that declares it.
    """

    def __init__(self, fs: Optional[FileSystemAdapter] = None):
        self.fs = fs or RealFileSystem()

    def _load(self, path: Path) -> cst.MetadataWrapper:
        try:
            source = self.fs.read_bytes(path)
        except OSError as e:
            raise RenameError(f"cannot read {path}: {e}")
        try:
            module = cst.parse_module(source)
        except (cst.ParserSyntaxError, UnicodeDecodeError) as e:
            raise RenameError(f"cannot parse {path}: {e}")
        return cst.MetadataWrapper(module)

    @staticmethod
    def _name_at(
        spans: Mapping[cst.CSTNode, object], offset: int
    ) -> Optional[cst.Name]:
        for node, span in spans.items():
            if isinstance(node, cst.Name) and span.start == offset:  # type: ignore[attr-defined]
                return node
        return None

    def _resolve_binding(
        self, scopes: Mapping[cst.CSTNode, Optional[Scope]], target: cst.Name
    ) -> Tuple[Scope, List[cst.Name]]:
        scope = scopes.get(target)
        if not isinstance(scope, FunctionScope):
            raise AmbiguousBindingError(f"'{target.value}' is not a function-local binding")

        bindings = scope.assignments[target.value]
        if len(bindings) != 1:
            raise AmbiguousBindingError(
                f"'{target.value}' is bound {len(bindings)} times in '{scope.name}'"
            )

        (binding,) = bindings
        names = [target]
        for access in binding.references:
            if not isinstance(access.node, cst.Name):
                # e.g. a reference from inside a string annotation
                raise AmbiguousBindingError(
                    f"'{target.value}' is referenced from a non-name expression in '{scope.name}'"
                )
            names.append(access.node)
        return scope, names

    @staticmethod
    def _check_conflicts(
        scopes: Mapping[cst.CSTNode, Optional[Scope]], root: Scope, new_name: str
    ) -> None:
        visited: Dict[int, Scope] = {}
        for node, scope in scopes.items():
            if scope is None or not _is_within(scope, root):
                continue
            visited.setdefault(id(scope), scope)
            # Names declared global/nonlocal are filed under the outer scope.
            if isinstance(node, (cst.Global, cst.Nonlocal)) and any(
                item.name.value == new_name for item in node.names
            ):
                raise RenameConflictError(new_name, f"'{root.name}'")

        for scope in visited.values():
            # A binding would shadow the receiver; a free reference would be captured.
            if new_name in scope.assignments or scope.accesses[new_name]:
                raise RenameConflictError(new_name, f"'{root.name}'")

    def prepare(self, path: Path, offset: int, new_name: str) -> RenamePlan:
        if not new_name.isidentifier() or keyword.iskeyword(new_name):
            raise InvalidNameError(f"'{new_name}' is not a valid identifier")

        wrapper = self._load(path)
        spans = wrapper.resolve(ByteSpanPositionProvider)
        scopes = wrapper.resolve(ScopeProvider)

        target = self._name_at(spans, offset)
        if target is None:
            raise RenameError(f"no identifier at {path}:#{offset}")

        scope, names = self._resolve_binding(scopes, target)
        self._check_conflicts(scopes, scope, new_name)

        transformer = BindingRenamerTransformer(names, target.value, new_name)
        new_module = wrapper.visit(transformer)
        log.debug(
            f"{path}:#{offset}: '{target.value}' -> '{new_name}', "
            f"{transformer.renamed} occurrence(s)"
        )
        return RenamePlan(
            path=path,
            old_name=target.value,
            new_name=new_name,
            occurrences=transformer.renamed,
            content=new_module.bytes,
        )

    def rename(self, path: Path, offset: int, new_name: str) -> RenamePlan:
        plan = self.prepare(path, offset, new_name)

        tm = TransactionManager(path.parent, fs=self.fs)
        tm.add_write(path.name, plan.content)
        try:
            tm.commit()
        except OSError as e:
            raise RenameError(f"cannot write {path}: {e}")
        return plan
