from typing import Any, Union


class SemanticPointer:
    __slots__ = ("_path",)

    def __init__(self, path: str = ""):
        self._path = path

    def __getattr__(self, name: str) -> "SemanticPointer":
        if name.startswith("__"):
            # Keep copy/pickle protocol lookups from minting pointers.
            raise AttributeError(name)
        return self._join(name)

    def __getitem__(self, key: Union[str, int]) -> "SemanticPointer":
        return self._join(str(key))

    def _join(self, suffix: str) -> "SemanticPointer":
        suffix = suffix.strip(".")
        if not suffix:
            return self
        return SemanticPointer(f"{self._path}.{suffix}" if self._path else suffix)

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"<L: '{self._path}'>" if self._path else "<L: (root)>"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, SemanticPointer):
            return self._path == other._path
        return str(other) == self._path

    def __hash__(self) -> int:
        return hash(self._path)


# Root anchor: L.rename.applied -> "rename.applied"
L = SemanticPointer()
