from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Tuple

PLACEHOLDER_NAMES: FrozenSet[str] = frozenset({"this", "self"})

# (file, qualified method name, ordinal among same-named methods in the file)
OccurrenceKey = Tuple[Path, str, int]


@dataclass(frozen=True)
class ReceiverOccurrence:
    """
    A method's receiver parameter as seen by one scan pass.

    ``offset`` is the byte offset of the parameter name in ``path`` and is only
    valid until the file is rewritten. ``key`` survives rewrites.
    """

    path: Path
    offset: int
    line: int
    column: int
    type_name: str
    name: str
    method: str
    ordinal: int = 0

    @property
    def address(self) -> str:
        return f"{self.path}:#{self.offset}"

    @property
    def location(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"

    @property
    def key(self) -> OccurrenceKey:
        return (self.path, self.method, self.ordinal)


@dataclass(frozen=True)
class SkippedReceiver:
    path: Path
    line: int
    column: int
    method: str
    name: str
    reason: str
    ordinal: int = 0

    @property
    def location(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"

    @property
    def key(self) -> OccurrenceKey:
        return (self.path, self.method, self.ordinal)


@dataclass(frozen=True)
class RenamePlan:
    path: Path
    old_name: str
    new_name: str
    occurrences: int
    content: bytes
