from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from unself.spec import ReceiverOccurrence, RenamePlan, SkippedReceiver


@dataclass(frozen=True)
class Continue:
    pass


@dataclass(frozen=True)
class Fatal:
    reason: str


Verdict = Union[Continue, Fatal]


class StepOutcome(str, Enum):
    CLEAN = "clean"
    RENAMED = "renamed"
    PLANNED = "planned"  # dry run: verified, not written
    CONFLICT = "conflict"
    FAILED = "failed"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one scan-abbreviate-rename pass over a directory."""

    outcome: StepOutcome
    occurrence: Optional[ReceiverOccurrence] = None
    new_name: Optional[str] = None
    plan: Optional[RenamePlan] = None
    reason: Optional[str] = None

    @property
    def made_progress(self) -> bool:
        return self.outcome in (StepOutcome.RENAMED, StepOutcome.PLANNED)


@dataclass
class Failure:
    occurrence: ReceiverOccurrence
    new_name: str
    reason: str


@dataclass
class DirectoryReport:
    path: Path
    renames: List[RenamePlan] = field(default_factory=list)
    conflicts: List[Failure] = field(default_factory=list)
    failures: List[Failure] = field(default_factory=list)
    skipped: List[SkippedReceiver] = field(default_factory=list)
    parse_error: Optional[str] = None
    verdict: Verdict = field(default_factory=Continue)

    @property
    def is_fatal(self) -> bool:
        return isinstance(self.verdict, Fatal)


@dataclass
class RunReport:
    root: Path
    directories: List[DirectoryReport] = field(default_factory=list)
    verdict: Verdict = field(default_factory=Continue)

    @property
    def is_fatal(self) -> bool:
        return isinstance(self.verdict, Fatal)

    @property
    def rename_count(self) -> int:
        return sum(len(d.renames) for d in self.directories)

    @property
    def conflict_count(self) -> int:
        return sum(len(d.conflicts) for d in self.directories)

    @property
    def failure_count(self) -> int:
        return sum(len(d.failures) for d in self.directories)

    @property
    def touched_directories(self) -> List[Path]:
        return [d.path for d in self.directories if d.renames]
