from .core import UnselfApp
from .driver import RewriteDriver
from .walker import TreeWalker, DEFAULT_EXCLUDES
from .reports import (
    Continue,
    Fatal,
    Verdict,
    StepOutcome,
    StepResult,
    Failure,
    DirectoryReport,
    RunReport,
)

__all__ = [
    "UnselfApp",
    "RewriteDriver",
    "TreeWalker",
    "DEFAULT_EXCLUDES",
    "Continue",
    "Fatal",
    "Verdict",
    "StepOutcome",
    "StepResult",
    "Failure",
    "DirectoryReport",
    "RunReport",
]
