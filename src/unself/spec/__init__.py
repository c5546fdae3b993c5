from .models import (
    ReceiverOccurrence,
    SkippedReceiver,
    RenamePlan,
    OccurrenceKey,
    PLACEHOLDER_NAMES,
)
from .protocols import SourceParser, RenameOracle, ParsedUnit
from .errors import (
    RenameError,
    RenameConflictError,
    InvalidNameError,
    AmbiguousBindingError,
    SourceParseError,
    WalkError,
)

__all__ = [
    "ReceiverOccurrence",
    "SkippedReceiver",
    "RenamePlan",
    "OccurrenceKey",
    "PLACEHOLDER_NAMES",
    "SourceParser",
    "RenameOracle",
    "ParsedUnit",
    "RenameError",
    "RenameConflictError",
    "InvalidNameError",
    "AmbiguousBindingError",
    "SourceParseError",
    "WalkError",
]
