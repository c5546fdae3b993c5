from .parser import DirectoryParser
from .scanner import ReceiverScanner, receiver_param, resolve_receiver_type

__all__ = [
    "DirectoryParser",
    "ReceiverScanner",
    "receiver_param",
    "resolve_receiver_type",
]
