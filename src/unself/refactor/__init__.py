from .oracle import LibCSTRenameOracle
from .engine.transaction import TransactionManager, FileSystemAdapter, RealFileSystem

__all__ = [
    "LibCSTRenameOracle",
    "TransactionManager",
    "FileSystemAdapter",
    "RealFileSystem",
]
