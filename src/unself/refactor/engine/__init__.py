from .transaction import (
    TransactionManager,
    FileSystemAdapter,
    RealFileSystem,
    FileOp,
    WriteFileOp,
)

__all__ = [
    "TransactionManager",
    "FileSystemAdapter",
    "RealFileSystem",
    "FileOp",
    "WriteFileOp",
]
