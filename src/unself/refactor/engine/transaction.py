from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Union


class FileSystemAdapter(Protocol):
    def read_bytes(self, path: Path) -> bytes: ...
    def write_bytes(self, path: Path, content: bytes) -> None: ...


class RealFileSystem:
    def read_bytes(self, path: Path) -> bytes:
        return path.read_bytes()

    def write_bytes(self, path: Path, content: bytes) -> None:
        # "r+b" refuses to create the file: rewrites only ever touch existing sources.
        with path.open("r+b") as f:
            f.write(content)
            f.truncate()


@dataclass
class FileOp(ABC):
    path: Path

    @abstractmethod
    def execute(self, fs: FileSystemAdapter, root: Path) -> None: ...


@dataclass
class WriteFileOp(FileOp):
    content: bytes

    def execute(self, fs: FileSystemAdapter, root: Path) -> None:
        fs.write_bytes(root / self.path, self.content)


class TransactionManager:
    def __init__(self, root_path: Path, fs: Optional[FileSystemAdapter] = None):
        self.root_path = root_path
        self.fs = fs or RealFileSystem()
        self._ops: List[FileOp] = []

    def add_write(self, path: Union[str, Path], content: bytes) -> None:
        self._ops.append(WriteFileOp(Path(path), content))

    def commit(self) -> None:
        for op in self._ops:
            op.execute(self.fs, self.root_path)
        self._ops.clear()
