import logging
import os
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator

from unself.common import bus
from unself.needle import L
from unself.spec import WalkError
from .driver import RewriteDriver
from .reports import Fatal, RunReport

log = logging.getLogger(__name__)

DEFAULT_EXCLUDES: FrozenSet[str] = frozenset(
    {"__pycache__", "node_modules", "site-packages", "venv"}
)


class TreeWalker:
    def __init__(self, driver: RewriteDriver, exclude: Iterable[str] = ()):
        self.driver = driver
        self.exclude = DEFAULT_EXCLUDES | frozenset(exclude)

    def _is_walkable(self, name: str) -> bool:
        return not name.startswith(".") and name not in self.exclude

    def iter_directories(self, root: Path) -> Iterator[Path]:
        if not root.is_dir():
            raise WalkError(f"{root} is not a directory")

        def on_error(err: OSError) -> None:
            if Path(err.filename) == root:
                raise WalkError(f"{root}: {err.strerror}") from err
            log.warning(f"Skipping unreadable directory {err.filename}: {err.strerror}")

        for dirpath, dirnames, _ in os.walk(root, onerror=on_error):
            # Sorted in place so os.walk descends in a stable order.
            dirnames[:] = sorted(d for d in dirnames if self._is_walkable(d))
            yield Path(dirpath)

    def run(self, root: Path) -> RunReport:
        report = RunReport(root=root)
        try:
            for directory in self.iter_directories(root):
                dir_report = self.driver.normalize(directory)
                report.directories.append(dir_report)
                if dir_report.is_fatal:
                    report.verdict = dir_report.verdict
                    break
        except WalkError as e:
            bus.error(L.error.walk, path=root, error=str(e))
            report.verdict = Fatal(str(e))
        return report
