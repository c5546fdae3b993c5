from pathlib import Path
from typing import Optional

from unself.analysis import DirectoryParser, ReceiverScanner
from unself.common import bus
from unself.config import UnselfConfig, load_config_from_path
from unself.naming import Abbreviator
from unself.needle import L
from unself.refactor import LibCSTRenameOracle
from unself.spec import RenameOracle
from .driver import RewriteDriver
from .reports import Fatal, RunReport
from .walker import TreeWalker


class UnselfApp:
    def __init__(
        self,
        root_path: Path,
        config: Optional[UnselfConfig] = None,
        dry_run: bool = False,
        oracle: Optional[RenameOracle] = None,
    ):
        self.root_path = root_path
        self.config = config or load_config_from_path(root_path)
        self.dry_run = dry_run

        # Composition root: assemble the collaborators from configuration.
        self.driver = RewriteDriver(
            parser=DirectoryParser(self.config.extensions),
            scanner=ReceiverScanner(),
            abbreviator=Abbreviator(self.config.overrides),
            oracle=oracle or LibCSTRenameOracle(),
            on_conflict=self.config.on_conflict,
            on_parse_error=self.config.on_parse_error,
            dry_run=dry_run,
        )
        self.walker = TreeWalker(self.driver, exclude=self.config.exclude)

    def run(self) -> RunReport:
        bus.info(L.run.start, root=self.root_path)
        report = self.walker.run(self.root_path)

        if isinstance(report.verdict, Fatal):
            bus.error(L.run.aborted, reason=report.verdict.reason)
            return report

        if report.rename_count == 0 and report.conflict_count == 0 and report.failure_count == 0:
            bus.success(L.run.nothing_to_do)
        elif self.dry_run:
            bus.info(
                L.run.dry_run_summary,
                renamed=report.rename_count,
                directories=len(report.touched_directories),
            )
        else:
            bus.success(
                L.run.summary,
                renamed=report.rename_count,
                directories=len(report.touched_directories),
                conflicts=report.conflict_count,
                failures=report.failure_count,
            )
        return report
