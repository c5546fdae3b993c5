from pathlib import Path
from typing import Callable, Collection, Optional, Set, cast

from unself.analysis import ReceiverScanner
from unself.common import bus
from unself.config import ConflictPolicy, ParseErrorPolicy
from unself.needle import L
from unself.spec import (
    PLACEHOLDER_NAMES,
    OccurrenceKey,
    ReceiverOccurrence,
    RenameConflictError,
    RenameError,
    RenameOracle,
    RenamePlan,
    SkippedReceiver,
    SourceParseError,
    SourceParser,
)
from .reports import DirectoryReport, Failure, Fatal, StepOutcome, StepResult


class RewriteDriver:
    """
    Drives one directory to a fixed point: scan, abbreviate, rename, re-scan.

    Every pass re-parses the directory from disk. A rename shifts byte
    offsets in the rewritten file, so nothing derived from an earlier parse
    is reused.
    """

    def __init__(
        self,
        parser: SourceParser,
        scanner: ReceiverScanner,
        abbreviator: Callable[[str], str],
        oracle: RenameOracle,
        on_conflict: ConflictPolicy = ConflictPolicy.SKIP_OCCURRENCE,
        on_parse_error: ParseErrorPolicy = ParseErrorPolicy.SKIP,
        dry_run: bool = False,
    ):
        self.parser = parser
        self.scanner = scanner
        self.abbreviator = abbreviator
        self.oracle = oracle
        self.on_conflict = on_conflict
        self.on_parse_error = on_parse_error
        self.dry_run = dry_run

    def process_directory(
        self,
        path: Path,
        excluded: Collection[OccurrenceKey] = frozenset(),
        on_skip: Optional[Callable[[SkippedReceiver], None]] = None,
    ) -> StepResult:
        try:
            units = self.parser.parse(path)
        except SourceParseError as e:
            return StepResult(StepOutcome.PARSE_ERROR, reason=str(e))

        occurrence = self.scanner.scan(units, excluded=excluded, on_skip=on_skip)
        if occurrence is None:
            return StepResult(StepOutcome.CLEAN)

        new_name = self.abbreviator(occurrence.type_name)
        bus.debug(
            L.scan.found,
            name=occurrence.name,
            method=occurrence.method,
            location=occurrence.location,
            type_name=occurrence.type_name,
        )

        try:
            if self.dry_run:
                plan = self.oracle.prepare(occurrence.path, occurrence.offset, new_name)
            else:
                plan = self.oracle.rename(occurrence.path, occurrence.offset, new_name)
        except RenameConflictError as e:
            bus.warning(
                L.rename.conflict,
                address=occurrence.address,
                type_name=occurrence.type_name,
                new=new_name,
            )
            return StepResult(
                StepOutcome.CONFLICT, occurrence, new_name, reason=str(e)
            )
        except RenameError as e:
            bus.error(
                L.rename.failed,
                old=occurrence.name,
                method=occurrence.method,
                location=occurrence.location,
                error=str(e),
            )
            return StepResult(StepOutcome.FAILED, occurrence, new_name, reason=str(e))

        if self.dry_run:
            bus.info(
                L.rename.planned,
                old=occurrence.name,
                method=occurrence.method,
                new=new_name,
                location=occurrence.location,
            )
            return StepResult(StepOutcome.PLANNED, occurrence, new_name, plan=plan)

        bus.success(
            L.rename.applied,
            old=occurrence.name,
            method=occurrence.method,
            new=new_name,
            location=occurrence.location,
            count=plan.occurrences,
        )
        return StepResult(StepOutcome.RENAMED, occurrence, new_name, plan=plan)

    def normalize(self, path: Path) -> DirectoryReport:
        report = DirectoryReport(path=path)
        # Occurrences this loop has given up on (or, in a dry run, already
        # planned). Keys survive rewrites, byte offsets do not.
        excluded: Set[OccurrenceKey] = set()
        reported_skips: Set[OccurrenceKey] = set()

        def on_skip(skipped: SkippedReceiver) -> None:
            if skipped.key in reported_skips:
                return
            reported_skips.add(skipped.key)
            report.skipped.append(skipped)
            bus.warning(
                L.scan.skipped.unresolved_type,
                name=skipped.name,
                method=skipped.method,
                location=skipped.location,
                reason=skipped.reason,
            )

        while True:
            step = self.process_directory(path, frozenset(excluded), on_skip)

            if step.outcome is StepOutcome.CLEAN:
                bus.debug(L.directory.clean, path=path)
                return report

            if step.outcome is StepOutcome.PARSE_ERROR:
                report.parse_error = step.reason
                if self.on_parse_error is ParseErrorPolicy.ABORT:
                    bus.error(L.directory.parse_error_abort, path=path, error=step.reason)
                    report.verdict = Fatal(f"cannot parse {path}: {step.reason}")
                else:
                    bus.warning(L.directory.parse_error, path=path, error=step.reason)
                return report

            # Every outcome past this point carries the occurrence it was about.
            occurrence = cast(ReceiverOccurrence, step.occurrence)
            new_name = cast(str, step.new_name)

            if step.made_progress:
                report.renames.append(cast(RenamePlan, step.plan))
                if self.dry_run or new_name in PLACEHOLDER_NAMES:
                    excluded.add(occurrence.key)
                continue

            failure = Failure(occurrence, new_name, step.reason or "")
            if step.outcome is StepOutcome.FAILED:
                report.failures.append(failure)
                excluded.add(occurrence.key)
                continue

            report.conflicts.append(failure)
            if self.on_conflict is ConflictPolicy.ABORT:
                report.verdict = Fatal(
                    f"conflict at {occurrence.address} renaming receiver for "
                    f"{occurrence.type_name} to {new_name}"
                )
                return report
            if self.on_conflict is ConflictPolicy.SKIP_DIRECTORY:
                bus.warning(L.directory.abandoned, path=path)
                return report
            excluded.add(occurrence.key)
