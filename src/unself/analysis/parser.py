import logging
from pathlib import Path
from typing import Iterable, List

import libcst as cst

from unself.spec import ParsedUnit, SourceParseError

log = logging.getLogger(__name__)


class DirectoryParser:
    def __init__(self, extensions: Iterable[str] = (".py",)):
        self.extensions = tuple(extensions)

    def source_files(self, directory: Path) -> List[Path]:
        return sorted(
            p
            for p in directory.iterdir()
            if p.is_file() and p.suffix in self.extensions and not p.name.startswith(".")
        )

    def parse_file(self, path: Path) -> ParsedUnit:
        try:
            # Bytes in, so libcst honours the coding cookie and round-trips exactly.
            source = path.read_bytes()
        except OSError as e:
            raise SourceParseError(path, str(e))

        try:
            module = cst.parse_module(source)
        except cst.ParserSyntaxError as e:
            raise SourceParseError(path, f"line {e.raw_line}: {e.message}")
        except UnicodeDecodeError as e:
            raise SourceParseError(path, str(e))

        return ParsedUnit(path=path, wrapper=cst.MetadataWrapper(module))

    def parse(self, directory: Path) -> List[ParsedUnit]:
        try:
            files = self.source_files(directory)
        except OSError as e:
            raise SourceParseError(directory, str(e))
        log.debug(f"Parsing {len(files)} file(s) in {directory}")
        return [self.parse_file(path) for path in files]
