"""Directory scanner that feeds record files to an import callback.

The walk is depth-first and pre-order over entries sorted by name, so files
and sub-directories of one directory are interleaved lexically. Only
non-directory entries are tested against the file pattern, and the test is a
full match on the base name. Symlinked directories are not followed.

A failing callback never stops the walk, and an unreadable directory is
recorded as a WalkError before the walk moves on to its next sibling.

Typical usage example:
    scanner = DirectoryScanner(re.compile(r"data_item_\\d+\\.json"))
    stats = scanner.scan_directory(Path("data"), importer.import_file)
"""

import os
import re
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Pattern, Union

from loguru import logger

from dataexport.core.config import settings
from dataexport.core.exceptions import WalkError
from dataexport.core.stats import ImportStats

VisitFn = Callable[[Path, ImportStats], None]


class DirectoryScanner:
    """Recursive, pattern-filtered file walker.

    Attributes:
        pattern: Compiled regex that base names must fully match.
    """

    def __init__(self, pattern: Union[str, Pattern[str], None] = None):
        if pattern is None:
            pattern = settings.DEFAULT_FILE_PATTERN
        self.pattern: Pattern[str] = re.compile(pattern) if isinstance(pattern, str) else pattern

    def matches(self, file_name: str) -> bool:
        return self.pattern.fullmatch(file_name) is not None

    def _sorted_entries(self, current_path: Path) -> List[os.DirEntry]:
        with os.scandir(current_path) as it:
            return sorted(it, key=lambda entry: entry.name)

    def walk(
        self, root: Path, errors: Optional[List[WalkError]] = None
    ) -> Iterator[Path]:
        """Yields every non-directory entry under ``root`` in walk order.

        Args:
            root: Directory to start from.
            errors: If given, WalkErrors are appended here instead of raised.

        Raises:
            WalkError: If a directory cannot be read and ``errors`` is None.
        """
        try:
            entries = self._sorted_entries(root)
        except OSError as e:
            error = WalkError(root, e)
            if errors is None:
                raise error from e
            logger.error(str(error))
            errors.append(error)
            return

        for entry in entries:
            path = Path(entry.path)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            if is_dir:
                yield from self.walk(path, errors)
            else:
                yield path

    def scan_directory(self, root: Path, visit: VisitFn) -> ImportStats:
        """Walks ``root`` and calls ``visit`` for each matching file.

        Args:
            root: Directory to scan.
            visit: Called as ``visit(path, stats)`` for each match, in walk
                order. It is responsible for its own error handling.

        Returns:
            ImportStats with ``skipped`` and ``walk_errors`` filled in here;
            the visit callback updates the remaining counters.
        """
        stats = ImportStats()
        logger.info(f"Scanning {root} for files matching {self.pattern.pattern!r}")

        for path in self.walk(Path(root), stats.walk_errors):
            if self.matches(path.name):
                logger.info(f"Visited: {path}")
                visit(path, stats)
            else:
                logger.info(f"Skip: {path.name}")
                stats.skipped += 1

        if stats.walk_errors:
            logger.error(
                f"Walk of {root} finished with {len(stats.walk_errors)} unreadable "
                f"director{'y' if len(stats.walk_errors) == 1 else 'ies'}"
            )
        return stats
