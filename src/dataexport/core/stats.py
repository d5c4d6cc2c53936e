"""Statistics tracking dataclasses for import runs.

This module provides the accumulating result of a directory import, so the
outcome of a batch can be inspected programmatically instead of only through
log lines.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dataexport.core.exceptions import DataExportError, WalkError


@dataclass(frozen=True)
class FileFailure:
    """One file whose load or insert failed."""

    path: Path
    error: DataExportError

    @property
    def stage(self) -> str:
        return type(self.error).__name__


@dataclass
class ImportStats:
    """Statistics for a directory import.

    Attributes:
        visited: Files whose name matched the pattern (import attempted).
        inserted: Records written to the remote store.
        failed: Files whose load or insert failed.
        skipped: Files whose name did not match the pattern.
        failures: One FileFailure per failed file, in visiting order.
        walk_errors: Directories the walk could not read.

    Example:
        >>> stats = ImportStats()
        >>> stats.visited += 1
        >>> stats.inserted += 1
        >>> stats.to_dict()["inserted"]
        1
    """

    visited: int = 0
    inserted: int = 0
    failed: int = 0
    skipped: int = 0
    failures: List[FileFailure] = field(default_factory=list)
    walk_errors: List[WalkError] = field(default_factory=list)

    def record_failure(self, path: Path, error: DataExportError) -> FileFailure:
        failure = FileFailure(path=path, error=error)
        self.failed += 1
        self.failures.append(failure)
        return failure

    @property
    def ok(self) -> bool:
        """True when every visited file was inserted and the walk was clean."""
        return self.failed == 0 and not self.walk_errors

    def to_dict(self) -> dict:
        """Convert stats to a plain dictionary.

        Returns:
            Dictionary with counters and the failing paths.
        """
        return {
            "visited": self.visited,
            "inserted": self.inserted,
            "failed": self.failed,
            "skipped": self.skipped,
            "walk_errors": len(self.walk_errors),
            "failures": [str(f.path) for f in self.failures],
        }

    def __str__(self) -> str:
        return (
            f"ImportStats(visited={self.visited}, inserted={self.inserted}, "
            f"failed={self.failed}, skipped={self.skipped}, "
            f"walk_errors={len(self.walk_errors)})"
        )
