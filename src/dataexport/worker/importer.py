"""Batch importer: files in, DataItem entities out.

Each file is loaded and inserted strictly in turn, in the order the scanner
hands them over. A file that fails to load or insert is logged and recorded
in the run's ImportStats, and the batch moves on to the next file.

Typical usage example:
    importer = BatchImporter(session)
    stats = importer.import_directory(Path("data"))
    print(stats)
"""

from pathlib import Path
from typing import Optional, Pattern, Union

from loguru import logger

from dataexport.core.exceptions import InsertError, LoadError
from dataexport.core.models import Key
from dataexport.core.stats import ImportStats
from dataexport.worker.datastore import insert_record
from dataexport.worker.loader import load_record
from dataexport.worker.remote_api import RemoteSession
from dataexport.worker.scanner import DirectoryScanner


class BatchImporter:
    """Loads record files and writes them through a RemoteSession.

    Attributes:
        session: Remote session all inserts go through.
        scanner: DirectoryScanner used by import_directory().
    """

    def __init__(
        self,
        session: RemoteSession,
        pattern: Union[str, Pattern[str], None] = None,
    ):
        self.session = session
        self.scanner = DirectoryScanner(pattern)

    def import_file(self, path: Path, stats: ImportStats) -> Optional[Key]:
        """Loads and inserts one file, recording the outcome in ``stats``.

        Returns:
            The stored key, or None if the file failed.
        """
        stats.visited += 1
        try:
            record = load_record(path)
            key = insert_record(self.session, record)
        except (LoadError, InsertError) as e:
            failure = stats.record_failure(path, e)
            logger.error(f"didn't work out {path.name} : {failure.stage}: {e}")
            return None

        stats.inserted += 1
        logger.debug(f"Stored {path.name} as {key}")
        return key

    def import_directory(self, root: Path) -> ImportStats:
        """Imports every matching file under ``root``.

        Returns:
            ImportStats for the whole walk. Per-file and walk failures are
            reported there; none of them is raised.
        """
        stats = self.scanner.scan_directory(root, self.import_file)
        log = logger.success if stats.ok else logger.warning
        log(f"Import of {root} finished: {stats}")
        return stats
