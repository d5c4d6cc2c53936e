"""Import jobs run against an established RemoteSession."""

from pathlib import Path
from typing import Pattern, Union

from loguru import logger

from dataexport.core.import_config import DirectoryJob, ImportJob, SingleFileJob
from dataexport.core.models import Key
from dataexport.core.stats import ImportStats
from dataexport.worker.datastore import insert_record
from dataexport.worker.importer import BatchImporter
from dataexport.worker.loader import load_record
from dataexport.worker.remote_api import RemoteSession


def run_import_file(session: RemoteSession, file_path: Union[str, Path]) -> Key:
    """Imports a single record file.

    Raises:
        LoadError: If the file cannot be read or decoded.
        InsertError: If the write fails.
    """
    path = Path(file_path)
    logger.info(f"Importing {path} into {session.app_id}...")
    record = load_record(path)
    key = insert_record(session, record)
    logger.success(f"Inserted {path.name} as {key}")
    return key


def run_import_directory(
    session: RemoteSession, root: Union[str, Path], pattern: Union[str, Pattern[str]]
) -> ImportStats:
    """Imports every matching file under ``root``; failures stay per-file."""
    importer = BatchImporter(session, pattern)
    return importer.import_directory(Path(root))


def run_job(session: RemoteSession, job: ImportJob) -> Union[Key, ImportStats]:
    """Dispatches an ImportJob to the matching runner."""
    if isinstance(job, SingleFileJob):
        return run_import_file(session, job.path)
    if isinstance(job, DirectoryJob):
        return run_import_directory(session, job.root, job.pattern)
    raise TypeError(f"Unknown import job: {job!r}")
