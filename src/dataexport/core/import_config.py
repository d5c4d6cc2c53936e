"""Per-invocation configuration built once from command-line arguments.

ImportConfig replaces the flag globals of a typical command-line tool: it is
validated up front, frozen, and handed to every component that needs it.

Example:
    >>> args = parser.parse_args(["-host", "localhost:8080", "-email", "a@b.c",
    ...                           "-data_file", "item.json"])
    >>> config = ImportConfig.from_args(args)
    >>> config.job
    SingleFileJob(path=PosixPath('item.json'))
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Pattern, Union

import httpx

from dataexport.core.config import settings
from dataexport.core.exceptions import ConfigError
from dataexport.core.utils import is_local_host


@dataclass(frozen=True)
class SingleFileJob:
    """Import exactly one record file; any failure is fatal."""

    path: Path


@dataclass(frozen=True)
class DirectoryJob:
    """Import every file under ``root`` whose base name matches ``pattern``."""

    root: Path
    pattern: Pattern[str]


ImportJob = Union[SingleFileJob, DirectoryJob]


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


@dataclass(frozen=True)
class ImportConfig:
    """Validated settings for one run of the export tool.

    Attributes:
        host: Application host, ``hostname`` or ``hostname:port``.
        email: Principal used to log in.
        password_file: File holding the password; None for local hosts.
        job: What to import, see SingleFileJob and DirectoryJob.
    """

    host: str
    email: str
    password_file: Optional[Path]
    job: ImportJob

    @property
    def is_local(self) -> bool:
        return is_local_host(self.host)

    @classmethod
    def from_args(cls, args: Any) -> "ImportConfig":
        """Builds a config from an argparse namespace.

        Raises:
            ConfigError: If a required flag is missing, ``host`` is not a
                valid host or host:port, both or neither of
                ``data_file``/``data_dir`` are given, ``data_dir`` is not a
                directory, or ``file_pattern`` is not a valid regex.
        """
        host = getattr(args, "host", None)
        email = getattr(args, "email", None)
        password_file = getattr(args, "password_file", None)
        data_file = getattr(args, "data_file", None)
        data_dir = getattr(args, "data_dir", None)
        file_pattern = getattr(args, "file_pattern", None)

        if _blank(host):
            raise ConfigError("Required flag: -host")
        host = host.strip()
        try:
            httpx.URL(f"http://{host}")
        except httpx.InvalidURL as e:
            raise ConfigError(f"Invalid -host {host!r}: {e}") from e
        if _blank(email):
            raise ConfigError("Required flag: -email")
        email = email.strip()

        local = is_local_host(host)
        if not local and _blank(password_file):
            raise ConfigError("Required flag: -password_file")

        has_file = not _blank(data_file)
        has_dir = not _blank(data_dir)
        if not has_file and not has_dir:
            raise ConfigError("Required flag: -data_file or -data_dir")
        if has_file and has_dir:
            raise ConfigError("Flags -data_file and -data_dir are mutually exclusive")

        job: ImportJob
        if has_file:
            job = SingleFileJob(path=Path(data_file))
        else:
            root = Path(data_dir)
            if not root.is_dir():
                raise ConfigError(f"-data_dir is not a directory: {root}")
            if _blank(file_pattern):
                file_pattern = settings.DEFAULT_FILE_PATTERN
            try:
                pattern = re.compile(file_pattern)
            except re.error as e:
                raise ConfigError(f"Invalid -file_pattern {file_pattern!r}: {e}") from e
            job = DirectoryJob(root=root, pattern=pattern)

        return cls(
            host=host,
            email=email,
            password_file=None if local or _blank(password_file) else Path(password_file),
            job=job,
        )
