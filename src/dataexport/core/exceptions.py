"""Error taxonomy for the export tool.

Every failure the tool knows how to report derives from DataExportError so
the CLI can catch it in one place. Whether an error is fatal depends on where
it surfaces: configuration, authentication and session errors always end the
run, while load and insert errors only end it in single-file mode.
"""

from pathlib import Path
from typing import Optional, Union


class DataExportError(Exception):
    """Base class for all errors raised by dataexport."""


class ConfigError(DataExportError):
    """Missing or invalid command-line input, detected before any network call."""


class AuthError(DataExportError):
    """The login sequence against the target host failed."""

    def __init__(
        self,
        message: str,
        host: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.host = host
        self.status_code = status_code
        super().__init__(message)


class TokenNotFound(AuthError):
    """A login response did not contain the expected token or marker."""


class SessionError(DataExportError):
    """The authenticated client could not be bridged into a remote session."""


class RemoteCallError(SessionError):
    """A call on an established remote session failed."""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        method: Optional[str] = None,
        code: Optional[int] = None,
    ):
        self.service = service
        self.method = method
        self.code = code
        super().__init__(message)


class LoadError(DataExportError):
    """A record file could not be turned into a Record."""

    def __init__(self, path: Union[str, Path], cause: object):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause}")


class ReadError(LoadError):
    """The record file could not be opened or read."""


class DecodeError(LoadError):
    """The record file is not a JSON object of the Record shape."""


class InsertError(DataExportError):
    """The remote store rejected or failed to acknowledge a write."""


class WalkError(DataExportError):
    """Traversal of the data directory failed at some path."""

    def __init__(self, path: Union[str, Path], cause: object):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"cannot read directory {self.path}: {cause}")
