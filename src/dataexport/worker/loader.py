"""Record loader: one JSON file in, one Record out."""

from pathlib import Path
from typing import Union

from pydantic import ValidationError

from dataexport.core.exceptions import DecodeError, ReadError
from dataexport.core.models import Record


def load_record(file_path: Union[str, Path]) -> Record:
    """Reads ``file_path`` and decodes it as a single Record.

    The file is read on every call; nothing is cached.

    Args:
        file_path: Path to a UTF-8 JSON file holding one object.

    Returns:
        The decoded Record. A missing ``Name`` yields ``Record(Name="")``.

    Raises:
        ReadError: If the file cannot be opened or read.
        DecodeError: If the content is not UTF-8, not JSON, or not an object
            of the Record shape.
    """
    path = Path(file_path)
    try:
        blob = path.read_bytes()
    except OSError as e:
        raise ReadError(path, e) from e

    try:
        return Record.model_validate_json(blob.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise DecodeError(path, e) from e
    except ValidationError as e:
        errors = "; ".join(err["msg"] for err in e.errors())
        raise DecodeError(path, errors or e) from e
