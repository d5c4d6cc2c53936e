"""Data types exchanged between the loader and the remote datastore.

Record is the unit being imported: one JSON document decodes into one
immutable Record. Key names a stored entity; a key without an id is
incomplete and gets its id assigned by the store on write.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Entity kind all imported records are written under
DATA_ITEM_KIND = "DataItem"


class Record(BaseModel):
    """A single named item read from a ``data_item_*.json`` file.

    Decoding is permissive: unknown keys are ignored and a missing or null
    ``Name`` becomes an empty string. A ``Name`` of any other JSON type is
    rejected.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(default="", alias="Name")

    @field_validator("name", mode="before")
    @classmethod
    def _null_name_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_properties(self) -> Dict[str, Any]:
        """Entity properties as stored remotely."""
        return {"Name": self.name}


@dataclass(frozen=True)
class Key:
    """Datastore key: entity kind plus an optional store-assigned id."""

    kind: str
    id: Optional[int] = None

    @property
    def incomplete(self) -> bool:
        return self.id is None

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "id": self.id}

    def __str__(self) -> str:
        return f"{self.kind}({self.id if self.id is not None else '?'})"
