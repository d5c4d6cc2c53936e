"""Datastore writes over a RemoteSession.

Typical usage example:
    key = insert_record(session, Record(Name="widget"))
    print(f"Stored as {key}")
"""

from loguru import logger

from dataexport.core.exceptions import InsertError, RemoteCallError
from dataexport.core.models import DATA_ITEM_KIND, Key, Record
from dataexport.worker.remote_api import RemoteSession

DATASTORE_SERVICE = "datastore_v3"


def put(session: RemoteSession, key: Key, record: Record) -> Key:
    """Writes ``record`` under ``key`` and returns the stored key.

    An incomplete key gets its id assigned by the store.

    Raises:
        InsertError: If the call fails or the store returns no usable key.
    """
    request = {
        "entity": {
            "key": key.to_dict(),
            "properties": record.to_properties(),
        }
    }
    try:
        response = session.call(DATASTORE_SERVICE, "Put", request)
    except RemoteCallError as e:
        raise InsertError(f"put {key} on {session.host} failed: {e}") from e

    if not isinstance(response, dict) or not isinstance(response.get("key"), dict):
        raise InsertError(f"put {key} on {session.host}: no key in response {response!r}")
    stored = response["key"]
    stored_id = stored.get("id")
    if not isinstance(stored_id, int) or isinstance(stored_id, bool):
        raise InsertError(f"put {key} on {session.host}: no id in response {response!r}")
    if not key.incomplete and stored_id != key.id:
        raise InsertError(f"put {key} on {session.host}: stored under id {stored_id}")
    return Key(kind=stored.get("kind") or key.kind, id=stored_id)


def insert_record(session: RemoteSession, record: Record) -> Key:
    """Stores ``record`` as a new DataItem entity. Never retried."""
    key = put(session, Key(kind=DATA_ITEM_KIND), record)
    logger.debug(f"Inserted {key} Name={record.name!r}")
    return key
