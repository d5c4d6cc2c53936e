import re
from typing import Union

from dataexport.core.config import settings


def snippet(body: Union[str, bytes, None], limit: int = 200) -> str:
    """Shortens a response body for inclusion in an error message.

    Args:
        body: Raw response text or bytes. Bytes are decoded as UTF-8 with
            replacement so binary bodies never raise.
        limit: Maximum number of characters kept. Defaults to 200.

    Returns:
        A ``repr``-quoted string, suffixed with ``...`` when truncated.
    """
    if body is None:
        return "''"
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if len(body) <= limit:
        return repr(body)
    return repr(body[:limit]) + "..."


def is_local_host(host: str) -> bool:
    """Whether ``host`` points at a local development server.

    The check is a search, not a full match, so ``localhost:8080`` and
    ``app.localhost`` both count as local.
    """
    return re.search(settings.LOCAL_HOST_PATTERN, host) is not None
