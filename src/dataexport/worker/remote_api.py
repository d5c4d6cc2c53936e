"""Remote API session bound to one application.

RemoteSession turns a logged-in ``httpx.Client`` into a handle for remote
procedure calls against the application's remote API endpoint. Construction
performs a handshake: a GET carrying a random ``rtok`` that the application
must echo back along with its app id.

Calls are JSON documents posted to the same endpoint:

    request:  {"service": "datastore_v3", "method": "Put", "request": {...}}
    response: {"response": {...}}  or  {"error": {"code": 1, "detail": "..."}}
"""

import random
import re
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from dataexport.core.config import settings
from dataexport.core.exceptions import RemoteCallError, SessionError
from dataexport.core.utils import is_local_host, snippet

API_VERSION_HEADER = {"X-Appcfg-Api-Version": "1"}

APP_ID_RE = re.compile(r"""app_id["']?\s*:\s*['"]?([-a-z0-9.:~_]+)""")
RTOK_RE = re.compile(r"""rtok["']?\s*:\s*['"]?([0-9]+)""")


def extract_app_id(body: str) -> Optional[str]:
    match = APP_ID_RE.search(body)
    return match.group(1) if match else None


def extract_rtok(body: str) -> Optional[str]:
    match = RTOK_RE.search(body)
    return match.group(1) if match else None


class RemoteSession:
    """Authenticated remote API handle for a single application.

    The session owns its client for the rest of the run and is never
    modified after connect() returns.

    Attributes:
        host: Application host the session is bound to.
        app_id: Application id reported by the handshake.
        base_url: Remote API endpoint URL.
    """

    def __init__(self, host: str, client: httpx.Client, app_id: str, base_url: str):
        self._host = host
        self._client = client
        self._app_id = app_id
        self._base_url = base_url

    @property
    def host(self) -> str:
        return self._host

    @property
    def app_id(self) -> str:
        return self._app_id

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def endpoint_for(host: str) -> str:
        scheme = "http" if is_local_host(host) else "https"
        return f"{scheme}://{host}{settings.REMOTE_API_PATH}"

    @classmethod
    def connect(cls, host: str, client: httpx.Client) -> "RemoteSession":
        """Performs the handshake and returns a bound session.

        Args:
            host: Application host, ``hostname`` or ``hostname:port``.
            client: Client already logged in to ``host``.

        Raises:
            SessionError: If the endpoint is unreachable, answers with a
                non-200 status, or does not report an app id and the
                expected rtok.
        """
        url = cls.endpoint_for(host)
        rtok = str(random.randint(0, 2**62))

        try:
            response = client.get(url, params={"rtok": rtok}, headers=API_VERSION_HEADER)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise SessionError(f"remote API handshake with {url} failed: {e}") from e

        if response.status_code != httpx.codes.OK:
            raise SessionError(
                f"remote API handshake with {url}: status {response.status_code}; "
                f"body {snippet(response.content)}"
            )

        body = response.text
        app_id = extract_app_id(body)
        if app_id is None:
            raise SessionError(f"no app_id in handshake response {snippet(body)}")
        echoed = extract_rtok(body)
        if echoed != rtok:
            raise SessionError(
                f"handshake rtok mismatch: sent {rtok}, got {echoed!r}"
            )

        logger.debug(f"Remote API handshake with {url} OK (app_id={app_id})")
        return cls(host=host, client=client, app_id=app_id, base_url=url)

    def call(self, service: str, method: str, request: Dict[str, Any]) -> Dict[str, Any]:
        """Invokes ``service.method`` remotely and returns its response payload.

        Raises:
            RemoteCallError: On transport failure, non-200 status, a body or
                ``response`` member that is not a JSON object, or an error
                reported by the application.
        """
        payload = {"service": service, "method": method, "request": request}
        where = f"{service}.{method}"
        try:
            response = self._client.post(
                self._base_url, json=payload, headers=API_VERSION_HEADER
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RemoteCallError(
                f"{where} failed: {e}", service=service, method=method
            ) from e

        if response.status_code != httpx.codes.OK:
            raise RemoteCallError(
                f"{where}: status {response.status_code}; body {snippet(response.content)}",
                service=service,
                method=method,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteCallError(
                f"{where}: non-JSON response {snippet(response.content)}",
                service=service,
                method=method,
            ) from e
        if not isinstance(body, dict):
            raise RemoteCallError(
                f"{where}: unexpected response {snippet(response.text)}",
                service=service,
                method=method,
            )

        error = body.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            detail = error.get("detail") if isinstance(error, dict) else error
            raise RemoteCallError(
                f"{where}: application error {code}: {detail}",
                service=service,
                method=method,
                code=code,
            )

        result = body.get("response")
        if result is None:
            return {}
        if not isinstance(result, dict):
            raise RemoteCallError(
                f"{where}: response is not an object: {snippet(response.text)}",
                service=service,
                method=method,
            )
        return result
