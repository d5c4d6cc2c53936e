"""Credential acquisition for the application's admin login.

Two login protocols are supported, selected once per run from the host:

- LocalAuth: the development server's fake login page. A single GET with the
  email and ``admin=True``; success is a ``Logged in`` marker in the body. No
  password is involved.
- RemoteAuth: hosted login in three legs. The email and password are
  exchanged for an ``Auth=`` token at the ClientLogin endpoint, the token is
  presented to the application's login page, and the redirect it answers with
  sets the session cookies.

Both produce an ``httpx.Client`` whose cookie jar carries the session for all
later requests.

Typical usage example:
    credentials = select_credentials(config)
    client = authenticated_client(config.host, credentials)
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import httpx
from loguru import logger

from dataexport.core.config import settings
from dataexport.core.exceptions import AuthError, ConfigError, TokenNotFound
from dataexport.core.import_config import ImportConfig
from dataexport.core.utils import snippet

AUTH_TOKEN_RE = re.compile(rb"Auth=(\S+)")
LOGGED_IN_MARKER = b"Logged in"


def extract_auth_token(body: bytes) -> str:
    """Pulls the ``Auth=`` token out of a ClientLogin response body.

    Raises:
        TokenNotFound: If the body carries no token.
    """
    match = AUTH_TOKEN_RE.search(body)
    if match is None:
        raise TokenNotFound(f"no auth code in response {snippet(body)}")
    return match.group(1).decode("utf-8", errors="replace")


def require_login_marker(body: bytes) -> None:
    """Checks a development login page for the logged-in marker.

    Raises:
        TokenNotFound: If the marker is absent.
    """
    if LOGGED_IN_MARKER not in body:
        raise TokenNotFound(f"no login marker in response {snippet(body)}")


def _expect_ok(response: httpx.Response, host: str) -> None:
    if response.status_code != httpx.codes.OK:
        raise AuthError(
            f"unsuccessful request to {response.request.url}: "
            f"status {response.status_code}; body {snippet(response.content)}",
            host=host,
            status_code=response.status_code,
        )


@dataclass(frozen=True)
class LocalAuth:
    """Development-server login: email only, always admin."""

    email: str

    def login(self, client: httpx.Client, host: str) -> None:
        url = f"http://{host}{settings.LOGIN_PATH}"
        params = {
            "email": self.email,
            "admin": "True",
            "action": "Login",
            "continue": "",
        }
        try:
            response = client.get(url, params=params)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise AuthError(f"could not log in at {url}: {e}", host=host) from e

        _expect_ok(response, host)
        try:
            require_login_marker(response.content)
        except TokenNotFound as e:
            raise TokenNotFound(str(e), host=host, status_code=response.status_code) from None
        logger.debug(f"Logged in to {host} as {self.email} (local)")


@dataclass(frozen=True)
class RemoteAuth:
    """Hosted login: ClientLogin token exchanged for session cookies."""

    email: str
    password: str = field(repr=False)

    def request_token(self, client: httpx.Client, host: str) -> str:
        form = {
            "Email": self.email,
            "Passwd": self.password,
            "service": settings.CLIENT_LOGIN_SERVICE,
            "source": settings.CLIENT_LOGIN_SOURCE,
            "accountType": settings.CLIENT_LOGIN_ACCOUNT_TYPE,
        }
        try:
            response = client.post(settings.CLIENT_LOGIN_URL, data=form)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise AuthError(f"could not post login: {e}", host=host) from e

        _expect_ok(response, host)
        try:
            return extract_auth_token(response.content)
        except TokenNotFound as e:
            raise TokenNotFound(str(e), host=host, status_code=response.status_code) from None

    def login(self, client: httpx.Client, host: str) -> None:
        token = self.request_token(client, host)

        url = f"https://{host}{settings.LOGIN_PATH}"
        try:
            # The redirect is the success signal and carries the cookies
            response = client.get(
                url,
                params={"continue": "/", "auth": token},
                follow_redirects=False,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise AuthError(f"could not get auth cookies: {e}", host=host) from e

        if not response.is_redirect:
            raise AuthError(
                f"unsuccessful request to {url}: expected a redirect, got "
                f"status {response.status_code}; body {snippet(response.content)}",
                host=host,
                status_code=response.status_code,
            )
        logger.debug(
            f"Logged in to {host} as {self.email} "
            f"({len(client.cookies)} cookie(s) set)"
        )


Credentials = Union[LocalAuth, RemoteAuth]


def read_password(path: Path) -> str:
    """Reads a password file, stripping surrounding whitespace.

    Raises:
        ConfigError: If the file cannot be read.
    """
    try:
        return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Unable to read password from {str(path)!r}: {e}") from e


def select_credentials(config: ImportConfig) -> Credentials:
    """Picks the login protocol for ``config.host``.

    The password file is only read for remote hosts.
    """
    if config.is_local:
        return LocalAuth(email=config.email)
    if config.password_file is None:
        raise ConfigError("Required flag: -password_file")
    return RemoteAuth(email=config.email, password=read_password(config.password_file))


def authenticated_client(
    host: str,
    credentials: Credentials,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """Creates a cookie-carrying client and logs it in to ``host``.

    Args:
        host: Application host, ``hostname`` or ``hostname:port``.
        credentials: LocalAuth or RemoteAuth from select_credentials().
        transport: Optional httpx transport, used by tests.

    Returns:
        The logged-in client. The caller owns it and must close it.

    Raises:
        AuthError: If any leg of the login fails.
    """
    client = httpx.Client(
        follow_redirects=True,
        timeout=settings.HTTP_TIMEOUT,
        transport=transport,
    )
    try:
        credentials.login(client, host)
    except Exception:
        client.close()
        raise
    logger.info(f"Authenticated against {host} as {credentials.email}")
    return client
