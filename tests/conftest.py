import json
from pathlib import Path
from typing import Dict, List, Set
from urllib.parse import parse_qs

import httpx
import pytest
from loguru import logger

# ============================================================================
# FAKE APPLICATION SERVER
# ============================================================================
# Served through httpx.MockTransport, so no socket is ever opened. It answers:
#   POST https://www.google.com/accounts/ClientLogin   (hosted login, leg 1)
#   GET  /_ah/login?auth=...                           (hosted login, leg 2)
#   GET  /_ah/login?email=...&admin=True               (development login)
#   GET  /_ah/remote_api?rtok=...                      (handshake)
#   POST /_ah/remote_api                               (datastore_v3.Put)
# ============================================================================


class FakeApp:
    """In-memory stand-in for an application and its login provider."""

    def __init__(
        self,
        app_id: str = "dev~demo",
        password: str = "s3cret",
        token: str = "DQAAAGgA-tok",
    ):
        self.app_id = app_id
        self.password = password
        self.token = token
        self.requests: List[httpx.Request] = []
        self.entities: List[Dict] = []
        self.fail_names: Set[str] = set()
        self.malformed_put_names: Set[str] = set()
        self.next_id = 1

        # Knobs for failure scenarios
        self.client_login_body = None
        self.local_login_body = None
        self.token_login_status = 302
        self.handshake_body = None
        self.handshake_status = 200

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=self.transport, follow_redirects=True)

    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.url.host == "www.google.com" and path == "/accounts/ClientLogin":
            return self._client_login(request)
        if path == "/_ah/login":
            return self._login(request)
        if path == "/_ah/remote_api" and request.method == "GET":
            return self._handshake(request)
        if path == "/_ah/remote_api" and request.method == "POST":
            return self._call(request)
        return httpx.Response(404, text="not found")

    def _client_login(self, request: httpx.Request) -> httpx.Response:
        form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        if self.client_login_body is not None:
            return httpx.Response(200, text=self.client_login_body)
        if form.get("Passwd") != self.password:
            return httpx.Response(403, text="Error=BadAuthentication\n")
        return httpx.Response(
            200, text=f"SID=sid-value\nLSID=lsid-value\nAuth={self.token}\n"
        )

    def _login(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        if "auth" in params:
            if params["auth"] != self.token:
                return httpx.Response(401, text="login rejected")
            if self.token_login_status != 302:
                return httpx.Response(self.token_login_status, text="no redirect here")
            return httpx.Response(
                302,
                headers={
                    "Location": f"https://{request.url.host}/",
                    "Set-Cookie": "ACSID=cookie-value; Path=/",
                },
            )
        if self.local_login_body is not None:
            return httpx.Response(200, text=self.local_login_body)
        if params.get("admin") != "True":
            return httpx.Response(200, text="<html>Not logged in</html>")
        return httpx.Response(
            200, text=f"<html>Logged in as {params.get('email')} (admin)</html>"
        )

    def _handshake(self, request: httpx.Request) -> httpx.Response:
        if request.headers.get("X-Appcfg-Api-Version") != "1":
            return httpx.Response(403, text="missing api version header")
        if self.handshake_body is not None:
            return httpx.Response(self.handshake_status, text=self.handshake_body)
        rtok = request.url.params.get("rtok")
        return httpx.Response(
            self.handshake_status, text=f"{{app_id: {self.app_id}, rtok: '{rtok}'}}"
        )

    def _call(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        if (payload["service"], payload["method"]) != ("datastore_v3", "Put"):
            return httpx.Response(
                200, json={"error": {"code": 5, "detail": "call not supported"}}
            )

        entity = payload["request"]["entity"]
        properties = entity["properties"]
        if properties.get("Name") in self.fail_names:
            return httpx.Response(
                200, json={"error": {"code": 2, "detail": "datastore write failed"}}
            )
        if properties.get("Name") in self.malformed_put_names:
            return httpx.Response(200, json={"response": {"key": "not-a-dict"}})

        key = dict(entity["key"])
        if key.get("id") is None:
            key["id"] = self.next_id
            self.next_id += 1
        self.entities.append({"key": key, "properties": properties})
        return httpx.Response(200, json={"response": {"key": key}})


@pytest.fixture
def fake_app():
    return FakeApp()


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages: List[str] = []
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]), level="DEBUG"
    )
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON-serialisable value (or raw text) to a file under tmp_path."""

    def _write(relative: str, content) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        text = content if isinstance(content, str) else json.dumps(content)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
