"""Shared test fixtures for the incident.io client tests.

Provides a mock HTTP server that records every request and answers
with queued canned responses, falling back to a 404 error envelope.
"""

from __future__ import annotations

import json
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import parse_qs, urlsplit

import pytest

import incidentio
from incidentio import Client, Context
from incidentio.enums import API_KEY_ENV_VAR

NOT_FOUND_BODY = {
    "type": "not_found",
    "status": 404,
    "request_id": "req-404",
    "errors": [{"code": "not_found", "message": "Resource not found"}],
}


class _ApiHandler(BaseHTTPRequestHandler):
    """Mock incident.io endpoint that records requests."""

    def _handle(self) -> None:
        content_length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(content_length) if content_length else b""
        parts = urlsplit(self.path)

        # Record the request
        self.server.requests.append(  # type: ignore[attr-defined]
            {
                "method": self.command,
                "path": parts.path,
                "raw_query": parts.query,
                "query": parse_qs(parts.query),
                "headers": dict(self.headers.items()),
                "body": body,
            }
        )

        response_queue = self.server.response_queue  # type: ignore[attr-defined]
        if response_queue:
            status_code, response_body = response_queue.pop(0)
        else:
            status_code, response_body = 404, NOT_FOUND_BODY

        if not isinstance(response_body, bytes):
            response_body = json.dumps(response_body).encode()

        self.send_response(status_code)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(response_body)))
        self.end_headers()
        self.wfile.write(response_body)

    do_GET = _handle
    do_POST = _handle

    def log_message(self, format: str, *args: Any) -> None:
        """Suppress request logging during tests."""
        pass


class MockApiServer:
    """A mock HTTP server standing in for api.incident.io."""

    def __init__(self) -> None:
        self.server = HTTPServer(("127.0.0.1", 0), _ApiHandler)
        self.server.requests = []  # type: ignore[attr-defined]
        self.server.response_queue = []  # type: ignore[attr-defined]
        self.port = self.server.server_address[1]
        self.url = f"http://127.0.0.1:{self.port}"
        self.base_url = f"{self.url}/v1/"
        self._thread = threading.Thread(target=self.server.serve_forever, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self.server.shutdown()
        self.server.server_close()
        self._thread.join(timeout=5)

    @property
    def requests(self) -> list[dict[str, Any]]:
        return self.server.requests  # type: ignore[attr-defined]

    def enqueue(self, status_code: int, body: dict[str, Any] | bytes | None = None) -> None:
        """Queue a response for the next request. None means an empty body."""
        if body is None:
            body = b""
        self.server.response_queue.append((status_code, body))  # type: ignore[attr-defined]

    def last_request(self) -> dict[str, Any]:
        return self.requests[-1]


@pytest.fixture
def mock_server():
    """Fixture providing a mock incident.io server."""
    server = MockApiServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def client(mock_server):
    """A client pointed at the mock server."""
    c = Client(api_key="test-api-key", base_url=mock_server.base_url, timeout=5)
    yield c
    c.close()


@pytest.fixture
def ctx() -> Context:
    return Context.background()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep the developer's env and config files out of the tests."""
    monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
    for var in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    yield
    incidentio.reset()
