"""Shared test fixtures for firebase client tests.

The database is simulated with ``httpx.MockTransport``: tests queue the
responses the server should give and inspect the requests it received.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from firebase_client import ClientConfig, Ref


DATABASE_URL = "https://test-db.firebaseio.com"


# =============================================================================
# Mock Server
# =============================================================================

class TrackingStream(httpx.SyncByteStream):
    """Response body that counts how often it is closed."""

    def __init__(self, body: bytes, fail_with: Exception | None = None):
        self.body = body
        self.fail_with = fail_with
        self.close_count = 0

    def __iter__(self):
        if self.fail_with is not None:
            raise self.fail_with
        yield self.body

    def close(self) -> None:
        self.close_count += 1


class MockServer:
    """Replays queued responses and records every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.streams: list[TrackingStream] = []
        self._queue: list[Callable[[httpx.Request], httpx.Response]] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def respond(self, status: int = 200, body: Any = None, *, raw: bytes | None = None) -> TrackingStream:
        """Queue a response; body is JSON-encoded unless raw bytes are given."""
        content = raw if raw is not None else json.dumps(body).encode()
        stream = TrackingStream(content)
        self.streams.append(stream)
        self._queue.append(
            lambda request: httpx.Response(
                status,
                headers={"Content-Type": "application/json"},
                stream=stream,
            )
        )
        return stream

    def break_body(self, exc: Exception) -> TrackingStream:
        """Queue a 200 response whose body fails while being read."""
        stream = TrackingStream(b"", fail_with=exc)
        self.streams.append(stream)
        self._queue.append(lambda request: httpx.Response(200, stream=stream))
        return stream

    def fail(self, exc_type: type[httpx.RequestError], message: str = "boom") -> None:
        """Queue a transport failure."""
        def raise_error(request: httpx.Request) -> httpx.Response:
            raise exc_type(message, request=request)
        self._queue.append(raise_error)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._queue:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        return self._queue.pop(0)(request)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def server() -> MockServer:
    return MockServer()


@pytest.fixture
def config() -> ClientConfig:
    """Configuration independent of FIREBASE_* environment variables."""
    return ClientConfig(
        url=None,
        auth=None,
        auth_param="auth",
        timeout=5.0,
        user_agent="firebase-client-tests",
    )


@pytest.fixture
def db(server, config) -> Ref:
    """Database root wired to the mock server."""
    return Ref(DATABASE_URL, auth="secret", config=config, transport=server.transport)
