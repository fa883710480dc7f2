"""Shared fixtures: a scripted HTTP executor and trackable body streams."""

from __future__ import annotations

import io
import threading
from dataclasses import dataclass, field

import pytest

from sparql_repo.result import Ok, TransportError
from sparql_repo.transport import HttpResponse

ENDPOINT = "http://store.example.org/sparql"


class TrackedBody(io.BytesIO):
    """BytesIO that remembers it was closed, even after close()."""

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(data)
        self.was_closed = False

    def close(self) -> None:
        self.was_closed = True
        super().close()


class BrokenBody(TrackedBody):
    """Body whose read fails mid-stream."""

    def read(self, size: int | None = -1) -> bytes:
        raise ConnectionResetError("connection reset by peer")


@dataclass
class SentRequest:
    method: str
    url: str
    body: bytes
    headers: dict[str, str]


@dataclass
class FakeExecutor:
    """Executor returning canned responses and recording what was sent."""

    status: int = 200
    reason: str = "OK"
    payload: bytes = b""
    broken_body: bool = False
    transport_error: str | None = None
    sent: list[SentRequest] = field(default_factory=list)
    bodies: list[TrackedBody] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def send(self, method, url, body, headers):
        with self._lock:
            self.sent.append(SentRequest(method, url, body, dict(headers)))
            if self.transport_error is not None:
                return TransportError(error=self.transport_error, url=url)
            stream = BrokenBody() if self.broken_body else TrackedBody(self.payload)
            self.bodies.append(stream)
        return Ok(data=HttpResponse(self.status, self.reason, {}, stream))


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()
