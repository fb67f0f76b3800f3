"""Shared fixtures: stub HTTP capability, in-memory sink and record payloads."""

from __future__ import annotations

import io
import threading
from typing import Callable, Iterator

import httpx
import pytest

from jsonxml.engine.sink import BaseSink

VALID_PAYLOAD = b'{"first_name": "firstname", "last_name":"lastname"}'
VALID_XML = (
    " <record>\n"
    "  <Id>0</Id>\n"
    "  <name>\n"
    "   <first>firstname</first>\n"
    "   <last>lastname</last>\n"
    "  </name>\n"
    "  <City></City>\n"
    "  <State></State>\n"
    " </record>"
).encode("utf-8")


class RecordingStream(httpx.SyncByteStream):
    """Byte stream remembering whether it was consumed or closed."""

    def __init__(self, content: bytes = b"", error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.consumed = False
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        self.consumed = True
        if self.error is not None:
            raise self.error
        yield self.content

    def close(self) -> None:
        self.closed = True


def make_response(
    body: bytes = VALID_PAYLOAD,
    content_type: str | None = "application/json",
    status_code: int = 200,
    read_error: Exception | None = None,
) -> httpx.Response:
    headers = {"Content-Type": content_type} if content_type is not None else {}
    stream = RecordingStream(body, error=read_error)
    return httpx.Response(status_code, headers=headers, stream=stream)


Route = Callable[[], httpx.Response]


class StubGetter:
    """HTTP-GET capability answering from a route table, no network involved."""

    def __init__(self, routes: dict[str, Route | Exception]) -> None:
        self.routes = routes
        self.calls: list[tuple[str, float]] = []
        self.responses: list[httpx.Response] = []
        self.closed = False

    def get(self, url: str, timeout: float) -> httpx.Response:
        self.calls.append((url, timeout))
        route = self.routes.get(url)
        if route is None:
            raise httpx.ConnectError("Unknown url")
        if isinstance(route, Exception):
            raise route
        response = route()
        self.responses.append(response)
        return response

    def close(self) -> None:
        self.closed = True


class MemorySink(BaseSink):
    """Sink keeping every write in memory."""

    def __init__(self) -> None:
        self.buffer = io.BytesIO()
        self.writes = 0
        self.closed = False

    def write(self, data: bytes) -> None:
        self.writes += 1
        self.buffer.write(data)

    def close(self) -> None:
        self.closed = True

    def getvalue(self) -> bytes:
        return self.buffer.getvalue()


class ConcurrencyGauge:
    """Track how many callers are inside :meth:`enter` at the same time."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.active = 0
        self.peak = 0

    def enter(self) -> None:
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)

    def leave(self) -> None:
        with self._lock:
            self.active -= 1


@pytest.fixture
def default_routes() -> dict[str, Route | Exception]:
    return {
        "valid": lambda: make_response(VALID_PAYLOAD),
        "invalid": lambda: make_response(b'"last_name":"lastname"}'),
        "unknown": lambda: make_response(b'{"foo":"bar"}'),
        "html": lambda: make_response(b"<html></html>", content_type="text/html"),
    }


@pytest.fixture
def stub_getter(default_routes) -> StubGetter:
    return StubGetter(default_routes)


@pytest.fixture
def memory_sink() -> MemorySink:
    return MemorySink()
