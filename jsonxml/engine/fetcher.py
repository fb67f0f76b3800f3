"""HTTP fetching of JSON payloads through an injectable GET capability."""

from __future__ import annotations

import time
from typing import Iterator, Mapping, Protocol

import httpx
import structlog

from .errors import ResponseReadError, TransportError, UnexpectedContentTypeError

JSON_CONTENT_TYPE = "application/json"
DEFAULT_TIMEOUT = 5.0


class HttpResponse(Protocol):
    """Subset of :class:`httpx.Response` the fetcher relies on."""

    status_code: int
    headers: Mapping[str, str]

    def iter_bytes(self) -> Iterator[bytes]: ...

    def close(self) -> None: ...


class HttpGetter(Protocol):
    """Capability able to issue a single GET request."""

    def get(self, url: str, timeout: float) -> HttpResponse: ...


class HttpxGetter:
    """Default capability backed by :class:`httpx.Client`.

    Responses are returned streamed so the body is only downloaded when the
    caller decides to read it.
    """

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client or httpx.Client(follow_redirects=True)

    def get(self, url: str, timeout: float) -> httpx.Response:
        request = self._client.build_request("GET", url, timeout=timeout)
        return self._client.send(request, stream=True)

    def close(self) -> None:
        self._client.close()


class Fetcher:
    """Retrieve the raw JSON body of a URL."""

    def __init__(
        self,
        getter: HttpGetter | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.getter = getter or HttpxGetter()
        self.timeout = timeout
        self.logger = logger or structlog.get_logger("jsonxml.fetcher")

    def fetch(self, url: str) -> bytes:
        """Return the body of ``url``; the whole exchange must finish within ``timeout``."""

        deadline = time.monotonic() + self.timeout
        try:
            response = self.getter.get(url, timeout=self.timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"get failed: {exc}") from exc

        try:
            self.logger.debug("response_received", url=url, status=response.status_code)
            content_type = response.headers.get("Content-Type", "")
            if content_type != JSON_CONTENT_TYPE:
                raise UnexpectedContentTypeError(content_type)
            self._check_deadline(deadline)
            chunks = []
            try:
                for chunk in response.iter_bytes():
                    chunks.append(chunk)
                    self._check_deadline(deadline)
            except httpx.HTTPError as exc:
                raise ResponseReadError(f"read failed: {exc}") from exc
            return b"".join(chunks)
        finally:
            response.close()

    def _check_deadline(self, deadline: float) -> None:
        if time.monotonic() > deadline:
            raise TransportError(f"get failed: timeout of {self.timeout}s exceeded")

    def close(self) -> None:
        close = getattr(self.getter, "close", None)
        if callable(close):
            close()


__all__ = [
    "DEFAULT_TIMEOUT",
    "Fetcher",
    "HttpGetter",
    "HttpResponse",
    "HttpxGetter",
    "JSON_CONTENT_TYPE",
]
