"""Per-URL unit of work: fetch, convert, write."""

from __future__ import annotations

from typing import Callable

from .converter import convert
from .fetcher import Fetcher
from .sink import BaseSink


class Worker:
    """Own one sink and push a single URL through the pipeline.

    The sink is acquired by the caller before :meth:`process` runs and is
    closed by :meth:`close` whatever the outcome. Errors from any stage are
    propagated untouched and nothing is written unless conversion succeeds.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        sink: BaseSink,
        converter: Callable[[bytes], bytes] = convert,
    ) -> None:
        self.fetcher = fetcher
        self.sink = sink
        self.converter = converter

    def process(self, url: str) -> None:
        body = self.fetcher.fetch(url)
        document = self.converter(body)
        self.sink.write(document)

    def close(self) -> None:
        try:
            self.sink.close()
        finally:
            self.fetcher.close()

    def __enter__(self) -> "Worker":
        return self

    def __exit__(self, *_exc) -> None:
        self.close()


__all__ = ["Worker"]
