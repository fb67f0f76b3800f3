"""Fan URLs out to concurrent workers and join their outcomes."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import structlog

from .config import RunConfig
from .engine import BaseSink, Fetcher, FileSink, HttpGetter, HttpxGetter, Worker
from .engine.errors import ConversionError, DispatchError, FatalSetupError, FetchError

# Errors that belong to a single URL and never stop the run.
URL_ERRORS = (ConversionError, FetchError, OSError)


@dataclass(slots=True)
class UrlResult:
    """Outcome of one URL."""

    index: int
    url: str
    output_path: Path
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class RunSummary:
    """Aggregate of a dispatcher run, results ordered by URL index."""

    elapsed: float
    results: list[UrlResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded


class Dispatcher:
    """Run one :class:`Worker` per URL on a bounded thread pool."""

    def __init__(
        self,
        config: RunConfig,
        getter_factory: Callable[[], HttpGetter] | None = None,
        sink_factory: Callable[[Path], BaseSink] | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.getter_factory = getter_factory or HttpxGetter
        self.sink_factory = sink_factory or FileSink
        self.logger = logger or structlog.get_logger("jsonxml.dispatcher")

    def output_path(self, index: int) -> Path:
        return self.config.output_dir / f"{index}.xml"

    def prepare_output_dir(self) -> None:
        output_dir = self.config.output_dir
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FatalSetupError(f"Error creating output directory {str(output_dir)!r}: {exc}") from exc
        if not output_dir.is_dir():
            raise FatalSetupError(f"Output path is not a directory: {str(output_dir)!r}")

    def run(self) -> RunSummary:
        urls = list(self.config.urls)
        self.prepare_output_dir()
        self.logger.info(
            "run_started",
            urls=len(urls),
            output_dir=str(self.config.output_dir),
            max_workers=self.config.max_workers,
        )
        start = time.perf_counter()
        results: list[UrlResult | None] = [None] * len(urls)
        join_error: BaseException | None = None

        max_workers = self.config.max_workers or len(urls)
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="jsonxml") as executor:
            future_to_index = {
                executor.submit(self._process_url, index, url): index
                for index, url in enumerate(urls)
            }
            for future in as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    results[index] = future.result()
                except Exception as exc:  # noqa: BLE001
                    self.logger.error(
                        "worker_crashed", url=urls[index], index=index, error=repr(exc)
                    )
                    if join_error is None:
                        join_error = exc

        if join_error is not None:
            raise DispatchError(f"Worker task failed unexpectedly: {join_error!r}") from join_error

        elapsed = time.perf_counter() - start
        summary = RunSummary(elapsed=elapsed, results=[r for r in results if r is not None])
        self.logger.info(
            "run_finished",
            urls=summary.total,
            succeeded=summary.succeeded,
            failed=summary.failed,
            elapsed=round(elapsed, 6),
        )
        return summary

    def _process_url(self, index: int, url: str) -> UrlResult:
        path = self.output_path(index)
        try:
            fetcher = Fetcher(self.getter_factory(), timeout=self.config.timeout)
            try:
                sink = self.sink_factory(path)
            except BaseException:
                fetcher.close()
                raise
            with Worker(fetcher, sink) as worker:
                worker.process(url)
        except URL_ERRORS as exc:
            self.logger.warning("url_failed", url=url, index=index, error=str(exc))
            return UrlResult(index=index, url=url, output_path=path, error=exc)
        self.logger.info("url_processed", url=url, index=index, output=str(path))
        return UrlResult(index=index, url=url, output_path=path)


__all__ = ["Dispatcher", "RunSummary", "URL_ERRORS", "UrlResult"]
