from __future__ import annotations

import threading
import time
from pathlib import Path

import httpx
import pytest

from jsonxml.config import RunConfig
from jsonxml.dispatcher import Dispatcher
from jsonxml.engine.errors import DispatchError, FatalSetupError, TransportError
from jsonxml.engine.record import Record
from jsonxml.engine.sink import FileSink

from .conftest import VALID_XML, ConcurrencyGauge, StubGetter, make_response


def _record_payload(index: int) -> bytes:
    return Record(id=index + 1, first_name=f"user{index}").model_dump_json(by_alias=True).encode()


def test_dispatcher_isolates_failing_url(tmp_path: Path, default_routes) -> None:
    output_dir = tmp_path / "nested" / "out"
    config = RunConfig(urls=["valid", "missing", "valid"], output_dir=output_dir)
    getters: list[StubGetter] = []

    def factory() -> StubGetter:
        getter = StubGetter(default_routes)
        getters.append(getter)
        return getter

    summary = Dispatcher(config, getter_factory=factory).run()

    assert output_dir.is_dir()
    assert (output_dir / "0.xml").read_bytes() == VALID_XML
    assert (output_dir / "2.xml").read_bytes() == VALID_XML
    assert (output_dir / "1.xml").read_bytes() == b""
    assert summary.total == 3
    assert summary.succeeded == 2
    assert summary.failed == 1
    assert [result.index for result in summary.results] == [0, 1, 2]
    assert isinstance(summary.results[1].error, TransportError)
    assert summary.results[1].output_path == output_dir / "1.xml"
    assert summary.elapsed >= 0
    assert len(getters) == 3
    assert all(getter.closed for getter in getters)


def test_dispatcher_reports_each_error_kind(tmp_path: Path, default_routes) -> None:
    config = RunConfig(urls="valid, invalid, unknown, html", output_dir=tmp_path)
    summary = Dispatcher(config, getter_factory=lambda: StubGetter(default_routes)).run()
    kinds = [type(result.error).__name__ if result.error else None for result in summary.results]
    assert kinds == [
        None,
        "MalformedInputError",
        "UnrecognizedSchemaError",
        "UnexpectedContentTypeError",
    ]
    for index in (1, 2, 3):
        assert (tmp_path / f"{index}.xml").read_bytes() == b""


def test_dispatcher_names_outputs_by_index_not_completion(tmp_path: Path) -> None:
    urls = [f"https://example.com/{i}" for i in range(5)]

    def delayed(index: int):
        def _route() -> httpx.Response:
            # Earlier URLs finish last.
            time.sleep(0.02 * (len(urls) - index))
            return make_response(_record_payload(index))

        return _route

    routes = {url: delayed(i) for i, url in enumerate(urls)}
    config = RunConfig(urls=urls, output_dir=tmp_path, max_workers=None)
    summary = Dispatcher(config, getter_factory=lambda: StubGetter(routes)).run()

    assert summary.succeeded == 5
    for index in range(5):
        record = Record.from_xml((tmp_path / f"{index}.xml").read_bytes())
        assert record.first_name == f"user{index}"
        assert summary.results[index].url == urls[index]


def test_dispatcher_runs_workers_in_parallel(tmp_path: Path) -> None:
    barrier = threading.Barrier(4, timeout=5)

    def route() -> httpx.Response:
        barrier.wait()
        return make_response(_record_payload(0))

    urls = [f"u{i}" for i in range(4)]
    config = RunConfig(urls=urls, output_dir=tmp_path, max_workers=0)
    summary = Dispatcher(
        config, getter_factory=lambda: StubGetter({url: route for url in urls})
    ).run()
    assert summary.succeeded == 4


def test_dispatcher_bounds_concurrency(tmp_path: Path) -> None:
    gauge = ConcurrencyGauge()

    def route() -> httpx.Response:
        gauge.enter()
        time.sleep(0.03)
        gauge.leave()
        return make_response(_record_payload(0))

    urls = [f"u{i}" for i in range(8)]
    config = RunConfig(urls=urls, output_dir=tmp_path, max_workers=2)
    summary = Dispatcher(
        config, getter_factory=lambda: StubGetter({url: route for url in urls})
    ).run()
    assert summary.succeeded == 8
    assert 1 <= gauge.peak <= 2


def test_dispatcher_sink_failure_is_per_url(tmp_path: Path, default_routes) -> None:
    def sink_factory(path: Path) -> FileSink:
        if path.name == "1.xml":
            raise PermissionError(f"denied: {path}")
        return FileSink(path)

    config = RunConfig(urls=["valid", "valid", "valid"], output_dir=tmp_path)
    summary = Dispatcher(
        config,
        getter_factory=lambda: StubGetter(default_routes),
        sink_factory=sink_factory,
    ).run()
    assert summary.succeeded == 2
    assert isinstance(summary.results[1].error, PermissionError)
    assert not (tmp_path / "1.xml").exists()


def test_dispatcher_setup_failure_launches_nothing(tmp_path: Path) -> None:
    blocker = tmp_path / "taken"
    blocker.write_text("not a directory", encoding="utf-8")
    calls: list[int] = []

    def factory() -> StubGetter:
        calls.append(1)
        return StubGetter({})

    config = RunConfig(urls=["valid"], output_dir=blocker)
    with pytest.raises(FatalSetupError):
        Dispatcher(config, getter_factory=factory).run()
    assert calls == []


def test_dispatcher_unexpected_worker_failure_is_fatal(tmp_path: Path, default_routes) -> None:
    def sink_factory(path: Path) -> FileSink:
        if path.name == "0.xml":
            raise RuntimeError("sink exploded")
        return FileSink(path)

    config = RunConfig(urls=["valid", "valid"], output_dir=tmp_path)
    dispatcher = Dispatcher(
        config,
        getter_factory=lambda: StubGetter(default_routes),
        sink_factory=sink_factory,
    )
    with pytest.raises(DispatchError) as excinfo:
        dispatcher.run()
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    # Siblings still ran to completion before the run failed.
    assert (tmp_path / "1.xml").read_bytes() == VALID_XML
