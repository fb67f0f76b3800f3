"""Engine components wiring fetch → convert → write."""

from .converter import convert, parse_record
from .fetcher import Fetcher, HttpGetter, HttpResponse, HttpxGetter
from .record import Record
from .sink import BaseSink, FileSink
from .worker import Worker

__all__ = [
    "BaseSink",
    "Fetcher",
    "FileSink",
    "HttpGetter",
    "HttpResponse",
    "HttpxGetter",
    "Record",
    "Worker",
    "convert",
    "parse_record",
]
