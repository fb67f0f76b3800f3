"""jsonxml: concurrent JSON record fetching and XML conversion."""

from .config import RunConfig
from .dispatcher import Dispatcher, RunSummary, UrlResult
from .engine import Record, convert

__all__ = ["Dispatcher", "Record", "RunConfig", "RunSummary", "UrlResult", "convert"]
