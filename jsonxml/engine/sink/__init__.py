"""Sink SPI and implementations."""

from .base import BaseSink
from .file_sink import FileSink

__all__ = ["BaseSink", "FileSink"]
