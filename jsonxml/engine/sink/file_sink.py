"""File based sink."""

from __future__ import annotations

from pathlib import Path

from .base import BaseSink


class FileSink(BaseSink):
    """Write one document to a local file, truncating any previous content."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._file = self.path.open("wb")

    def write(self, data: bytes) -> None:
        self._file.write(data)
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    @property
    def closed(self) -> bool:
        return self._file.closed


__all__ = ["FileSink"]
