"""Sink Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseSink(ABC):
    """Byte destination owned by exactly one worker."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Persist the converted document."""

    @abstractmethod
    def close(self) -> None:
        """Release underlying resources."""

    def __enter__(self) -> "BaseSink":
        return self

    def __exit__(self, *_exc) -> None:
        self.close()


__all__ = ["BaseSink"]
