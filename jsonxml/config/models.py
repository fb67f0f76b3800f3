"""Pydantic models describing a conversion run."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_OUTPUT_DIR = Path("./out")
DEFAULT_MAX_WORKERS = 16


def split_urls(value: str) -> list[str]:
    """Split a comma separated URL list, trimming each entry.

    Empty entries are kept so that every URL keeps the index it had in the
    original list. A blank value yields an empty list.
    """

    if not value.strip():
        return []
    return [part.strip() for part in value.split(",")]


class RunConfig(BaseModel):
    """Explicit inputs of a run: what to fetch, where to write, how hard to push."""

    urls: list[str]
    output_dir: Path = Field(default=DEFAULT_OUTPUT_DIR)
    timeout: float = Field(default=5.0, gt=0)
    max_workers: int | None = DEFAULT_MAX_WORKERS

    @field_validator("urls", mode="before")
    @classmethod
    def _coerce_urls(cls, value: Any) -> Any:
        if isinstance(value, str):
            return split_urls(value)
        if isinstance(value, (list, tuple)):
            return [item.strip() if isinstance(item, str) else item for item in value]
        return value

    @field_validator("output_dir", mode="before")
    @classmethod
    def _coerce_output_dir(cls, value: Any) -> Any:
        if isinstance(value, str):
            if not value.strip():
                raise ValueError("output_dir cannot be empty")
            return Path(value.strip())
        return value

    @field_validator("max_workers", mode="before")
    @classmethod
    def _coerce_max_workers(cls, value: Any) -> Any:
        # 0 means no cap: one thread per URL.
        if value in (0, "0", ""):
            return None
        return value

    @model_validator(mode="after")
    def _validate_run(self) -> "RunConfig":
        if not any(self.urls):
            raise ValueError("urls cannot be empty")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be >= 1, or 0/None for no limit")
        return self


__all__ = ["DEFAULT_MAX_WORKERS", "DEFAULT_OUTPUT_DIR", "RunConfig", "split_urls"]
