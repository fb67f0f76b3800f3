"""Settings file loading for jsonxml runs."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml

from .models import RunConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_ENV_VAR = "JSONXML_CONFIG"


def _read_file(path: Path) -> dict:
    if path.suffix not in CONFIG_EXTENSIONS:
        raise ValueError(f"Unsupported settings file type {path.suffix!r}: {path}")
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a mapping: {path}")
    return data


def load_settings(path: Path) -> dict:
    """Read a YAML or JSON settings file."""

    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")
    return _read_file(path)


def default_settings_path() -> Path | None:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return None


def build_config(settings_path: Path | None = None, **overrides: Any) -> RunConfig:
    """Merge a settings file with explicit overrides and validate the result.

    Overrides set to ``None`` are ignored so unset command line options do not
    mask values from the file.
    """

    path = settings_path or default_settings_path()
    payload: dict[str, Any] = load_settings(path) if path else {}
    payload.update({key: value for key, value in overrides.items() if value is not None})
    return RunConfig.model_validate(payload)


__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_EXTENSIONS",
    "build_config",
    "default_settings_path",
    "load_settings",
]
