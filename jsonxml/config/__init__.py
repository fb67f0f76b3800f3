"""Configuration package exports."""

from .loader import CONFIG_ENV_VAR, build_config, load_settings
from .models import RunConfig, split_urls

__all__ = ["CONFIG_ENV_VAR", "RunConfig", "build_config", "load_settings", "split_urls"]
