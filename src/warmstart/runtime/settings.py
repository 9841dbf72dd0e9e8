# SPDX-License-Identifier: MIT
"""Loader configuration management.

This module exposes :class:`Settings`, a ``pydantic-settings`` model that
combines values sourced from an optional YAML configuration file and
environment variables. Environment variables take precedence over file-based
values and the merged configuration is validated before use.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import logfire
import yaml
from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import DEFAULT_CACHE_DIR, DEFAULT_SOURCE_DIR, DEFAULT_STORE_NAME

ENV_PREFIX = "WARMSTART_"


class Settings(BaseSettings):
    """Loader settings combining file-based and environment configuration."""

    cache_dir: Path = Field(
        DEFAULT_CACHE_DIR, description="Per-user directory holding the store file."
    )
    store_name: str = Field(
        DEFAULT_STORE_NAME, min_length=1, description="File name of the store."
    )
    source_dir: str = Field(
        DEFAULT_SOURCE_DIR,
        min_length=1,
        description="Subdirectory of each runtime path root holding sources.",
    )
    runtime_path: list[Path] = Field(
        default_factory=list, description="Ordered runtime path roots."
    )
    reduced_search: bool = Field(
        True, description="Narrow the search path to source roots on cache misses."
    )
    profile: bool = Field(False, description="Collect per-module load timings.")
    log_level: str = Field("warn", description="Logging verbosity level.")
    appdir: str | None = Field(
        None,
        validation_alias=AliasChoices("WARMSTART_APPDIR", "APPDIR"),
        description="Relocatable installation root replaced in persisted paths.",
    )
    logfire_token: str | None = Field(
        None, description="Logfire authentication token, if available.", repr=False
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX, extra="ignore", populate_by_name=True
    )

    @property
    def store_path(self) -> Path:
        """Return the location of the store file."""
        return self.cache_dir / self.store_name


def _read_config(path: Path) -> dict[str, Any]:
    """Return the mapping stored in the YAML file at ``path``.

    Raises:
        RuntimeError: If the file cannot be read or is not a mapping.
    """
    with logfire.span("fs.read_config", attributes={"path": str(path)}):
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise RuntimeError(f"Cannot read configuration file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"Configuration file {path} must contain a mapping")
    return data


def _resolve_cache_dir(raw: str | Path) -> Path:
    """Expand ``raw`` and make sure the directory exists when possible."""
    expanded = os.path.expandvars(str(raw))
    if "$" in expanded:
        expanded = str(DEFAULT_CACHE_DIR)
    cache_dir = Path(expanded).expanduser()
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        # The store reports write failures later; the session still runs.
        logfire.warning("Cannot create cache directory", path=str(cache_dir), error=str(exc))
    return cache_dir


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load and validate loader settings.

    Values are read from the optional YAML file at ``config_path`` and merged
    with environment variables using ``pydantic-settings``. When a value is
    provided in both sources the environment variable wins. A ``.env`` file in
    the working directory is loaded automatically when present.

    Args:
        config_path: Optional path to a YAML configuration file.

    Returns:
        Settings: Fully validated configuration.

    Raises:
        RuntimeError: If the file is unreadable or values are invalid.
    """
    file_values = _read_config(Path(config_path)) if config_path else {}
    overrides = {
        key: value
        for key, value in file_values.items()
        if f"{ENV_PREFIX}{key}".upper() not in os.environ
    }
    env_file_path = Path(".env")
    env_file = env_file_path if env_file_path.exists() else None
    try:
        settings = Settings(_env_file=env_file, **overrides)
    except ValidationError as exc:
        # Summarise validation issues so the caller receives clear feedback.
        details = "; ".join(
            f"{'.'.join(map(str, error['loc']))}: {error['msg']}"
            for error in exc.errors()
        )
        raise RuntimeError(f"Invalid configuration: {details}") from exc
    settings.cache_dir = _resolve_cache_dir(settings.cache_dir)
    logfire.debug("Loaded settings", settings=repr(settings))
    return settings


__all__ = ["ENV_PREFIX", "Settings", "load_settings"]
