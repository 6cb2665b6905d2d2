"""Unified configuration loaded from .generalis.toml and env vars.

Loading order: defaults → TOML file → env vars.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from generalis.errors import ConfigError
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".generalis.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
    Path.home() / ".config" / "generalis",
]


class StorageConfig(BaseModel):
    """[storage] section."""

    backend: str = "json"  # "json" or "postgres"
    path: str = "./.generalis-content.json"
    database_url: str = ""
    table: str = "site_settings"
    connect_timeout: int = 10


class CaptionsConfig(BaseModel):
    """[captions] section."""

    model: str = "gemini-2.5-flash"
    api_key: str = ""
    max_suggestions: int = 3
    timeout: int = 60

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


class AdminConfig(BaseModel):
    """[admin] section.

    The secret key only deters casual visitors; anyone who can read the
    config can read it.
    """

    secret_key: str = "1234"


class GeneralisConfig(BaseModel):
    """Top-level configuration model."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    captions: CaptionsConfig = Field(default_factory=CaptionsConfig)
    admin: AdminConfig = Field(default_factory=AdminConfig)


def load_config(path: str | Path | None = None) -> GeneralisConfig:
    """Build the effective configuration.

    An explicit *path* is used on its own.  Otherwise the first
    ``.generalis.toml`` found in CONFIG_SEARCH_PATHS wins, falling back
    to ``~/.config/generalis/config.toml``.  Environment variables are
    applied last.

    A broken file is an error rather than a reason to fall back to
    defaults, since the defaults point at a different store.

    Raises:
        ConfigError: If the selected file is not valid TOML.
        pydantic.ValidationError: If a value has the wrong type.
    """
    data: dict[str, object] = {}

    if path is not None:
        candidates = [Path(path)]
    else:
        candidates = [d / CONFIG_FILENAME for d in CONFIG_SEARCH_PATHS]
        candidates.append(Path.home() / ".config" / "generalis" / "config.toml")

    for candidate in candidates:
        if candidate.is_file():
            data = _load_toml(candidate)
            logger.info("Loaded config from %s", candidate)
            break
    else:
        if path is not None:
            logger.warning("Config file not found: %s", path)

    config = GeneralisConfig.model_validate(data)
    return _apply_env_vars(config)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        raise ConfigError(f"cannot parse {path}: {exc}") from exc


def _apply_env_vars(config: GeneralisConfig) -> GeneralisConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "GENERALIS_STORAGE_BACKEND": ("storage", "backend"),
        "GENERALIS_STORAGE_PATH": ("storage", "path"),
        "DATABASE_URL": ("storage", "database_url"),
        "GENERALIS_CAPTION_MODEL": ("captions", "model"),
        "GEMINI_API_KEY": ("captions", "api_key"),
        "GOOGLE_AI_API_KEY": ("captions", "api_key"),
        "GENERALIS_ADMIN_SECRET": ("admin", "secret_key"),
    }

    # Later entries win, so GOOGLE_AI_API_KEY beats GEMINI_API_KEY.
    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    return GeneralisConfig.model_validate(data)
