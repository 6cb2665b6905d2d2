"""Persistence gateways for the content document."""

from __future__ import annotations

from pathlib import Path

from generalis.config import StorageConfig
from generalis.store.base import CONTENT_KEY, ContentGateway
from generalis.store.json_file import JsonFileGateway
from generalis.store.postgres import PostgresGateway


def create_gateway(config: StorageConfig) -> ContentGateway:
    """Build the gateway selected by ``config.backend``.

    Raises:
        ValueError: If the backend name is unknown.
    """
    backend = config.backend.strip().lower()
    if backend == "json":
        return JsonFileGateway(Path(config.path).expanduser())
    if backend in ("postgres", "postgresql"):
        return PostgresGateway(
            config.database_url,
            table=config.table,
            connect_timeout=config.connect_timeout,
        )
    raise ValueError(f"Unknown storage backend: {config.backend!r}")


__all__ = [
    "CONTENT_KEY",
    "ContentGateway",
    "JsonFileGateway",
    "PostgresGateway",
    "create_gateway",
]
