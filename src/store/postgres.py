"""PostgreSQL content store.

Keeps the content document in a single-row ``site_settings`` table
(key, JSONB content, updated_at).  Saving is an upsert on the key, so
it is safe to retry.
"""

from __future__ import annotations

import json
import logging
import re

from generalis.errors import DocumentNotFound, MalformedDocument, StoreUnavailable
from generalis.store.base import ContentGateway

logger = logging.getLogger(__name__)

try:
    import psycopg2

    _HAS_PSYCOPG2 = True
except ImportError:
    psycopg2 = None  # type: ignore[assignment]
    _HAS_PSYCOPG2 = False

DEFAULT_TABLE = "site_settings"

# SQLSTATE for "relation does not exist".
UNDEFINED_TABLE = "42P01"

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class PostgresGateway(ContentGateway):
    """Content gateway backed by a PostgreSQL table."""

    def __init__(
        self,
        database_url: str,
        *,
        table: str = DEFAULT_TABLE,
        connect_timeout: int = 10,
    ) -> None:
        if not _TABLE_NAME_RE.match(table):
            raise ValueError(f"Invalid table name: {table!r}")
        self._database_url = database_url
        self._table = table
        self._connect_timeout = connect_timeout

    @property
    def name(self) -> str:
        return f"postgres:{self._table}"

    @property
    def is_configured(self) -> bool:
        return _HAS_PSYCOPG2 and bool(self._database_url)

    def _connect(self) -> object:
        if not _HAS_PSYCOPG2:
            raise StoreUnavailable("psycopg2 not installed. pip install psycopg2-binary")
        if not self._database_url:
            raise StoreUnavailable("no database URL configured")
        try:
            return psycopg2.connect(self._database_url, connect_timeout=self._connect_timeout)
        except psycopg2.Error as exc:
            raise StoreUnavailable(f"cannot connect to database: {exc}") from exc

    def ensure_schema(self) -> None:
        """Create the settings table if it does not exist."""
        conn = self._connect()
        try:
            with conn:  # type: ignore[attr-defined]
                cur = conn.cursor()  # type: ignore[attr-defined]
                try:
                    cur.execute(
                        f"""CREATE TABLE IF NOT EXISTS {self._table} (
                               key TEXT PRIMARY KEY,
                               content JSONB NOT NULL,
                               updated_at TIMESTAMPTZ DEFAULT NOW()
                           )"""
                    )
                finally:
                    cur.close()
        except psycopg2.Error as exc:
            raise StoreUnavailable(f"cannot create table {self._table}: {exc}") from exc
        finally:
            conn.close()  # type: ignore[attr-defined]
        logger.info("Ensured table %s exists", self._table)

    def _fetch(self) -> object:
        conn = self._connect()
        try:
            cur = conn.cursor()  # type: ignore[attr-defined]
            try:
                cur.execute(
                    f"SELECT content FROM {self._table} WHERE key = %s",
                    (self.key,),
                )
                row = cur.fetchone()
            finally:
                cur.close()
        except psycopg2.Error as exc:
            raise StoreUnavailable(f"query failed: {exc}") from exc
        finally:
            conn.close()  # type: ignore[attr-defined]

        if row is None:
            raise DocumentNotFound(self.key)
        content = row[0]
        # JSONB arrives decoded; a plain JSON/TEXT column arrives as a string.
        if isinstance(content, str):
            try:
                return json.loads(content)
            except json.JSONDecodeError as exc:
                raise MalformedDocument("stored content is not valid JSON") from exc
        return content

    def _store(self, payload: dict) -> None:
        conn = self._connect()
        try:
            with conn:  # type: ignore[attr-defined]
                cur = conn.cursor()  # type: ignore[attr-defined]
                try:
                    cur.execute(
                        f"""INSERT INTO {self._table} (key, content, updated_at)
                            VALUES (%s, %s::jsonb, NOW())
                            ON CONFLICT (key) DO UPDATE
                            SET content = EXCLUDED.content,
                                updated_at = EXCLUDED.updated_at""",
                        (self.key, json.dumps(payload)),
                    )
                finally:
                    cur.close()
        except psycopg2.Error as exc:
            if getattr(exc, "pgcode", None) == UNDEFINED_TABLE:
                raise StoreUnavailable(
                    f"table {self._table} does not exist; run `generalis init-db` first"
                ) from exc
            raise StoreUnavailable(f"database rejected the save: {exc}") from exc
        finally:
            conn.close()  # type: ignore[attr-defined]
