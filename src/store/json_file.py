"""JSON-file content store.

Persists content records in a single JSON file keyed by record key.
Writes go to a sibling temp file that is then renamed over the
original, so readers see either the old document or the new one.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path

from generalis.errors import DocumentNotFound, MalformedDocument, StoreUnavailable
from generalis.store.base import ContentGateway
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

STORE_FILENAME = ".generalis-content.json"


class _StoreRecord(BaseModel):
    """One row of the records table."""

    key: str
    content: dict
    updated_at: datetime


class _StoreData(BaseModel):
    """Internal wrapper for JSON serialization."""

    records: list[_StoreRecord] = Field(default_factory=list)


class JsonFileGateway(ContentGateway):
    """Content gateway backed by a local JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def name(self) -> str:
        return f"json:{self._path}"

    @property
    def path(self) -> Path:
        return self._path

    # ── Private helpers ──────────────────────────────────────────

    def _read(self) -> _StoreData | None:
        if not self._path.exists():
            return None
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise StoreUnavailable(f"cannot read {self._path}: {exc}") from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedDocument(f"{self._path} is not valid JSON") from exc
        try:
            return _StoreData.model_validate(raw)
        except ValidationError as exc:
            raise MalformedDocument(f"{self._path} has an unexpected layout") from exc

    def _write(self, data: _StoreData) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data.model_dump_json(indent=2))
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    # ── ContentGateway hooks ─────────────────────────────────────

    def _fetch(self) -> object:
        data = self._read()
        if data is None:
            raise DocumentNotFound(self.key)
        for record in data.records:
            if record.key == self.key:
                return record.content
        raise DocumentNotFound(self.key)

    def _store(self, payload: dict) -> None:
        try:
            data = self._read() or _StoreData()
        except MalformedDocument:
            logger.warning("Corrupt content store at %s, starting fresh", self._path)
            data = _StoreData()

        record = _StoreRecord(key=self.key, content=payload, updated_at=datetime.now(tz=UTC))
        data.records = [r for r in data.records if r.key != self.key]
        data.records.append(record)

        try:
            self._write(data)
        except OSError as exc:
            raise StoreUnavailable(f"cannot write {self._path}: {exc}") from exc
