"""Base class for content persistence backends.

Subclasses only move raw payloads in and out of their store.  The
load/save policy lives here so every backend behaves the same way:
``load`` never raises and falls back to the default document as a
whole, ``save`` validates first and reports every failure as
``SaveFailed``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from generalis.content.defaults import default_content
from generalis.content.models import ContentDocument
from generalis.errors import (
    DocumentNotFound,
    GatewayError,
    MalformedDocument,
    SaveFailed,
    StoreUnavailable,
)
from pydantic import ValidationError

logger = logging.getLogger(__name__)

# There is exactly one content document per site.
CONTENT_KEY = "site_content"


class ContentGateway(ABC):
    """Loads and saves the single ContentDocument."""

    key: str = CONTENT_KEY

    @property
    @abstractmethod
    def name(self) -> str:
        """Short backend name used in log messages."""

    @abstractmethod
    def _fetch(self) -> object:
        """Return the stored payload for ``self.key``.

        Raises:
            DocumentNotFound: No record exists.
            StoreUnavailable: The store cannot be reached or read.
            MalformedDocument: The record cannot be decoded.
        """

    @abstractmethod
    def _store(self, payload: dict) -> None:
        """Upsert ``payload`` under ``self.key`` in one atomic write.

        Raises:
            StoreUnavailable: The store cannot be reached or rejected the write.
        """

    def load(self) -> ContentDocument:
        """Return the persisted document, or the default document.

        Any partial or invalid record is discarded entirely; it is never
        merged with the defaults.
        """
        try:
            payload = self._fetch()
            if payload is None:
                raise DocumentNotFound(self.key)
            return self._validate(payload)
        except DocumentNotFound:
            logger.info("No stored content in %s, using defaults", self.name)
        except MalformedDocument as exc:
            logger.warning("Stored content in %s is malformed, using defaults: %s", self.name, exc)
        except StoreUnavailable as exc:
            logger.warning("Content store %s unavailable, using defaults: %s", self.name, exc)
        except Exception:
            logger.exception("Unexpected error loading content from %s, using defaults", self.name)
        return default_content()

    def save(self, document: ContentDocument) -> None:
        """Replace the stored document with *document*.

        Raises:
            SaveFailed: On validation, connection, or backend errors.
        """
        try:
            payload = self._validate(document.to_payload()).to_payload()
        except MalformedDocument as exc:
            raise SaveFailed(f"content is invalid ({exc})") from exc

        try:
            self._store(payload)
        except GatewayError as exc:
            raise SaveFailed(str(exc) or type(exc).__name__) from exc
        except Exception as exc:
            logger.exception("Unexpected error saving content to %s", self.name)
            raise SaveFailed(f"{self.name} rejected the save ({exc})") from exc
        logger.info("Saved content to %s", self.name)

    @staticmethod
    def _validate(payload: object) -> ContentDocument:
        try:
            return ContentDocument.from_payload(payload)
        except ValidationError as exc:
            raise MalformedDocument(f"{exc.error_count()} schema error(s)") from exc
