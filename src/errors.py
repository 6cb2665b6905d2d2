"""Exception taxonomy for the content core.

Read-path and enrichment errors are absorbed where they happen (the
gateway falls back to the default document, the caption client falls
back to canned captions).  Write-path errors are the only ones meant to
reach the operator.
"""

from __future__ import annotations


class GeneralisError(Exception):
    """Base error for the content core."""


class GatewayError(GeneralisError):
    """Base error for persistence backends."""


class StoreUnavailable(GatewayError):
    """The backing store could not be reached or read."""


class DocumentNotFound(GatewayError):
    """The backing store holds no content document yet."""


class MalformedDocument(GatewayError):
    """A content document exists but does not match the schema."""


class SaveFailed(GeneralisError):
    """Saving the content document failed.

    ``cause`` is a short human-readable explanation suitable for showing
    to the operator.
    """

    def __init__(self, cause: str) -> None:
        super().__init__(f"Save failed: {cause}")
        self.cause = cause


class EnrichmentFailed(GeneralisError):
    """A caption request failed.  Never escapes the caption client."""


class AccessDenied(GeneralisError):
    """The access gate is locked."""


class InvalidEdit(GeneralisError):
    """An editor operation referenced a bad path, index, field or value."""


class ConfigError(GeneralisError):
    """A configuration file exists but cannot be read or parsed."""
