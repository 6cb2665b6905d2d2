"""Application root for the site's content.

SiteContent owns the baseline document shared by the public view and
the editor.  The baseline is loaded once before anything reads it and
is replaced only when an editing session commits successfully.
"""

from __future__ import annotations

import logging

from generalis.auth import DEFAULT_SECRET_KEY, AccessGate, AuthState
from generalis.config import GeneralisConfig
from generalis.content.models import ContentDocument
from generalis.editor.session import EditableSession
from generalis.enrichment.captions import CaptionClient, ProgressCallback
from generalis.store import ContentGateway, create_gateway

logger = logging.getLogger(__name__)


class SiteContent:
    """Baseline content plus the collaborators needed to edit it."""

    def __init__(
        self,
        gateway: ContentGateway,
        *,
        captions: CaptionClient | None = None,
        secret_key: str = DEFAULT_SECRET_KEY,
    ) -> None:
        self.gateway = gateway
        self.captions = captions
        self._secret_key = secret_key
        self._baseline: ContentDocument | None = None

    @classmethod
    def from_config(cls, config: GeneralisConfig) -> SiteContent:
        captions = CaptionClient(
            config.captions.api_key,
            model=config.captions.model,
            max_suggestions=config.captions.max_suggestions,
            timeout=config.captions.timeout,
        )
        return cls(
            create_gateway(config.storage),
            captions=captions,
            secret_key=config.admin.secret_key,
        )

    def load(self) -> ContentDocument:
        """(Re)load the baseline from the gateway.  Never raises."""
        self._baseline = self.gateway.load()
        return self._baseline.model_copy(deep=True)

    @property
    def content(self) -> ContentDocument:
        """Read-only view: a copy of the committed document."""
        if self._baseline is None:
            self.load()
        return self._baseline.model_copy(deep=True)  # type: ignore[union-attr]

    def gate(self, auth: AuthState) -> AccessGate:
        return AccessGate(auth, self._secret_key)

    def open_editor(self, auth: AuthState) -> EditableSession:
        """Start an editing session over the current baseline.

        Raises:
            AccessDenied: If *auth* is not unlocked.
        """
        return EditableSession(self.content, self.gateway, auth, on_commit=self._replace_baseline)

    def save(
        self,
        session: EditableSession,
        *,
        fill_captions: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> ContentDocument:
        """Commit *session*, optionally filling missing captions first.

        Caption generation cannot fail the save: the client falls back
        to canned captions on any error.

        Raises:
            SaveFailed: If the gateway rejected the save.
        """
        if fill_captions and self.captions is not None:
            filled = session.fill_missing_captions(self.captions, on_progress=on_progress)
            logger.info("Filled %d caption(s) before saving", filled)
        return session.commit()

    def replace(self, document: ContentDocument, auth: AuthState) -> None:
        """Store *document* wholesale (import or reset to defaults).

        Raises:
            AccessDenied: If *auth* is not unlocked.
            SaveFailed: If the gateway rejected the save.
        """
        auth.require()
        self.gateway.save(document)
        self._replace_baseline(document.model_copy(deep=True))

    def _replace_baseline(self, document: ContentDocument) -> None:
        self._baseline = document
