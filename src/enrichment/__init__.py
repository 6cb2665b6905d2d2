"""Best-effort enrichment of site content (AI caption suggestions)."""

from generalis.enrichment.captions import (
    FALLBACK_CAPTION,
    FALLBACK_SUGGESTIONS,
    CaptionClient,
)
from generalis.enrichment.images import ImagePayload, file_to_data_url, resolve_image

__all__ = [
    "FALLBACK_CAPTION",
    "FALLBACK_SUGGESTIONS",
    "CaptionClient",
    "ImagePayload",
    "file_to_data_url",
    "resolve_image",
]
