"""Gallery caption suggestions via Google Gemini.

Uses the google-genai SDK with the image sent inline.  Captioning is a
convenience: every public method returns a usable value even when the
optional dependency is missing, the API key is not configured, or the
request fails.  Nothing here writes to the content store.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from generalis.content.models import GalleryImage
from generalis.enrichment.images import resolve_image
from generalis.enrichment.prompts import SINGLE_CAPTION_PROMPT, suggestions_prompt
from generalis.errors import EnrichmentFailed
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

# Optional dependency
try:
    from google import genai
    from google.genai import types

    _HAS_GENAI = True
except ImportError:
    genai = None  # type: ignore[assignment]
    types = None  # type: ignore[assignment]
    _HAS_GENAI = False

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_MAX_SUGGESTIONS = 3

FALLBACK_SUGGESTIONS: tuple[str, ...] = (
    "Could not generate captions.",
    "Please try again.",
    "AI model error.",
)
FALLBACK_CAPTION = "Caption generation failed."

ProgressCallback = Callable[[int, int], None]


class CaptionSuggestions(BaseModel):
    """Structured response schema for the suggestions request."""

    captions: list[str] = Field(default_factory=list)


_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)


def _strip_json_fences(text: str) -> str:
    """Strip markdown code fences the model sometimes adds around JSON."""
    text = text.strip()
    match = _JSON_FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start : end + 1]
    return text


class CaptionClient:
    """Suggest captions for gallery images."""

    def __init__(
        self,
        api_key: str = "",
        *,
        model: str = DEFAULT_MODEL,
        max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
        timeout: int = 60,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_suggestions = max(1, max_suggestions)
        self.timeout = timeout
        self._client: object | None = None

    def is_configured(self) -> bool:
        """Check whether caption generation is available and configured."""
        return _HAS_GENAI and bool(self.api_key)

    def _get_client(self) -> object:
        """Lazy-create and cache the genai Client."""
        if self._client is None:
            self._client = genai.Client(  # type: ignore[union-attr]
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=self.timeout * 1000),  # type: ignore[union-attr]
            )
        return self._client

    def _generate(self, image: str, prompt: str, *, structured: bool) -> str:
        """Send one image plus *prompt* and return the response text.

        Raises:
            EnrichmentFailed: On any failure, including an empty response.
        """
        if not self.is_configured():
            raise EnrichmentFailed("caption generation not configured")

        try:
            payload = resolve_image(image, timeout=self.timeout)
        except Exception as exc:
            raise EnrichmentFailed(f"unusable image: {exc}") from exc

        try:
            kwargs: dict[str, object] = {}
            if structured:
                kwargs["config"] = types.GenerateContentConfig(  # type: ignore[union-attr]
                    response_mime_type="application/json",
                    response_schema=CaptionSuggestions,
                )
            client = self._get_client()
            response = client.models.generate_content(  # type: ignore[union-attr]
                model=self.model,
                contents=[
                    types.Part.from_bytes(data=payload.data, mime_type=payload.mime_type),  # type: ignore[union-attr]
                    prompt,
                ],
                **kwargs,
            )
            text = response.text
        except Exception as exc:
            raise EnrichmentFailed(f"Gemini request failed: {exc}") from exc

        if not isinstance(text, str) or not text.strip():
            raise EnrichmentFailed("Gemini returned an empty response")
        return text.strip()

    def suggest_captions(self, image: str) -> list[str]:
        """Return up to ``max_suggestions`` candidate captions for *image*.

        Args:
            image: Remote URL or ``data:`` URL of the image.

        Returns:
            A non-empty list.  On any failure, a copy of
            ``FALLBACK_SUGGESTIONS``.
        """
        try:
            text = self._generate(image, suggestions_prompt(self.max_suggestions), structured=True)
            try:
                parsed = CaptionSuggestions.model_validate_json(_strip_json_fences(text))
            except ValidationError as exc:
                raise EnrichmentFailed("unparseable caption suggestions") from exc
            captions = [c.strip() for c in parsed.captions if c.strip()]
            if not captions:
                raise EnrichmentFailed("no captions in response")
            return captions[: self.max_suggestions]
        except EnrichmentFailed as exc:
            logger.warning("Caption suggestions failed: %s", exc)
            return list(FALLBACK_SUGGESTIONS)

    def suggest_single_caption(self, image: str) -> str:
        """Return one caption for *image*, or ``FALLBACK_CAPTION`` on failure."""
        try:
            return self._generate(image, SINGLE_CAPTION_PROMPT, structured=False)
        except EnrichmentFailed as exc:
            logger.warning("Single caption failed: %s", exc)
            return FALLBACK_CAPTION

    def generate_missing_captions(
        self,
        images: list[GalleryImage],
        on_progress: ProgressCallback | None = None,
    ) -> list[GalleryImage]:
        """Fill in empty captions, one image at a time.

        Images that already have a caption are returned untouched, so
        running this twice is the same as running it once.  The input
        list is not modified.

        Args:
            images: Gallery images in display order.
            on_progress: Called as ``on_progress(done, total)`` after each
                image that needed a caption.

        Returns:
            A new list of the same length and order.
        """
        missing = [i for i, img in enumerate(images) if not img.caption]
        result = list(images)
        for done, index in enumerate(missing, start=1):
            caption = self.suggest_single_caption(images[index].src)
            result[index] = images[index].model_copy(update={"caption": caption})
            if on_progress is not None:
                on_progress(done, len(missing))
        if missing:
            logger.info("Generated %d missing caption(s)", len(missing))
        return result
