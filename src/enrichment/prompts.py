"""Instructions sent with gallery images to the caption model."""

from __future__ import annotations

SUGGESTIONS_PROMPT = (
    "Generate {count} diverse, concise, and appealing captions for this image "
    "for a restaurant's website gallery. Return JSON with a single key "
    '"captions" holding an array of strings.'
)

SINGLE_CAPTION_PROMPT = (
    "Generate a single, concise, and appealing caption for this image for a "
    "restaurant's website gallery. Reply with the caption text only."
)


def suggestions_prompt(count: int) -> str:
    return SUGGESTIONS_PROMPT.format(count=count)
