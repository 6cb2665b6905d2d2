"""Image reference helpers.

Gallery and menu images are stored either as remote URLs or as
self-contained ``data:`` URLs.  The caption client needs raw bytes plus
a MIME type for both forms.
"""

from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
import re
import urllib.error
import urllib.request
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"
MAX_REMOTE_BYTES = 20 * 1024 * 1024

_DATA_URL_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(?:;[\w-]+=[^;,]*)*)(?P<b64>;base64)?,(?P<data>.*)$",
    re.DOTALL,
)


class ImagePayload(BaseModel):
    """Raw image bytes ready to send to a multimodal model."""

    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE


def is_data_url(ref: str) -> bool:
    return ref.startswith("data:")


def is_remote_url(ref: str) -> bool:
    return ref.startswith(("http://", "https://"))


def parse_data_url(ref: str) -> ImagePayload:
    """Decode a ``data:`` URL.

    Raises:
        ValueError: If the URL is not a base64 image data URL.
    """
    match = _DATA_URL_RE.match(ref.strip())
    if not match:
        raise ValueError("not a data URL")
    if not match.group("b64"):
        raise ValueError("data URL is not base64-encoded")
    mime_type = match.group("mime") or DEFAULT_MIME_TYPE
    if not mime_type.startswith("image/"):
        raise ValueError(f"data URL is not an image ({mime_type})")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as exc:
        raise ValueError("data URL has invalid base64 payload") from exc
    if not data:
        raise ValueError("data URL is empty")
    return ImagePayload(data=data, mime_type=mime_type)


def fetch_remote_image(url: str, *, timeout: int = 30) -> ImagePayload:
    """Download an image over HTTP(S).

    Raises:
        ValueError: On network errors, non-image responses, or oversized bodies.
    """
    req = urllib.request.Request(url, headers={"User-Agent": "generalis-site/0.3"})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            data = resp.read(MAX_REMOTE_BYTES + 1)
            header_type = resp.headers.get_content_type()
    except (urllib.error.URLError, TimeoutError, OSError) as exc:
        raise ValueError(f"could not download {url}: {exc}") from exc

    if len(data) > MAX_REMOTE_BYTES:
        raise ValueError(f"image at {url} is larger than {MAX_REMOTE_BYTES} bytes")
    if not data:
        raise ValueError(f"image at {url} is empty")

    mime_type = header_type if header_type.startswith("image/") else None
    if mime_type is None:
        guessed, _ = mimetypes.guess_type(url.split("?", 1)[0])
        mime_type = guessed if guessed and guessed.startswith("image/") else DEFAULT_MIME_TYPE
    return ImagePayload(data=data, mime_type=mime_type)


def resolve_image(ref: str, *, timeout: int = 30) -> ImagePayload:
    """Turn a stored image reference into bytes.

    Raises:
        ValueError: If the reference is empty, unsupported, or unreadable.
    """
    ref = ref.strip()
    if not ref:
        raise ValueError("empty image reference")
    if is_data_url(ref):
        return parse_data_url(ref)
    if is_remote_url(ref):
        return fetch_remote_image(ref, timeout=timeout)
    raise ValueError(f"unsupported image reference: {ref[:40]}")


def file_to_data_url(path: Path) -> str:
    """Encode a local image file as a ``data:`` URL for storage in content.

    Raises:
        ValueError: If the file does not look like an image.
        OSError: If the file cannot be read.
    """
    mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type or not mime_type.startswith("image/"):
        raise ValueError(f"{path.name} is not a recognised image file")
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"
