"""Tests for image reference helpers."""

from __future__ import annotations

import base64
from email.message import Message
from pathlib import Path
from unittest.mock import MagicMock, patch
import urllib.error

import pytest
from generalis.enrichment.images import (
    DEFAULT_MIME_TYPE,
    MAX_REMOTE_BYTES,
    fetch_remote_image,
    file_to_data_url,
    is_data_url,
    is_remote_url,
    parse_data_url,
    resolve_image,
)


def _mock_response(body: bytes, content_type: str) -> MagicMock:
    headers = Message()
    headers["Content-Type"] = content_type
    resp = MagicMock()
    resp.read.return_value = body
    resp.headers = headers
    resp.__enter__.return_value = resp
    resp.__exit__.return_value = False
    return resp


class TestClassify:
    def test_data_url(self):
        assert is_data_url("data:image/png;base64,AAAA")
        assert not is_data_url("https://example.com/a.png")

    def test_remote_url(self):
        assert is_remote_url("https://example.com/a.png")
        assert is_remote_url("http://example.com/a.png")
        assert not is_remote_url("/tmp/a.png")


class TestParseDataUrl:
    def test_decodes_payload_and_mime(self):
        raw = b"\x89PNG fake"
        ref = "data:image/png;base64," + base64.b64encode(raw).decode()
        payload = parse_data_url(ref)
        assert payload.data == raw
        assert payload.mime_type == "image/png"

    def test_missing_mime_defaults_to_jpeg(self):
        ref = "data:;base64," + base64.b64encode(b"jpeg").decode()
        assert parse_data_url(ref).mime_type == DEFAULT_MIME_TYPE

    def test_rejects_non_base64(self):
        with pytest.raises(ValueError, match="not base64"):
            parse_data_url("data:image/png,rawtext")

    def test_rejects_non_image(self):
        ref = "data:text/plain;base64," + base64.b64encode(b"hi").decode()
        with pytest.raises(ValueError, match="not an image"):
            parse_data_url(ref)

    def test_rejects_bad_base64(self):
        with pytest.raises(ValueError, match="invalid base64"):
            parse_data_url("data:image/png;base64,@@@@")

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            parse_data_url("data:image/png;base64,")


class TestFetchRemoteImage:
    def test_uses_response_content_type(self):
        resp = _mock_response(b"imagebytes", "image/webp")
        with patch("generalis.enrichment.images.urllib.request.urlopen", return_value=resp):
            payload = fetch_remote_image("https://example.com/photo")
        assert payload.data == b"imagebytes"
        assert payload.mime_type == "image/webp"

    def test_guesses_from_extension(self):
        resp = _mock_response(b"imagebytes", "application/octet-stream")
        with patch("generalis.enrichment.images.urllib.request.urlopen", return_value=resp):
            payload = fetch_remote_image("https://example.com/photo.png?size=large")
        assert payload.mime_type == "image/png"

    def test_falls_back_to_jpeg(self):
        resp = _mock_response(b"imagebytes", "text/html")
        with patch("generalis.enrichment.images.urllib.request.urlopen", return_value=resp):
            payload = fetch_remote_image("https://picsum.photos/800/600?random=9")
        assert payload.mime_type == DEFAULT_MIME_TYPE

    def test_network_error_raises_value_error(self):
        with patch(
            "generalis.enrichment.images.urllib.request.urlopen",
            side_effect=urllib.error.URLError("no route"),
        ):
            with pytest.raises(ValueError, match="could not download"):
                fetch_remote_image("https://example.com/a.jpg")

    def test_rejects_oversized(self):
        resp = _mock_response(b"x" * (MAX_REMOTE_BYTES + 1), "image/jpeg")
        with patch("generalis.enrichment.images.urllib.request.urlopen", return_value=resp):
            with pytest.raises(ValueError, match="larger than"):
                fetch_remote_image("https://example.com/huge.jpg")

    def test_rejects_empty_body(self):
        resp = _mock_response(b"", "image/jpeg")
        with patch("generalis.enrichment.images.urllib.request.urlopen", return_value=resp):
            with pytest.raises(ValueError, match="empty"):
                fetch_remote_image("https://example.com/empty.jpg")


class TestResolveImage:
    def test_data_url(self):
        ref = "data:image/gif;base64," + base64.b64encode(b"GIF89a").decode()
        assert resolve_image(ref).mime_type == "image/gif"

    def test_remote_url_is_fetched(self):
        with patch("generalis.enrichment.images.fetch_remote_image") as mock_fetch:
            resolve_image("https://example.com/a.jpg", timeout=5)
        mock_fetch.assert_called_once_with("https://example.com/a.jpg", timeout=5)

    @pytest.mark.parametrize("ref", ["", "   ", "/local/path.jpg", "ftp://host/a.jpg"])
    def test_rejects_unsupported(self, ref: str):
        with pytest.raises(ValueError):
            resolve_image(ref)


class TestFileToDataUrl:
    def test_encodes_image_file(self, tmp_path: Path):
        path = tmp_path / "terrace.png"
        path.write_bytes(b"\x89PNG data")
        ref = file_to_data_url(path)
        assert ref.startswith("data:image/png;base64,")
        assert parse_data_url(ref).data == b"\x89PNG data"

    def test_rejects_non_image(self, tmp_path: Path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(ValueError):
            file_to_data_url(path)
