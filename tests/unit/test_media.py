"""
Unit tests for tile media downloads
"""

import io
import os
import sys
from unittest.mock import Mock

import requests
from PIL import Image

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.append(project_root)

from og_image.media import MediaFetcher


def _png_bytes(size=(32, 16), color=(10, 200, 30)):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def _fetcher(status_code=200, content=b"", side_effect=None):
    session = Mock()
    if side_effect is not None:
        session.get.side_effect = side_effect
    else:
        resp = Mock()
        resp.status_code = status_code
        resp.content = content
        session.get.return_value = resp
    return MediaFetcher(session=session, timeout=2.0, user_agent="test-agent"), session


class TestMediaFetcher:
    """Test cases for MediaFetcher"""

    def test_fetch_image_success(self):
        fetcher, session = _fetcher(content=_png_bytes())

        img = fetcher.fetch_image("https://media.artblocks.io/1.png")

        assert img is not None
        assert img.mode == "RGBA"
        assert img.size == (32, 16)
        session.get.assert_called_once_with(
            "https://media.artblocks.io/1.png", timeout=2.0, headers={"User-Agent": "test-agent"}
        )

    def test_http_error(self):
        fetcher, _ = _fetcher(status_code=404, content=b"not found")
        assert fetcher.fetch_image("https://media.artblocks.io/missing.png") is None

    def test_empty_body(self):
        fetcher, _ = _fetcher(content=b"")
        assert fetcher.fetch_image("https://media.artblocks.io/empty.png") is None

    def test_network_error(self):
        fetcher, _ = _fetcher(side_effect=requests.ConnectionError("reset"))
        assert fetcher.fetch_image("https://media.artblocks.io/1.png") is None

    def test_undecodable(self):
        fetcher, _ = _fetcher(content=b"<html>not an image</html>")
        assert fetcher.fetch_image("https://media.artblocks.io/1.html") is None

    def test_any_2xx_is_accepted(self):
        fetcher, _ = _fetcher(status_code=203, content=_png_bytes(size=(8, 8)))

        img = fetcher.fetch_image("https://cdn.example/proxied.png")

        assert img is not None
        assert img.size == (8, 8)

    def test_redirect_status_rejected(self):
        fetcher, _ = _fetcher(status_code=304, content=_png_bytes())
        assert fetcher.fetch_image("https://media.artblocks.io/1.png") is None
