"""
Unit tests for the FastAPI hosting layer
"""

import os
import sys
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.append(project_root)

from common.types import EmptyCard, OgImage, PreviewGrid, ResolvedAddress
from og_image import server
from og_image.composer import CardComposer
from og_image.handler import OgImageHandler


@pytest.fixture
def client():
    return TestClient(server.app)


def _og(layout, raw="vitalik.eth"):
    return OgImage(
        png=b"\x89PNG\r\n\x1a\nfake",
        layout=layout,
        resolved=ResolvedAddress(raw=raw, address=raw),
        display_name=raw,
    )


class TestServer:
    """Test cases for the HTTP routes"""

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok"
        assert body["size"] == {"width": 1200, "height": 630}

    def test_image_grid(self, client):
        fake = Mock()
        fake.generate.return_value = _og(PreviewGrid(urls=("a", "b", "c", "d")))
        with patch.object(server, "handler", fake):
            r = client.get("/vitalik.eth/opengraph-image")

        assert r.status_code == 200
        assert r.headers["content-type"] == "image/png"
        assert r.headers["x-og-layout"] == "grid"
        assert r.headers["x-og-tiles"] == "4"
        assert r.headers["cache-control"] == server.CACHE_CONTROL
        assert r.content == b"\x89PNG\r\n\x1a\nfake"
        fake.generate.assert_called_once_with("vitalik.eth")

    def test_image_empty(self, client):
        fake = Mock()
        fake.generate.return_value = _og(EmptyCard(), raw="0x1234567890abcdef1234567890abcdef12345678")
        with patch.object(server, "handler", fake):
            r = client.get("/0x1234567890abcdef1234567890abcdef12345678/opengraph-image")

        assert r.status_code == 200
        assert r.headers["x-og-layout"] == "empty"
        assert r.headers["x-og-tiles"] == "0"

    def test_path_param_is_decoded(self, client):
        fake = Mock()
        fake.generate.return_value = _og(EmptyCard(), raw="\U0001F98A.eth")
        with patch.object(server, "handler", fake):
            client.get("/%F0%9F%A6%8A.eth/opengraph-image")

        fake.generate.assert_called_once_with("\U0001F98A.eth")

    def test_path_param_is_decoded_once(self, client):
        """%2541 decodes to a literal %41, not to 'A'"""
        resolver = Mock()
        resolver.resolve.return_value = None
        ab_client = Mock()
        ab_client.fetch_preview_urls.return_value = []
        real = OgImageHandler(resolver=resolver, client=ab_client, media=Mock(), composer=CardComposer())

        with patch.object(server, "handler", real):
            r = client.get("/a%2541.eth/opengraph-image")

        assert r.status_code == 200
        assert resolver.resolve.call_args.args[0] == "a%41.eth"
        assert ab_client.fetch_preview_urls.call_args.args[0] == "a%41.eth"
        assert r.headers["x-og-layout"] == "empty"

    def test_render_failure_returns_500(self, client):
        fake = Mock()
        fake.generate.side_effect = OSError("encoder error")
        with patch.object(server, "handler", fake):
            r = client.get("/vitalik.eth/opengraph-image")

        assert r.status_code == 500
        assert r.json() == {"error": "render_failed"}

    def test_meta(self, client):
        r = client.get("/vitalik.eth/opengraph-image/meta")
        assert r.status_code == 200
        body = r.json()
        assert body["alt"] == "Art Blocks Collection"
        assert body["width"] == 1200
        assert body["height"] == 630
        assert body["content_type"] == "image/png"
        assert body["url"].endswith("/vitalik.eth/opengraph-image")
