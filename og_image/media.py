from __future__ import annotations

import io
import logging
from typing import Optional

import requests
from PIL import Image, UnidentifiedImageError


log = logging.getLogger(__name__)


class MediaFetcher:
    """
    Downloads tile artwork and decodes it with Pillow.
    Returns None instead of raising so one broken asset never sinks the card.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        user_agent: Optional[str] = None,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers = {"User-Agent": user_agent} if user_agent else {}

    def fetch_bytes(self, url: str) -> Optional[bytes]:
        try:
            r = self.session.get(url, timeout=self.timeout, headers=self.headers)
            if not 200 <= r.status_code < 300 or not r.content:
                log.warning("Tile download failed: %s %s", r.status_code, url)
                return None
            return r.content
        except Exception as e:
            log.warning("Tile download error for %s: %s", url, e)
            return None

    def fetch_image(self, url: str) -> Optional[Image.Image]:
        data = self.fetch_bytes(url)
        if data is None:
            return None
        try:
            img = Image.open(io.BytesIO(data))
            # animated assets: first frame only
            img.seek(0)
            return img.convert("RGBA")
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            log.warning("Tile decode failed for %s: %s", url, e)
            return None
