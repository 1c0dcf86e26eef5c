from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
from PIL import Image

from common.types import OgImage, PreviewGrid
from common.utils import display_name, timer_ms
from og_image.artblocks import ArtBlocksClient
from og_image.composer import HEIGHT, WIDTH, CardComposer, encode_png, select_layout
from og_image.ens import EnsResolver, resolve_address
from og_image.media import MediaFetcher


log = logging.getLogger(__name__)

ALT = "Art Blocks Collection"
SIZE = (WIDTH, HEIGHT)
CONTENT_TYPE = "image/png"


class OgImageHandler:
    """
    One request: resolve -> fetch previews -> download tiles -> render.

    Upstream failures degrade (unresolved name, empty list, blank tile);
    rendering errors propagate to the caller.
    """

    def __init__(
        self,
        resolver: EnsResolver,
        client: ArtBlocksClient,
        media: MediaFetcher,
        composer: CardComposer,
    ):
        self.resolver = resolver
        self.client = client
        self.media = media
        self.composer = composer

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], session: Optional[requests.Session] = None) -> "OgImageHandler":
        session = session or requests.Session()
        ens_cfg = cfg.get("ens", {})
        ab_cfg = cfg.get("artblocks", {})
        media_cfg = cfg.get("media", {})
        render_cfg = cfg.get("render", {})
        return cls(
            resolver=EnsResolver(
                base_url=ens_cfg.get("base_url", "https://api.ensideas.com/ens/resolve"),
                session=session,
                timeout=float(ens_cfg.get("timeout_s", 10.0)),
            ),
            client=ArtBlocksClient(
                graphql_url=ab_cfg.get("graphql_url", "https://data.artblocks.io/v1/graphql"),
                session=session,
                timeout=float(ab_cfg.get("timeout_s", 10.0)),
            ),
            media=MediaFetcher(
                session=session,
                timeout=float(media_cfg.get("timeout_s", 10.0)),
                user_agent=media_cfg.get("user_agent"),
            ),
            composer=CardComposer(font_path=render_cfg.get("font_path")),
        )

    def generate(self, address_param: str) -> OgImage:
        """`address_param` is the already percent-decoded path segment."""
        raw = address_param
        resolved = resolve_address(raw, self.resolver)
        urls = self.client.fetch_preview_urls(resolved.address)
        layout = select_layout(urls)
        name = display_name(raw)

        images: List[Optional[Image.Image]] = []
        if isinstance(layout, PreviewGrid):
            images = [self.media.fetch_image(u) for u in layout.urls]

        png, render_ms = self._render(layout, name, images)
        result = OgImage(
            png=png,
            layout=layout,
            resolved=resolved,
            display_name=name,
            width=WIDTH,
            height=HEIGHT,
            content_type=CONTENT_TYPE,
        )
        meta = result.to_meta()
        meta["render_ms"] = round(render_ms, 1)
        meta["missing_tiles"] = sum(1 for img in images if img is None)
        log.info("og image rendered", extra={"extra": meta})
        return result

    @timer_ms
    def _render(self, layout, name, images):
        return encode_png(self.composer.render(layout, name, images))
