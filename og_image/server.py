from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from common.logging_setup import setup_logging
from og_image.config import load_config
from og_image.handler import ALT, CONTENT_TYPE, SIZE, OgImageHandler


setup_logging()
log = logging.getLogger(__name__)

P = load_config()
CACHE_CONTROL = str(P.get("server", {}).get("cache_control", "public, max-age=60"))

handler = OgImageHandler.from_config(P)

app = FastAPI(title="onview.art OG image API", version="1.0.0")

# link unfurlers and local preview tools fetch cross-origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {
        "status": "ok",
        "ens": {"base_url": handler.resolver.base_url},
        "artblocks": {"graphql_url": handler.client.graphql_url},
        "size": {"width": SIZE[0], "height": SIZE[1]},
    }


@app.get("/{address}/opengraph-image")
def opengraph_image(address: str):
    """
    PNG card for a wallet address or ENS name.
    Upstream outages still yield a card; only rendering errors give 500.
    """
    try:
        og = handler.generate(address)
    except Exception:
        log.exception("Rendering failed for %s", address)
        return JSONResponse({"error": "render_failed"}, status_code=500)

    headers = {
        "Cache-Control": CACHE_CONTROL,
        "X-Og-Layout": og.layout.kind,
        "X-Og-Tiles": str(og.layout.tile_count),
    }
    return Response(content=og.png, media_type=CONTENT_TYPE, headers=headers)


@app.get("/{address}/opengraph-image/meta")
def opengraph_image_meta(address: str, request: Request):
    """Values for the page's og:image, og:image:alt/width/height/type tags."""
    return {
        "url": str(request.url_for("opengraph_image", address=address)),
        "alt": ALT,
        "width": SIZE[0],
        "height": SIZE[1],
        "content_type": CONTENT_TYPE,
    }


# -------- local dev entrypoint --------
if __name__ == "__main__":
    server_cfg = P.get("server", {})
    uvicorn.run(app, host=server_cfg.get("host", "0.0.0.0"), port=int(server_cfg.get("port", 8000)))
