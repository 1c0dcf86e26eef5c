#!/usr/bin/env python3
"""
Render a wallet's OG card to a PNG file without starting the server.

Examples:
  python scripts/render_og_image.py vitalik.eth
  python scripts/render_og_image.py 0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045 -o card.png
  python scripts/render_og_image.py foo.eth --config config/params.yaml --log-level DEBUG
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional
from urllib.parse import unquote

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.logging_setup import setup_logging
from og_image.config import load_config
from og_image.handler import OgImageHandler


def default_output(address: str) -> Path:
    safe = "".join(ch if ch.isalnum() or ch in "._-" else "_" for ch in address)
    return Path(f"{safe}.png")


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Render an onview.art OG image")
    ap.add_argument("address", help="Wallet address or ENS name (may be percent-encoded)")
    ap.add_argument("-o", "--out", default="", help="Output PNG path (default: <address>.png)")
    ap.add_argument("--config", default=None, help="YAML config (default: $OG_CONFIG or config/params.yaml)")
    ap.add_argument("--log-level", default=None, help="DEBUG/INFO/WARNING/ERROR")
    args = ap.parse_args(argv)

    setup_logging(args.log_level)
    handler = OgImageHandler.from_config(load_config(args.config))

    try:
        og = handler.generate(unquote(args.address))
    except Exception as e:
        print(f"  Rendering failed: {e}", file=sys.stderr)
        return 1

    out = Path(args.out) if args.out else default_output(og.resolved.raw)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(og.png)
    print(f"  Saved {og.width}x{og.height} {og.layout.kind} card ({og.layout.tile_count} tiles) -> {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
