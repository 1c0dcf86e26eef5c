from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_CONFIG_PATH = "config/params.yaml"

DEFAULTS: Dict[str, Any] = {
    "ens": {
        "base_url": "https://api.ensideas.com/ens/resolve",
        "timeout_s": 10.0,
    },
    "artblocks": {
        "graphql_url": "https://data.artblocks.io/v1/graphql",
        "timeout_s": 10.0,
    },
    "media": {
        "timeout_s": 10.0,
        "user_agent": "onview-og-image/1.0",
    },
    "render": {
        "font_path": None,
    },
    "server": {
        "host": "0.0.0.0",
        "port": 8000,
        "cache_control": "public, max-age=60",
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load YAML config merged over DEFAULTS.

    Path precedence: explicit `path`, env OG_CONFIG, config/params.yaml.
    A missing file yields the defaults.
    """
    cfg_path = Path(path or os.environ.get("OG_CONFIG") or DEFAULT_CONFIG_PATH)
    if not cfg_path.exists():
        return copy.deepcopy(DEFAULTS)
    with cfg_path.open("r", encoding="utf-8") as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {cfg_path} must contain a mapping, got {type(loaded).__name__}")
    return _merge(DEFAULTS, loaded)
