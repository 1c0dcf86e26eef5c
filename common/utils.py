from __future__ import annotations

import time
from typing import Tuple

ENS_SUFFIX = ".eth"

GRID_COLUMNS = 3
GRID_STRIDE_PX = 240


def is_ens_name(value: str) -> bool:
    """True for inputs that need a forward ENS lookup (case-insensitive suffix)."""
    return value.lower().endswith(ENS_SUFFIX)


def display_name(raw: str) -> str:
    """
    Name printed on the card.
    ENS names are shown as-is; anything else is shortened to 0x1234...5678.
    """
    if is_ens_name(raw):
        return raw
    return f"{raw[:6]}...{raw[-4:]}"


def tile_position(i: int) -> Tuple[int, int]:
    """
    (left, top) of tile `i` relative to the grid origin.
    Stride is smaller than the tile size, so neighbours overlap.
    """
    return ((i % GRID_COLUMNS) * GRID_STRIDE_PX, (i // GRID_COLUMNS) * GRID_STRIDE_PX)


def timer_ms(func):
    """
    Decorator that returns (result, elapsed_ms) for timing small functions.
    """
    def wrapper(*args, **kwargs):
        t0 = time.perf_counter()
        out = func(*args, **kwargs)
        dt_ms = (time.perf_counter() - t0) * 1e3
        return out, dt_ms
    return wrapper
