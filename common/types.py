from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union


@dataclass(frozen=True, slots=True)
class ResolvedAddress:
    """
    Outcome of the address-resolution step.

    Attributes:
        raw: percent-decoded request input (hex address or ENS name).
        address: key used for the preview query. Equals `raw` unless `raw`
            is an ENS name that resolved.
        resolved: True only when an ENS lookup returned an address.
    """
    raw: str
    address: str
    resolved: bool = False


@dataclass(frozen=True, slots=True)
class EmptyCard:
    """No previews: centred name + logotype card."""

    kind: str = "empty"

    @property
    def tile_count(self) -> int:
        return 0


@dataclass(frozen=True, slots=True)
class PreviewGrid:
    """One to six preview URLs laid out as overlapping tiles."""
    urls: Tuple[str, ...]
    kind: str = "grid"

    def __post_init__(self) -> None:
        if not self.urls:
            raise ValueError("PreviewGrid needs at least one url")
        if len(self.urls) > 6:
            raise ValueError("PreviewGrid holds at most 6 urls")

    @property
    def tile_count(self) -> int:
        return len(self.urls)


Layout = Union[EmptyCard, PreviewGrid]


@dataclass(slots=True)
class OgImage:
    """Encoded card plus what produced it (safe to log via to_meta)."""
    png: bytes
    layout: Layout
    resolved: ResolvedAddress
    display_name: str
    width: int = 1200
    height: int = 630
    content_type: str = "image/png"

    def to_meta(self) -> Dict[str, Any]:
        """Metadata without image bytes."""
        return {
            "address": self.resolved.address,
            "ens_resolved": self.resolved.resolved,
            "display_name": self.display_name,
            "layout": self.layout.kind,
            "tiles": self.layout.tile_count,
            "bytes": len(self.png),
            "width": self.width,
            "height": self.height,
        }
