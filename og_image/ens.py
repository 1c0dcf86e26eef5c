from __future__ import annotations

"""
ENS forward resolution (name -> address) via the ensideas resolver API.

Best effort: any failure yields None and the caller keeps querying with the
name as given.

Usage:
    resolver = EnsResolver()
    addr = resolver.resolve("vitalik.eth")   # "0xd8dA..." or None
    ra = resolve_address("vitalik.eth", resolver)
"""

import logging
from typing import Optional
from urllib.parse import quote

import requests

from common.types import ResolvedAddress
from common.utils import is_ens_name


log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.ensideas.com/ens/resolve"


class EnsResolver:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        """
        Params:
            base_url: resolver endpoint; the name is appended as a path segment
            session: optional requests.Session for connection reuse
            timeout: per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def build_url(self, name: str) -> str:
        return f"{self.base_url}/{quote(name, safe='')}"

    def resolve(self, name: str) -> Optional[str]:
        """
        Return the address the name points to, or None on HTTP error,
        network error, bad JSON or a null address.
        """
        url = self.build_url(name)
        try:
            r = self.session.get(url, timeout=self.timeout)
            if not 200 <= r.status_code < 300:
                log.warning("ENS resolve failed: %s %s", r.status_code, name)
                return None
            data = r.json()
        except Exception as e:
            log.warning("ENS resolve error for %s: %s", name, e)
            return None

        if not isinstance(data, dict):
            log.warning("ENS resolve returned non-object body for %s", name)
            return None
        address = data.get("address")
        if not address or not isinstance(address, str):
            log.info("ENS name %s has no address", name)
            return None
        return address


def resolve_address(raw: str, resolver: EnsResolver) -> ResolvedAddress:
    """
    Pick the query key for `raw`. Only ENS names hit the network; an
    unresolved name is passed through unchanged.
    """
    if not is_ens_name(raw):
        return ResolvedAddress(raw=raw, address=raw, resolved=False)
    address = resolver.resolve(raw)
    if address is None:
        return ResolvedAddress(raw=raw, address=raw, resolved=False)
    return ResolvedAddress(raw=raw, address=address, resolved=True)
