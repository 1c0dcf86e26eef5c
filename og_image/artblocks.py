from __future__ import annotations

"""
Art Blocks data API adapter: wallet -> preview image URLs.

Queries the public Hasura GraphQL endpoint for the first six tokens owned by
an address, ordered by project name. Any failure degrades to an empty list so
the caller falls back to the plain branded card.

Usage:
    client = ArtBlocksClient()
    urls = client.fetch_preview_urls("0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045")
"""

import logging
from typing import Any, List, Optional

import requests


log = logging.getLogger(__name__)

DEFAULT_GRAPHQL_URL = "https://data.artblocks.io/v1/graphql"

MAX_PREVIEWS = 6

PREVIEW_QUERY = """
query WalletPreview($owner: String!) {
  tokens_metadata(
    where: { owner_address: { _eq: $owner } }
    order_by: { project_name: asc }
    limit: 6
  ) {
    preview_asset_url
    media_url
  }
}
"""


def extract_preview_urls(payload: Any) -> List[str]:
    """
    Pull image URLs out of a decoded GraphQL response.
    Per record: media_url, else preview_asset_url, else skipped.
    Upstream order is kept.
    """
    if not isinstance(payload, dict):
        return []
    data = payload.get("data") or {}
    if not isinstance(data, dict):
        return []
    records = data.get("tokens_metadata") or []
    if not isinstance(records, list):
        return []

    urls: List[str] = []
    for rec in records:
        if not isinstance(rec, dict):
            continue
        url = rec.get("media_url") or rec.get("preview_asset_url")
        if url:
            urls.append(str(url))
    return urls[:MAX_PREVIEWS]


class ArtBlocksClient:
    def __init__(
        self,
        graphql_url: str = DEFAULT_GRAPHQL_URL,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.graphql_url = graphql_url
        self.session = session or requests.Session()
        self.timeout = timeout

    def build_payload(self, owner: str) -> dict:
        # owner_address is stored lowercased upstream
        return {"query": PREVIEW_QUERY, "variables": {"owner": owner.lower()}}

    def fetch_preview_urls(self, owner: str) -> List[str]:
        """
        Return up to six preview URLs for `owner`; [] on any failure.
        """
        try:
            r = self.session.post(
                self.graphql_url,
                json=self.build_payload(owner),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            if not 200 <= r.status_code < 300:
                log.warning("Art Blocks query failed: %s %s", r.status_code, r.text[:200])
                return []
            payload = r.json()
        except Exception as e:
            log.warning("Art Blocks query error for %s: %s", owner, e)
            return []

        if isinstance(payload, dict) and payload.get("errors"):
            log.warning("Art Blocks GraphQL errors: %s", str(payload["errors"])[:200])
        return extract_preview_urls(payload)
