"""Search transport over a SearXNG instance (JSON API)."""

import httpx

from src.contracts.discovery_v1 import RawSearchHit
from src.core.config import config
from src.discovery.errors import BackendFailure
from src.discovery.search.interface import SearchTransport


class SearxngTransport(SearchTransport):
    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        search_url = base_url or config.searxng_url or ""
        self._base_url = search_url.rstrip("/") if search_url else ""
        if self._base_url and not self._base_url.endswith("/search"):
            self._base_url = self._base_url + "/search"
        self._timeout = timeout if timeout is not None else config.search_timeout_seconds

    @property
    def is_configured(self) -> bool:
        return bool(self._base_url)

    async def query(self, backend_query: str, locale: str, result_count: int) -> list[RawSearchHit]:
        if not self._base_url or not backend_query.strip():
            return []

        params = {"q": backend_query, "format": "json", "language": locale}
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(
                self._base_url,
                params=params,
                follow_redirects=True,
            )
            response.raise_for_status()
            try:
                data = response.json()
            except ValueError as e:
                raise BackendFailure("searxng", f"invalid JSON: {e!s}") from e

        raw = data.get("results", []) if isinstance(data, dict) else []
        hits: list[RawSearchHit] = []
        for item in raw[: max(0, result_count)]:
            if not isinstance(item, dict):
                continue
            hits.append(
                RawSearchHit(
                    title=item.get("title") or "No Title",
                    snippet=item.get("content") or item.get("snippet") or "",
                    link=item.get("url") or "#",
                )
            )
        return hits
