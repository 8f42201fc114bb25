"""
TMDB feeds

Secondary source: paginated TV discovery over an air-date range, and the
external-id lookup that yields the IMDb cross-reference for a TMDB show.
"""
from __future__ import annotations

import logging
from datetime import date

import httpx

from tvcatalog.services.feed_types import DiscoveryItem
from tvcatalog.utils.http_fetch import fetch_json


logger = logging.getLogger(__name__)


class TMDBClient:
    """Async wrapper over the TMDB v3 endpoints used for discovery."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        *,
        base_url: str = "https://api.themoviedb.org/3",
        language: str = "en-US",
        sort_by: str = "first_air_date.desc",
        max_pages: int = 2,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.language = language
        self.sort_by = sort_by
        self.max_pages = max(1, max_pages)

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def discover(self, start: date, end: date) -> list[DiscoveryItem]:
        """
        Shows with an episode airing between start and end (inclusive).

        Pagination stops at the configured page cap, at the reported
        total_pages, or at the first empty or failed page, whichever comes
        first.
        """
        if not self.enabled:
            logger.warning("TMDB API key not configured - skipping discovery")
            return []

        items: list[DiscoveryItem] = []
        pages_fetched = 0
        page = 1
        while page <= self.max_pages:
            payload = await fetch_json(
                self._client,
                f"{self.base_url}/discover/tv",
                {
                    "api_key": self._api_key,
                    "air_date.gte": start.isoformat(),
                    "air_date.lte": end.isoformat(),
                    "sort_by": self.sort_by,
                    "language": self.language,
                    "page": page,
                },
            )
            results = payload.get("results") if isinstance(payload, dict) else None
            if not isinstance(results, list) or not results:
                break
            pages_fetched += 1

            for raw in results:
                item = DiscoveryItem.from_payload(raw)
                if item is not None:
                    items.append(item)

            total_pages = payload.get("total_pages")
            if not isinstance(total_pages, int) or page >= total_pages:
                break
            page += 1

        logger.info("Discovery returned %s item(s) from %s page(s)", len(items), pages_fetched)
        return items

    async def imdb_id(self, tv_id: int) -> str | None:
        """IMDb cross-reference for a TMDB show, if known."""
        if not self.enabled:
            return None
        payload = await fetch_json(
            self._client,
            f"{self.base_url}/tv/{tv_id}/external_ids",
            {"api_key": self._api_key},
        )
        if not isinstance(payload, dict):
            return None
        imdb = payload.get("imdb_id")
        return imdb.strip() if isinstance(imdb, str) and imdb.strip() else None
