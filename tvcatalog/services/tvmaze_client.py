"""
TVMaze feeds

Primary source: schedule of record, show details, reverse lookup by IMDb id,
and name search. Every call degrades to an empty result when the upstream is
unavailable.
"""
from __future__ import annotations

import logging
from datetime import date

import httpx

from tvcatalog.services.feed_types import ScheduleEntry, ShowSummary
from tvcatalog.utils.http_fetch import fetch_json


logger = logging.getLogger(__name__)


class TVMazeClient:
    """Thin async wrapper over the TVMaze REST endpoints used for catalog builds."""

    def __init__(self, client: httpx.AsyncClient, base_url: str = "https://api.tvmaze.com") -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")

    async def schedule(self, day: date, *, country: str | None = "US") -> list[ScheduleEntry]:
        """Broadcast schedule for one day."""
        params = {"date": day.isoformat()}
        if country:
            params["country"] = country
        payload = await fetch_json(self._client, f"{self.base_url}/schedule", params)
        return _parse_schedule(payload)

    async def web_schedule(self, day: date) -> list[ScheduleEntry]:
        """Streaming/web-channel schedule for one day."""
        payload = await fetch_json(
            self._client,
            f"{self.base_url}/schedule/web",
            {"date": day.isoformat()},
        )
        return _parse_schedule(payload)

    async def show_with_episodes(self, show_id: int) -> ShowSummary | None:
        payload = await fetch_json(
            self._client,
            f"{self.base_url}/shows/{show_id}",
            {"embed": "episodes"},
        )
        return ShowSummary.from_payload(payload)

    async def lookup_by_imdb(self, imdb_id: str) -> ShowSummary | None:
        """Reverse lookup by IMDb id; None when TVMaze does not know it."""
        payload = await fetch_json(
            self._client,
            f"{self.base_url}/lookup/shows",
            {"imdb": imdb_id},
        )
        return ShowSummary.from_payload(payload)

    async def search_shows(self, query: str) -> list[ShowSummary]:
        """Search candidates in upstream rank order."""
        if not query.strip():
            return []
        payload = await fetch_json(
            self._client,
            f"{self.base_url}/search/shows",
            {"q": query},
        )
        if not isinstance(payload, list):
            return []

        candidates = []
        for hit in payload:
            show = ShowSummary.from_payload(hit.get("show") if isinstance(hit, dict) else None)
            if show is not None:
                candidates.append(show)
        return candidates


def _parse_schedule(payload) -> list[ScheduleEntry]:
    if not isinstance(payload, list):
        return []

    entries = []
    dropped = 0
    for raw in payload:
        entry = ScheduleEntry.from_payload(raw)
        if entry is None:
            dropped += 1
            continue
        entries.append(entry)

    if dropped:
        logger.debug("Dropped %s schedule entries without a resolvable show", dropped)
    return entries
