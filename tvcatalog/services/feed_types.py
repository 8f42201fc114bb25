"""
Shared dataclasses used across the catalog build pipeline.

Upstream JSON is parsed into these records once at the feed boundary so the
rest of the pipeline never has to probe raw dictionaries.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from tvcatalog.utils.timezone import (
    DateFormatError,
    parse_calendar_date,
    parse_iso8601_to_utc,
    start_of_day_utc,
)


# TMDB TV genre ids
TMDB_TV_GENRES: dict[int, str] = {
    10759: "Action & Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    10762: "Kids",
    9648: "Mystery",
    10763: "News",
    10764: "Reality",
    10765: "Sci-Fi & Fantasy",
    10766: "Soap",
    10767: "Talk",
    10768: "War & Politics",
    37: "Western",
}


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if raw.isascii() and raw.isdecimal():
            return int(raw)
    return None


def _channel_country(channel: dict) -> str | None:
    code = _as_dict(channel.get("country")).get("code")
    return code.upper() if isinstance(code, str) and code else None


@dataclass(slots=True)
class EpisodeSummary:
    """One episode as reported by the primary source."""
    id: int | None
    season: int | None = None
    number: int | None = None
    name: str | None = None
    airdate: date | None = None
    airstamp: datetime | None = None
    summary: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> EpisodeSummary | None:
        if not isinstance(payload, dict):
            return None

        airdate = None
        raw_airdate = _optional_str(payload.get("airdate"))
        if raw_airdate:
            try:
                airdate = parse_calendar_date(raw_airdate)
            except DateFormatError:
                airdate = None

        airstamp = None
        raw_airstamp = _optional_str(payload.get("airstamp"))
        if raw_airstamp:
            try:
                airstamp = parse_iso8601_to_utc(raw_airstamp)
            except DateFormatError:
                airstamp = None

        return cls(
            id=_optional_int(payload.get("id")),
            season=_optional_int(payload.get("season")),
            number=_optional_int(payload.get("number")),
            name=_optional_str(payload.get("name")),
            airdate=airdate,
            airstamp=airstamp,
            summary=payload.get("summary") if isinstance(payload.get("summary"), str) else None,
        )

    @property
    def resolved_date(self) -> date | None:
        """Calendar date used for recency: airdate, else the date of airstamp."""
        if self.airdate is not None:
            return self.airdate
        if self.airstamp is not None:
            return self.airstamp.date()
        return None

    @property
    def stamp(self) -> datetime | None:
        """Comparable timestamp: airstamp, else midnight UTC of airdate."""
        if self.airstamp is not None:
            return self.airstamp
        if self.airdate is not None:
            return start_of_day_utc(self.airdate)
        return None


@dataclass(slots=True)
class ShowSummary:
    """A show in the primary source's identity space."""
    id: int
    name: str
    language: str | None = None
    show_type: str | None = None
    genres: list[str] = field(default_factory=list)
    country: str | None = None
    image_medium: str | None = None
    image_original: str | None = None
    summary: str | None = None
    episodes: list[EpisodeSummary] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> ShowSummary | None:
        """Parse a show object; returns None when it carries no identity."""
        if not isinstance(payload, dict):
            return None
        show_id = _optional_int(payload.get("id"))
        if show_id is None:
            return None

        network = _as_dict(payload.get("network"))
        web_channel = _as_dict(payload.get("webChannel"))
        image = _as_dict(payload.get("image"))
        genres = payload.get("genres")
        embedded = _as_dict(payload.get("_embedded"))
        raw_episodes = embedded.get("episodes")

        episodes: list[EpisodeSummary] = []
        if isinstance(raw_episodes, list):
            for raw in raw_episodes:
                episode = EpisodeSummary.from_payload(raw)
                if episode is not None:
                    episodes.append(episode)

        return cls(
            id=show_id,
            name=_optional_str(payload.get("name")) or "",
            language=_optional_str(payload.get("language")),
            show_type=_optional_str(payload.get("type")),
            genres=[g for g in genres if isinstance(g, str)] if isinstance(genres, list) else [],
            country=_channel_country(network) or _channel_country(web_channel),
            image_medium=_optional_str(image.get("medium")),
            image_original=_optional_str(image.get("original")),
            summary=payload.get("summary") if isinstance(payload.get("summary"), str) else None,
            episodes=episodes,
        )


@dataclass(slots=True)
class ScheduleEntry:
    """One broadcast or streaming slot from the schedule feed."""
    show: ShowSummary
    episode: EpisodeSummary

    @classmethod
    def from_payload(cls, payload: Any) -> ScheduleEntry | None:
        """Parse a schedule slot; entries without a resolvable show are dropped."""
        if not isinstance(payload, dict):
            return None
        raw_show = payload.get("show") or _as_dict(payload.get("_embedded")).get("show")
        show = ShowSummary.from_payload(raw_show)
        if show is None:
            return None
        episode = EpisodeSummary.from_payload(payload)
        if episode is None:
            return None
        return cls(show=show, episode=episode)


@dataclass(slots=True)
class DiscoveryItem:
    """A show in the secondary source's identity space."""
    id: int
    name: str
    overview: str | None = None
    language: str | None = None
    genres: list[str] = field(default_factory=list)
    country: str | None = None
    imdb_id: str | None = None
    show_type: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> DiscoveryItem | None:
        if not isinstance(payload, dict):
            return None
        item_id = _optional_int(payload.get("id"))
        if item_id is None:
            return None

        genre_ids = payload.get("genre_ids")
        genres = []
        if isinstance(genre_ids, list):
            genres = [TMDB_TV_GENRES[g] for g in genre_ids if g in TMDB_TV_GENRES]

        origin = payload.get("origin_country")
        country = None
        if isinstance(origin, list) and origin and isinstance(origin[0], str):
            country = origin[0].upper()

        return cls(
            id=item_id,
            name=_optional_str(payload.get("name")) or _optional_str(payload.get("original_name")) or "",
            overview=_optional_str(payload.get("overview")),
            language=_optional_str(payload.get("original_language")),
            genres=genres,
            country=country,
        )


@dataclass(slots=True)
class ShowRecord:
    """A show that qualified for the catalog, with its representative stamp."""
    show: ShowSummary
    stamp: datetime
    source: str


__all__ = [
    "DiscoveryItem",
    "EpisodeSummary",
    "ScheduleEntry",
    "ShowRecord",
    "ShowSummary",
    "TMDB_TV_GENRES",
]
