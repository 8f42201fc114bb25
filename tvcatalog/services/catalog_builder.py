"""
Catalog Build Service

Coordinates schedule collection, discovery resolution, recency evaluation and
merging into one recently-aired catalog. Every build is computed fresh from
the upstream feeds; nothing is cached between builds.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

import httpx

from tvcatalog.config import CustomSettings
from tvcatalog.schemas import CatalogEntry
from tvcatalog.services.catalog_merger import build_catalog
from tvcatalog.services.content_policy import ContentPolicy
from tvcatalog.services.feed_types import EpisodeSummary, ScheduleEntry, ShowRecord, ShowSummary
from tvcatalog.services.identity_resolver import IdentityResolver
from tvcatalog.services.recency import latest_qualifying_stamp
from tvcatalog.services.tmdb_client import TMDBClient
from tvcatalog.services.tvmaze_client import TVMazeClient
from tvcatalog.utils.logging_helpers import (
    log_build_end,
    log_build_start,
    log_merge_summary,
    log_section_end,
    log_section_start,
    log_source_processing,
)
from tvcatalog.utils.task_pool import DEFAULT_CONCURRENCY, run_all
from tvcatalog.utils.timezone import calculate_window_start, ensure_utc, window_dates


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildContext:
    as_of: datetime
    window_days: int
    window_start: date
    window_end: date
    dates: list[date]


@dataclass(slots=True)
class BuildSummary:
    schedule_entries: int = 0
    schedule_excluded: int = 0
    schedule_records: int = 0
    discovery_items: int = 0
    discovery_excluded: int = 0
    discovery_resolved: int = 0
    discovery_records: int = 0
    catalog_entries: int = 0
    exclusions: dict[str, int] = field(default_factory=dict)

    def count_exclusion(self, reason: str) -> None:
        self.exclusions[reason] = self.exclusions.get(reason, 0) + 1

    def to_dict(self) -> dict:
        return {
            "schedule_entries": self.schedule_entries,
            "schedule_excluded": self.schedule_excluded,
            "schedule_records": self.schedule_records,
            "discovery_items": self.discovery_items,
            "discovery_excluded": self.discovery_excluded,
            "discovery_resolved": self.discovery_resolved,
            "discovery_records": self.discovery_records,
            "catalog_entries": self.catalog_entries,
            "exclusions": dict(self.exclusions),
        }


class CatalogBuildPipeline:
    """Builds the catalog of shows with an episode inside the recency window."""

    def __init__(
        self,
        tvmaze: TVMazeClient,
        tmdb: TMDBClient,
        policy: ContentPolicy,
        *,
        window_days: int = 7,
        schedule_country: str | None = "US",
        include_web_schedule: bool = True,
        concurrency: int = DEFAULT_CONCURRENCY,
        resolver: IdentityResolver | None = None,
    ) -> None:
        self.tvmaze = tvmaze
        self.tmdb = tmdb
        self.policy = policy
        self.window_days = window_days
        self.schedule_country = schedule_country
        self.include_web_schedule = include_web_schedule
        self._concurrency = max(1, concurrency)
        self.resolver = resolver or IdentityResolver(tvmaze, tmdb, policy)

    async def run(self, as_of: datetime | None = None) -> list[CatalogEntry]:
        context = self._build_context(as_of)
        summary = BuildSummary()
        log_build_start(logger, context.as_of)
        logger.info(
            "Recency window: %s -> %s (%s days), policy v%s [%s]",
            context.window_start.isoformat(),
            context.window_end.isoformat(),
            context.window_days,
            self.policy.version,
            ", ".join(self.policy.predicate_names),
        )

        entries = await self._collect_schedule(context)
        schedule_records = self._schedule_records(entries, context, summary)
        discovery_records = await self._discovery_records(context, summary)

        # Merge faults are logic defects and propagate to the caller
        catalog = build_catalog(schedule_records, discovery_records)
        summary.catalog_entries = len(catalog)
        log_merge_summary(logger, len(schedule_records), len(discovery_records), len(catalog))
        logger.info("Build summary: %s", summary.to_dict())
        log_build_end(logger, len(catalog))
        return catalog

    def _build_context(self, as_of: datetime | None) -> BuildContext:
        anchor = ensure_utc(as_of) if as_of else datetime.now(timezone.utc)
        return BuildContext(
            as_of=anchor,
            window_days=self.window_days,
            window_start=calculate_window_start(anchor, self.window_days),
            window_end=anchor.date(),
            dates=window_dates(anchor, self.window_days),
        )

    async def _collect_schedule(self, context: BuildContext) -> list[ScheduleEntry]:
        log_section_start(logger, "schedule collection")

        pages: list[tuple[date, str]] = []
        for day in context.dates:
            pages.append((day, "broadcast"))
            if self.include_web_schedule:
                pages.append((day, "web"))

        total = len(pages)

        async def _fetch_page(page: tuple[int, tuple[date, str]]) -> list[ScheduleEntry]:
            index, (day, variant) = page
            log_source_processing(logger, index, total, f"{variant} {day.isoformat()}")
            if variant == "web":
                return await self.tvmaze.web_schedule(day)
            return await self.tvmaze.schedule(day, country=self.schedule_country)

        results = await run_all(enumerate(pages, start=1), _fetch_page, self._concurrency, label="schedule")

        entries: list[ScheduleEntry] = []
        for page_entries in results:
            if page_entries:
                entries.extend(page_entries)

        log_section_end(logger, "schedule collection")
        logger.info("Collected %s schedule entries from %s page(s)", len(entries), total)
        return entries

    def _schedule_records(
        self,
        entries: Sequence[ScheduleEntry],
        context: BuildContext,
        summary: BuildSummary,
    ) -> list[ShowRecord]:
        summary.schedule_entries = len(entries)

        shows: dict[int, ShowSummary] = {}
        episodes: dict[int, list[EpisodeSummary]] = {}
        excluded: set[int] = set()

        for entry in entries:
            show_id = entry.show.id
            if show_id in excluded:
                continue
            if show_id not in shows:
                reason = self.policy.exclusion_reason(entry.show)
                if reason is not None:
                    excluded.add(show_id)
                    summary.count_exclusion(reason)
                    logger.debug("Schedule show %r excluded by %s", entry.show.name, reason)
                    continue
                shows[show_id] = entry.show
                episodes[show_id] = []
            episodes[show_id].append(entry.episode)

        summary.schedule_excluded = len(excluded)

        records = []
        for show_id, show in shows.items():
            stamp = latest_qualifying_stamp(episodes[show_id], context.window_days, context.as_of)
            if stamp is None:
                continue
            records.append(ShowRecord(show=show, stamp=stamp, source="schedule"))

        summary.schedule_records = len(records)
        return records

    async def _discovery_records(
        self,
        context: BuildContext,
        summary: BuildSummary,
    ) -> list[ShowRecord]:
        if not self.tmdb.enabled:
            logger.warning("Discovery feed disabled - catalog limited to schedule feed")
            return []

        log_section_start(logger, "discovery resolution")
        items = await self.tmdb.discover(context.window_start, context.window_end)
        summary.discovery_items = len(items)

        allowed = []
        for item in items:
            reason = self.policy.exclusion_reason(item)
            if reason is not None:
                summary.discovery_excluded += 1
                summary.count_exclusion(reason)
                continue
            allowed.append(item)

        resolved = await run_all(allowed, self.resolver.resolve, self._concurrency, label="resolve")

        show_ids: list[int] = []
        seen: set[int] = set()
        for show in resolved:
            if show is None or show.id in seen:
                continue
            seen.add(show.id)
            reason = self.policy.exclusion_reason(show)
            if reason is not None:
                summary.discovery_excluded += 1
                summary.count_exclusion(reason)
                continue
            show_ids.append(show.id)
        summary.discovery_resolved = len(show_ids)

        details = await run_all(
            show_ids,
            self.tvmaze.show_with_episodes,
            self._concurrency,
            label="detail",
        )

        records = []
        for detail in details:
            if detail is None:
                continue
            reason = self.policy.exclusion_reason(detail)
            if reason is not None:
                summary.discovery_excluded += 1
                summary.count_exclusion(reason)
                continue
            stamp = latest_qualifying_stamp(detail.episodes, context.window_days, context.as_of)
            if stamp is None:
                continue
            records.append(ShowRecord(show=detail, stamp=stamp, source="discovery"))

        summary.discovery_records = len(records)
        log_section_end(logger, "discovery resolution")
        return records


def create_pipeline(client: httpx.AsyncClient, config: CustomSettings) -> CatalogBuildPipeline:
    """Wire a pipeline from settings around a shared HTTP client."""
    policy = ContentPolicy.from_settings(config)
    tvmaze = TVMazeClient(client, config.tvmaze_base_url)
    tmdb = TMDBClient(
        client,
        config.tmdb_api_key,
        base_url=config.tmdb_base_url,
        language=config.discover_language,
        sort_by=config.discover_sort_by,
        max_pages=config.discover_max_pages,
    )
    resolver = IdentityResolver(tvmaze, tmdb, policy, threshold=config.match_threshold)
    return CatalogBuildPipeline(
        tvmaze,
        tmdb,
        policy,
        window_days=config.recency_window_days,
        schedule_country=config.schedule_country,
        include_web_schedule=config.include_web_schedule,
        concurrency=config.resolve_concurrency,
        resolver=resolver,
    )
