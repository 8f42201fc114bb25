"""
Recency Window Evaluation

Decides whether a show aired inside the trailing window. All functions take
an explicit ``as_of`` so results never depend on the wall clock.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime

from tvcatalog.services.feed_types import EpisodeSummary
from tvcatalog.utils.timezone import calculate_window_start, ensure_utc


logger = logging.getLogger(__name__)


def qualifying_episodes(
    episodes: Iterable[EpisodeSummary],
    window_days: int,
    as_of: datetime,
) -> list[EpisodeSummary]:
    """
    Episodes whose date falls inside [as_of - (window_days - 1), as_of].

    Episodes with neither airdate nor airstamp are skipped.
    """
    start = calculate_window_start(as_of, window_days)
    end = ensure_utc(as_of).date()
    selected = []
    for episode in episodes:
        aired = episode.resolved_date
        if aired is None:
            continue
        if start <= aired <= end:
            selected.append(episode)
    return selected


def latest_qualifying_date(
    episodes: Iterable[EpisodeSummary],
    window_days: int,
    as_of: datetime,
) -> date | None:
    """
    Latest episode date inside the window.

    Args:
        episodes: Episodes of one show
        window_days: Trailing window length in days, inclusive of as_of
        as_of: Anchor moment

    Returns:
        The maximum qualifying date, or None if no episode qualifies
    """
    dates = [
        episode.resolved_date
        for episode in qualifying_episodes(episodes, window_days, as_of)
    ]
    return max(dates) if dates else None


def latest_qualifying_stamp(
    episodes: Iterable[EpisodeSummary],
    window_days: int,
    as_of: datetime,
) -> datetime | None:
    """
    Representative timestamp of the latest qualifying episode.

    Ordered by calendar date first, then by stamp, so an episode with a later
    airdate always wins over an earlier one that carries a precise airstamp.
    Never later than as_of: an episode dated today whose airstamp is still
    ahead is stamped as_of.
    """
    best: tuple[date, datetime] | None = None
    for episode in qualifying_episodes(episodes, window_days, as_of):
        key = (episode.resolved_date, episode.stamp)
        if best is None or key > best:
            best = key
    if best is None:
        return None
    return min(best[1], ensure_utc(as_of))
