"""
Show meta projection

Describes one TVMaze show with its episode list.
"""
import logging

from tvcatalog.schemas import MetaResponse, ShowMeta, VideoEntry
from tvcatalog.services.catalog_merger import ID_PREFIX
from tvcatalog.services.feed_types import EpisodeSummary, ShowSummary
from tvcatalog.services.tvmaze_client import TVMazeClient
from tvcatalog.utils.text import clean_html


logger = logging.getLogger(__name__)


def parse_meta_id(meta_id: str) -> int | None:
    """Extract the numeric show id from 'tvmaze:<id>' (or a bare id)."""
    raw = meta_id.removeprefix(f"{ID_PREFIX}:")
    return int(raw) if raw.isascii() and raw.isdecimal() else None


async def get_show_meta(tvmaze: TVMazeClient, meta_id: str, show_id: int) -> MetaResponse:
    """
    Fetch a show with its episodes and project it for display

    Args:
        tvmaze: TVMaze client
        meta_id: Identifier as requested by the caller
        show_id: Numeric TVMaze show id

    Returns:
        Show meta; an 'Unknown' placeholder when the show cannot be fetched
    """
    show = await tvmaze.show_with_episodes(show_id)
    if show is None:
        logger.info(f"Show {meta_id} not available upstream")
        return MetaResponse(meta=ShowMeta(id=meta_id, name="Unknown", videos=[]))

    return MetaResponse(meta=_project_show(show))


def _project_show(show: ShowSummary) -> ShowMeta:
    return ShowMeta(
        id=f"{ID_PREFIX}:{show.id}",
        name=show.name,
        description=clean_html(show.summary),
        poster=show.image_original or show.image_medium,
        background=show.image_original,
        videos=[_project_episode(episode) for episode in show.episodes],
    )


def _project_episode(episode: EpisodeSummary) -> VideoEntry:
    return VideoEntry(
        id=f"{ID_PREFIX}:{episode.id}",
        title=episode.name or f"Episode {episode.number}",
        season=episode.season,
        episode=episode.number,
        released=episode.airdate.isoformat() if episode.airdate else None,
        overview=clean_html(episode.summary),
    )
