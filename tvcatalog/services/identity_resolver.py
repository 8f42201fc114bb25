"""
Identity Resolution

Maps a TMDB discovery item onto its TVMaze show. The exact path goes through
the IMDb cross-reference; when that is missing the item's name is searched
on TVMaze and candidates are scored with a hybrid similarity.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable

from rapidfuzz.distance import Levenshtein

from tvcatalog.services.content_policy import ContentPolicy
from tvcatalog.services.feed_types import DiscoveryItem, ShowSummary
from tvcatalog.services.tmdb_client import TMDBClient
from tvcatalog.services.tvmaze_client import TVMazeClient


logger = logging.getLogger(__name__)

DEFAULT_MATCH_THRESHOLD = 0.55

_PUNCTUATION = re.compile(r"[^\w\s]", re.UNICODE)


def normalize_name(value: str) -> str:
    """Lower-case, drop punctuation, collapse whitespace."""
    return " ".join(_PUNCTUATION.sub("", value.lower()).split())


def token_overlap(left: str, right: str) -> float:
    """Jaccard index of the normalized whitespace tokens."""
    left_tokens = set(normalize_name(left).split())
    right_tokens = set(normalize_name(right).split())
    union = left_tokens | right_tokens
    if not union:
        return 0.0
    return len(left_tokens & right_tokens) / len(union)


def edit_similarity(left: str, right: str) -> float:
    """One minus Levenshtein distance over the longer normalized length."""
    left_norm = normalize_name(left)
    right_norm = normalize_name(right)
    longest = max(len(left_norm), len(right_norm))
    if longest == 0:
        return 0.0
    return 1.0 - Levenshtein.distance(left_norm, right_norm) / longest


def hybrid_similarity(left: str, right: str) -> float:
    """Mean of token overlap and edit similarity, in [0, 1]."""
    return (token_overlap(left, right) + edit_similarity(left, right)) / 2.0


class IdentityResolver:
    """Resolves discovery items into TVMaze identity space."""

    def __init__(
        self,
        tvmaze: TVMazeClient,
        tmdb: TMDBClient,
        policy: ContentPolicy,
        *,
        threshold: float = DEFAULT_MATCH_THRESHOLD,
        similarity: Callable[[str, str], float] = hybrid_similarity,
    ) -> None:
        self._tvmaze = tvmaze
        self._tmdb = tmdb
        self._policy = policy
        self.threshold = threshold
        self._similarity = similarity

    async def resolve(self, item: DiscoveryItem) -> ShowSummary | None:
        """
        Find the TVMaze show for a discovery item.

        Args:
            item: TMDB discovery item

        Returns:
            The matched show, or None when neither path yields one
        """
        imdb_id = item.imdb_id or await self._tmdb.imdb_id(item.id)
        if imdb_id:
            item.imdb_id = imdb_id
            show = await self._tvmaze.lookup_by_imdb(imdb_id)
            if show is not None:
                logger.debug("Resolved %r via IMDb %s -> tvmaze:%s", item.name, imdb_id, show.id)
                return show

        return await self.resolve_by_name(item)

    async def resolve_by_name(self, item: DiscoveryItem) -> ShowSummary | None:
        if not item.name:
            return None
        candidates = await self._tvmaze.search_shows(item.name)
        match = self.best_match(item.name, candidates)
        if match is None:
            logger.debug("No name match for %r among %s candidate(s)", item.name, len(candidates))
        else:
            logger.debug("Resolved %r by name -> tvmaze:%s (%r)", item.name, match.id, match.name)
        return match

    def best_match(self, name: str, candidates: list[ShowSummary]) -> ShowSummary | None:
        """
        Highest-scoring allowed candidate at or above the threshold.

        Candidates excluded by the content policy are never scored. Ties keep
        the first candidate seen.
        """
        best: ShowSummary | None = None
        best_score = -1.0
        for candidate in candidates:
            if self._policy.is_excluded(candidate):
                continue
            score = self._similarity(name, candidate.name)
            if score > best_score:
                best, best_score = candidate, score

        if best is None or best_score < self.threshold:
            return None
        return best
