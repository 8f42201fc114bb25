"""
Content Policy

Decides whether a show is kept out of the catalog. A policy is one value
object made of named predicates evaluated in order; the first predicate that
matches excludes the show. Deployments build the predicate list they want
explicitly (see ContentPolicy.from_settings) instead of hardcoding rules.

Predicates work on anything shaped like a show: an object with ``name``,
``language``, ``show_type``, ``genres`` and ``country`` attributes. Both
ShowSummary and DiscoveryItem qualify.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from tvcatalog.config import CustomSettings


logger = logging.getLogger(__name__)

# Unicode blocks whose presence in a display name marks the show as foreign
# regardless of its declared language.
BLOCKED_SCRIPT_RANGES: dict[str, tuple[tuple[int, int], ...]] = {
    "cjk": ((0x4E00, 0x9FFF),),
    "japanese": ((0x3040, 0x30FF), (0x31F0, 0x31FF)),
    "hangul": ((0xAC00, 0xD7AF),),
    "cyrillic": ((0x0400, 0x04FF),),
    "thai": ((0x0E00, 0x0E7F),),
    "arabic": ((0x0600, 0x06FF),),
    "devanagari": ((0x0900, 0x097F),),
}

TALK_SHOW_CATEGORIES = ("talk show", "talk")
SPORTS_CATEGORIES = ("sports", "sport")


def _blocked_script_pattern(ranges: Iterable[tuple[int, int]]) -> re.Pattern[str]:
    body = "".join(f"\\u{low:04X}-\\u{high:04X}" for low, high in ranges)
    return re.compile(f"[{body}]")


class ExclusionPredicate(Protocol):
    name: str

    def matches(self, show: Any) -> bool: ...


@dataclass(frozen=True, slots=True)
class LanguagePredicate:
    """Excludes shows whose declared language is not allowed.

    A missing language is treated as allowed.
    """
    allowed: frozenset[str] = frozenset({"english", "en"})
    name: str = "language"

    def matches(self, show: Any) -> bool:
        language = (getattr(show, "language", None) or "").strip().lower()
        if not language:
            return False
        return language not in self.allowed


@dataclass(frozen=True, slots=True)
class ScriptPredicate:
    """Excludes shows whose name contains characters from blocked scripts."""
    pattern: re.Pattern[str] = field(
        default_factory=lambda: _blocked_script_pattern(
            r for ranges in BLOCKED_SCRIPT_RANGES.values() for r in ranges
        )
    )
    name: str = "script"

    def matches(self, show: Any) -> bool:
        return bool(self.pattern.search(getattr(show, "name", None) or ""))


@dataclass(frozen=True, slots=True)
class CategoryPredicate:
    """Excludes shows by declared type, genre tag, or well-known title keyword."""
    categories: frozenset[str] = frozenset({"news"})
    title_keywords: tuple[str, ...] = ()
    name: str = "category"

    def matches(self, show: Any) -> bool:
        show_type = (getattr(show, "show_type", None) or "").strip().lower()
        if show_type and show_type in self.categories:
            return True

        for genre in getattr(show, "genres", None) or ():
            if genre.strip().lower() in self.categories:
                return True

        title = (getattr(show, "name", None) or "").lower()
        return any(_keyword_in_title(keyword, title) for keyword in self.title_keywords)


@dataclass(frozen=True, slots=True)
class OriginPredicate:
    """Excludes shows whose network/web channel country is not allowed.

    Shows without a known country pass.
    """
    allowed_countries: frozenset[str]
    name: str = "origin"

    def matches(self, show: Any) -> bool:
        country = getattr(show, "country", None)
        if not country:
            return False
        return country.upper() not in self.allowed_countries


def _keyword_in_title(keyword: str, title: str) -> bool:
    return re.search(rf"(?<!\w){re.escape(keyword.lower())}(?!\w)", title) is not None


@dataclass(frozen=True, slots=True)
class ContentPolicy:
    """Ordered set of exclusion predicates."""
    version: str
    predicates: tuple[ExclusionPredicate, ...]

    def exclusion_reason(self, show: Any) -> str | None:
        """Name of the first predicate that excludes show, or None."""
        for predicate in self.predicates:
            if predicate.matches(show):
                return predicate.name
        return None

    def is_excluded(self, show: Any) -> bool:
        reason = self.exclusion_reason(show)
        if reason is not None:
            logger.debug(
                "Excluded %r by %s predicate (policy v%s)",
                getattr(show, "name", None),
                reason,
                self.version,
            )
            return True
        return False

    @property
    def predicate_names(self) -> list[str]:
        return [predicate.name for predicate in self.predicates]

    @classmethod
    def build(
        cls,
        *,
        version: str = "1",
        allowed_languages: Sequence[str] = ("english", "en"),
        block_foreign_scripts: bool = True,
        excluded_categories: Sequence[str] = ("news",),
        exclude_talk_shows: bool = False,
        exclude_sports: bool = False,
        title_keywords: Sequence[str] = (),
        allowed_countries: Sequence[str] | None = None,
    ) -> ContentPolicy:
        """
        Assemble a policy from individually toggleable predicates.

        Predicates are evaluated in the order language, script, category,
        origin. Disabled predicates are left out entirely.
        """
        predicates: list[ExclusionPredicate] = []

        if allowed_languages:
            predicates.append(
                LanguagePredicate(allowed=frozenset(lang.lower() for lang in allowed_languages))
            )

        if block_foreign_scripts:
            predicates.append(ScriptPredicate())

        categories = {category.lower() for category in excluded_categories}
        if exclude_talk_shows:
            categories.update(TALK_SHOW_CATEGORIES)
        if exclude_sports:
            categories.update(SPORTS_CATEGORIES)
        if categories or title_keywords:
            predicates.append(
                CategoryPredicate(
                    categories=frozenset(categories),
                    title_keywords=tuple(keyword.lower() for keyword in title_keywords),
                )
            )

        if allowed_countries:
            predicates.append(
                OriginPredicate(
                    allowed_countries=frozenset(code.upper() for code in allowed_countries)
                )
            )

        return cls(version=version, predicates=tuple(predicates))

    @classmethod
    def from_settings(cls, settings: CustomSettings) -> ContentPolicy:
        policy = cls.build(
            version=settings.policy_version,
            allowed_languages=settings.policy_allowed_languages,
            block_foreign_scripts=settings.policy_block_foreign_scripts,
            excluded_categories=settings.policy_excluded_categories,
            exclude_talk_shows=settings.policy_exclude_talk_shows,
            exclude_sports=settings.policy_exclude_sports,
            title_keywords=settings.policy_title_keywords,
            allowed_countries=settings.policy_allowed_countries,
        )
        logger.debug(
            "Content policy v%s predicates: %s",
            policy.version,
            ", ".join(policy.predicate_names),
        )
        return policy
