import logging
from typing import Annotated

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


logger = logging.getLogger(__name__)

DEFAULT_NEWS_TITLE_KEYWORDS = [
    "news",
    "good morning america",
    "today with",
    "meet the press",
    "face the nation",
    "this week with",
    "nightline",
    "60 minutes",
    "dateline",
    "20/20",
]


def _split_csv(value):
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(item).strip() for item in value if str(item).strip()]
    return []


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    log_level: str = "INFO"

    tvmaze_base_url: str = "https://api.tvmaze.com"
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_api_key: str = ""
    http_timeout_sec: float = 10.0

    recency_window_days: int = 7
    schedule_country: str = "US"
    include_web_schedule: bool = True

    discover_max_pages: int = 2
    discover_sort_by: str = "first_air_date.desc"
    discover_language: str = "en-US"

    resolve_concurrency: int = 5  # Outbound fan-out ceiling
    match_threshold: float = 0.55

    policy_version: str = "1"
    policy_allowed_languages: Annotated[list[str], NoDecode] = ["english", "en"]
    policy_block_foreign_scripts: bool = True
    policy_excluded_categories: Annotated[list[str], NoDecode] = ["news"]
    policy_exclude_talk_shows: bool = False
    policy_exclude_sports: bool = False
    policy_title_keywords: Annotated[list[str], NoDecode] = DEFAULT_NEWS_TITLE_KEYWORDS
    policy_allowed_countries: Annotated[list[str], NoDecode] = []

    addon_id: str = "tvmaze-last7-addon"
    addon_version: str = "1.0.0"
    catalog_id: str = "tvmaze_last7"
    catalog_name: str = "TVMaze Last 7 Days"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "policy_allowed_languages",
        "policy_excluded_categories",
        "policy_title_keywords",
        "policy_allowed_countries",
        mode="before",
    )
    @classmethod
    def parse_csv_lists(cls, value):
        """Parse comma-separated values or list."""
        return _split_csv(value)

    @field_validator("tvmaze_base_url", "tmdb_base_url")
    @classmethod
    def validate_base_urls(cls, value: str, info) -> str:
        """Validate upstream base URLs are HTTP/HTTPS."""
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"{info.field_name} must be HTTP/HTTPS: {value}")
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level name."""
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @field_validator("http_timeout_sec")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Validate HTTP timeout (seconds)."""
        if value <= 0:
            raise ValueError("http_timeout_sec must be > 0")
        return value

    @field_validator("recency_window_days")
    @classmethod
    def validate_window(cls, value: int) -> int:
        """Validate recency window is positive and reasonable."""
        if value < 1:
            raise ValueError("recency_window_days must be >= 1")
        if value > 30:
            raise ValueError("recency_window_days must be <= 30 days")
        return value

    @field_validator("discover_max_pages")
    @classmethod
    def validate_max_pages(cls, value: int) -> int:
        """Ensure at least one discovery page is requested."""
        if value < 1:
            raise ValueError("discover_max_pages must be >= 1")
        return value

    @field_validator("resolve_concurrency")
    @classmethod
    def validate_concurrency(cls, value: int) -> int:
        """Keep outbound fan-out small."""
        if value < 1 or value > 32:
            raise ValueError("resolve_concurrency must be between 1 and 32")
        return value

    @field_validator("match_threshold")
    @classmethod
    def validate_threshold(cls, value: float) -> float:
        """Validate fuzzy match threshold."""
        if not 0.0 <= value <= 1.0:
            raise ValueError("match_threshold must be between 0 and 1")
        return value

    @field_validator("policy_allowed_countries")
    @classmethod
    def normalize_countries(cls, value: list[str]) -> list[str]:
        return [code.upper() for code in value]

    @model_validator(mode="after")
    def validate_catalog_configuration(self):
        """Validate cross-field configuration."""
        if not self.tmdb_api_key:
            logger.warning(
                "TMDB_API_KEY not configured - discovery feed will be skipped"
            )

        if not self.policy_allowed_languages:
            raise ValueError("policy_allowed_languages must not be empty")

        return self

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  TVMaze: %s", self.tvmaze_base_url)
        logger.info(
            "  TMDB: %s (%s)",
            self.tmdb_base_url,
            "key configured" if self.tmdb_api_key else "no key",
        )
        logger.info("  HTTP Timeout: %ss", self.http_timeout_sec)
        logger.info("  Recency Window: %s days", self.recency_window_days)
        logger.info(
            "  Schedule: country=%s web=%s",
            self.schedule_country,
            self.include_web_schedule,
        )
        logger.info(
            "  Discovery: max_pages=%s sort_by=%s",
            self.discover_max_pages,
            self.discover_sort_by,
        )
        logger.info("  Resolve Concurrency: %s", self.resolve_concurrency)
        logger.info("  Match Threshold: %.2f", self.match_threshold)
        logger.info(
            "  Policy v%s: languages=%s scripts=%s categories=%s talk=%s sports=%s countries=%s",
            self.policy_version,
            self.policy_allowed_languages,
            self.policy_block_foreign_scripts,
            self.policy_excluded_categories,
            self.policy_exclude_talk_shows,
            self.policy_exclude_sports,
            self.policy_allowed_countries or "any",
        )


settings = CustomSettings()


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
