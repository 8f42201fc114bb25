"""
Structured logging helpers for consistent log formatting.

Provides utilities for structured, clean logging of catalog build phases.
"""
import logging
from datetime import datetime, timezone


def log_section_start(logger: logging.Logger, section_name: str) -> None:
    """
    Log the start of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being started
    """
    logger.info(f"Starting: {section_name}")


def log_section_end(logger: logging.Logger, section_name: str) -> None:
    """
    Log the end of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being ended
    """
    logger.info(f"Completed: {section_name}")


def log_source_processing(logger: logging.Logger, idx: int, total: int, label: str) -> None:
    """
    Log feed page processing header.

    Args:
        logger: Logger instance
        idx: Current page index (1-based)
        total: Total number of pages
        label: Feed page being processed
    """
    logger.info(f"Processing feed {idx}/{total}: {label}")


def log_build_start(logger: logging.Logger, as_of: datetime) -> None:
    """Log catalog build start."""
    logger.info(
        f"Catalog build started at {datetime.now(timezone.utc).isoformat()} "
        f"(as of {as_of.isoformat()})"
    )


def log_build_end(logger: logging.Logger, entries_count: int) -> None:
    """Log catalog build end."""
    logger.info(
        f"Catalog build completed at {datetime.now(timezone.utc).isoformat()} "
        f"with {entries_count} entries"
    )


def log_merge_summary(
    logger: logging.Logger,
    schedule_count: int,
    discovery_count: int,
    merged_count: int
) -> None:
    """
    Log merge operation summary.

    Args:
        logger: Logger instance
        schedule_count: Records contributed by the schedule feed
        discovery_count: Records contributed by the discovery feed
        merged_count: Unique shows after merging
    """
    logger.info(
        f"Merge summary - Schedule: {schedule_count}, Discovery: {discovery_count}, "
        f"Merged: {merged_count}"
    )
