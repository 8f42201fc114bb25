"""
Catalog merging

Unions show records from the schedule and discovery paths keyed by TVMaze id
and produces the sorted catalog.
"""
import logging
from collections.abc import Iterable, MutableMapping

from tvcatalog.schemas import CatalogEntry
from tvcatalog.services.feed_types import ShowRecord
from tvcatalog.utils.text import clean_html


logger = logging.getLogger(__name__)

ID_PREFIX = "tvmaze"


def merge_records(
    existing_records: MutableMapping[int, ShowRecord],
    new_records: Iterable[ShowRecord]
) -> tuple[MutableMapping[int, ShowRecord], int]:
    """
    Merge new records into existing record dictionary.

    A record for an id already present replaces it only when its stamp is
    strictly later. A replaced record keeps the original insertion position.

    Args:
        existing_records: Dictionary of existing records (show id -> ShowRecord)
        new_records: Iterable of records to merge

    Returns:
        Tuple of (updated_records_dict, count_of_new_ids_added)
    """
    new_count = 0

    for record in new_records:
        current = existing_records.get(record.show.id)
        if current is None:
            existing_records[record.show.id] = record
            new_count += 1
        elif record.stamp > current.stamp:
            existing_records[record.show.id] = record
            logger.debug(
                "Replaced %s record for show %s with fresher %s record (%s > %s)",
                current.source,
                record.show.id,
                record.source,
                record.stamp.isoformat(),
                current.stamp.isoformat(),
            )

    return existing_records, new_count


def build_catalog(
    primary_records: Iterable[ShowRecord],
    secondary_records: Iterable[ShowRecord],
) -> list[CatalogEntry]:
    """
    Merge both record sets and sort by stamp, newest first.

    Equal stamps keep insertion order, primary records first.
    """
    merged: dict[int, ShowRecord] = {}
    merge_records(merged, primary_records)
    merge_records(merged, secondary_records)

    ordered = sorted(merged.values(), key=lambda record: record.stamp, reverse=True)
    return [to_catalog_entry(record) for record in ordered]


def to_catalog_entry(record: ShowRecord) -> CatalogEntry:
    show = record.show
    return CatalogEntry(
        id=f"{ID_PREFIX}:{show.id}",
        type="series",
        name=show.name,
        description=clean_html(show.summary),
        poster=show.image_medium or show.image_original,
        background=show.image_original or show.image_medium,
        airstamp=record.stamp.isoformat(),
    )
