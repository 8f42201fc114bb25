import unittest
from datetime import datetime, timezone

from tvcatalog.services.catalog_merger import build_catalog, merge_records, to_catalog_entry
from tvcatalog.services.feed_types import ShowRecord, ShowSummary


def record(show_id, stamp, *, source="schedule", name=None, **show_fields):
    show = ShowSummary(id=show_id, name=name or f"Show {show_id}", **show_fields)
    return ShowRecord(show=show, stamp=stamp, source=source)


T1 = datetime(2026, 10, 15, 1, 0, tzinfo=timezone.utc)
T2 = datetime(2026, 10, 17, 3, 0, tzinfo=timezone.utc)
T3 = datetime(2026, 10, 18, 0, 0, tzinfo=timezone.utc)


class MergeRecordsTestCase(unittest.TestCase):
    def test_fresher_secondary_record_wins(self) -> None:
        catalog = build_catalog(
            [record(1, T1, name="Schedule Name")],
            [record(1, T2, source="discovery", name="Detail Name")],
        )

        self.assertEqual(len(catalog), 1)
        self.assertEqual(catalog[0].airstamp, T2.isoformat())
        self.assertEqual(catalog[0].name, "Detail Name")

    def test_staler_secondary_record_does_not_mask_primary(self) -> None:
        catalog = build_catalog([record(1, T2)], [record(1, T1, source="discovery")])

        self.assertEqual(catalog[0].airstamp, T2.isoformat())

    def test_equal_stamps_keep_existing_record(self) -> None:
        merged, added = merge_records({}, [record(1, T1, name="First"), record(1, T1, name="Second")])

        self.assertEqual(added, 1)
        self.assertEqual(merged[1].show.name, "First")

    def test_one_entry_per_identity(self) -> None:
        catalog = build_catalog(
            [record(1, T1), record(2, T2), record(1, T3)],
            [record(2, T1, source="discovery"), record(3, T1, source="discovery")],
        )
        ids = [entry.id for entry in catalog]

        self.assertEqual(len(ids), len(set(ids)))
        self.assertEqual(sorted(ids), ["tvmaze:1", "tvmaze:2", "tvmaze:3"])

    def test_sorted_newest_first_with_stable_ties(self) -> None:
        catalog = build_catalog(
            [record(1, T1), record(2, T3), record(3, T1)],
            [record(4, T3, source="discovery"), record(5, T2, source="discovery")],
        )

        self.assertEqual(
            [entry.id for entry in catalog],
            ["tvmaze:2", "tvmaze:4", "tvmaze:5", "tvmaze:1", "tvmaze:3"],
        )


class CatalogEntryTestCase(unittest.TestCase):
    def test_entry_projection(self) -> None:
        entry = to_catalog_entry(
            record(
                42,
                T1,
                name="Harbor Lights",
                summary="<p>A <b>coastal</b> drama.</p>",
                image_medium=None,
                image_original="https://static.tvmaze.com/original/42.jpg",
            )
        )

        self.assertEqual(entry.id, "tvmaze:42")
        self.assertEqual(entry.type, "series")
        self.assertEqual(entry.description, "A coastal drama.")
        self.assertEqual(entry.poster, "https://static.tvmaze.com/original/42.jpg")
        self.assertEqual(entry.background, "https://static.tvmaze.com/original/42.jpg")
        self.assertEqual(entry.airstamp, "2026-10-15T01:00:00+00:00")

    def test_missing_images_and_summary(self) -> None:
        entry = to_catalog_entry(record(7, T1))

        self.assertIsNone(entry.poster)
        self.assertIsNone(entry.background)
        self.assertEqual(entry.description, "")


if __name__ == "__main__":
    unittest.main()
