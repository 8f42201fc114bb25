import unittest
from datetime import date, datetime, timezone

from feed_fixtures import FakeUpstream, episode, schedule_entry, tmdb_item, tvmaze_show

from tvcatalog.services.feed_types import DiscoveryItem, EpisodeSummary, ShowSummary
from tvcatalog.services.tmdb_client import TMDBClient
from tvcatalog.services.tvmaze_client import TVMazeClient


class FeedTypesTestCase(unittest.TestCase):
    def test_show_summary_from_payload(self) -> None:
        payload = tvmaze_show(
            3,
            "Harbor Lights",
            genres=["Drama", 5],
            country="gb",
            web=True,
            image={"medium": "m.jpg", "original": "o.jpg"},
            episodes=[episode(30, airdate="2026-10-17"), "garbage"],
        )
        show = ShowSummary.from_payload(payload)

        self.assertEqual(show.id, 3)
        self.assertEqual(show.show_type, "Scripted")
        self.assertEqual(show.genres, ["Drama"])
        self.assertEqual(show.country, "GB")
        self.assertEqual((show.image_medium, show.image_original), ("m.jpg", "o.jpg"))
        self.assertEqual([e.id for e in show.episodes], [30])

    def test_show_without_id_is_rejected(self) -> None:
        self.assertIsNone(ShowSummary.from_payload({"name": "No Id"}))
        self.assertIsNone(ShowSummary.from_payload(None))

    def test_non_ascii_digit_ids_are_rejected(self) -> None:
        self.assertIsNone(ShowSummary.from_payload({"id": "\u00b2", "name": "Squared"}))
        self.assertIsNone(DiscoveryItem.from_payload({"id": "\u0663", "name": "Arabic Three"}))
        self.assertEqual(ShowSummary.from_payload({"id": " 42 ", "name": "Answer"}).id, 42)

        parsed = EpisodeSummary.from_payload({"id": "\u00b2", "airdate": "2026-10-17"})
        self.assertIsNone(parsed.id)
        self.assertEqual(parsed.airdate, date(2026, 10, 17))

    def test_episode_dates(self) -> None:
        parsed = EpisodeSummary.from_payload(
            episode(1, airdate="2026-10-17", airstamp="2026-10-17T20:00:00-04:00")
        )
        self.assertEqual(parsed.airdate, date(2026, 10, 17))
        self.assertEqual(parsed.airstamp, datetime(2026, 10, 18, 0, 0, tzinfo=timezone.utc))
        self.assertEqual(parsed.resolved_date, date(2026, 10, 17))

        malformed = EpisodeSummary.from_payload(episode(2, airdate="soon", airstamp="later"))
        self.assertIsNone(malformed.resolved_date)
        self.assertIsNone(malformed.stamp)

    def test_discovery_item_maps_genres_and_country(self) -> None:
        item = DiscoveryItem.from_payload(
            tmdb_item(9, "Evening", language="en", genre_ids=[10763, 10767, 1], origin_country=["ca"])
        )

        self.assertEqual(item.genres, ["News", "Talk"])
        self.assertEqual(item.country, "CA")
        self.assertEqual(item.language, "en")


class TVMazeClientTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.upstream = FakeUpstream()
        self.client = self.upstream.client()
        self.tvmaze = TVMazeClient(self.client)

    async def asyncTearDown(self) -> None:
        await self.client.aclose()

    async def test_schedule_accepts_both_show_placements(self) -> None:
        show = tvmaze_show(1, "Plain")
        web_show = tvmaze_show(2, "Embedded", web=True)
        self.upstream.schedule["2026-10-18"] = [
            schedule_entry(show, 10, airdate="2026-10-18"),
            {"id": 11, "airdate": "2026-10-18"},
        ]
        self.upstream.web_schedule["2026-10-18"] = [
            schedule_entry(web_show, 20, airdate="2026-10-18", embedded=True),
        ]

        broadcast = await self.tvmaze.schedule(date(2026, 10, 18), country="US")
        web = await self.tvmaze.web_schedule(date(2026, 10, 18))

        self.assertEqual([(e.show.id, e.episode.id) for e in broadcast], [(1, 10)])
        self.assertEqual([(e.show.id, e.episode.id) for e in web], [(2, 20)])
        self.assertEqual(self.upstream.requests[0].url.params.get("country"), "US")

    async def test_bad_entry_id_only_drops_that_entry(self) -> None:
        self.upstream.schedule["2026-10-18"] = [
            schedule_entry({"id": "\u00b2", "name": "Broken"}, 10, airdate="2026-10-18"),
            schedule_entry(tvmaze_show(3, "Fine"), 11, airdate="2026-10-18"),
        ]

        entries = await self.tvmaze.schedule(date(2026, 10, 18))

        self.assertEqual([e.show.id for e in entries], [3])

    async def test_failed_feeds_are_empty(self) -> None:
        self.upstream.failing_hosts.add("api.tvmaze.com")

        self.assertEqual(await self.tvmaze.schedule(date(2026, 10, 18)), [])
        self.assertEqual(await self.tvmaze.search_shows("anything"), [])
        self.assertIsNone(await self.tvmaze.show_with_episodes(1))
        self.assertIsNone(await self.tvmaze.lookup_by_imdb("tt1"))


class TMDBClientTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.upstream = FakeUpstream()
        self.client = self.upstream.client()

    async def asyncTearDown(self) -> None:
        await self.client.aclose()

    def _pages(self, total_pages: int, count: int) -> None:
        for page in range(1, count + 1):
            self.upstream.discover_pages[page] = {
                "page": page,
                "results": [tmdb_item(page * 100, f"Show {page}")],
                "total_pages": total_pages,
            }

    async def test_page_cap_stops_pagination(self) -> None:
        self._pages(total_pages=5, count=5)
        tmdb = TMDBClient(self.client, "test-key", max_pages=2)

        items = await tmdb.discover(date(2026, 10, 13), date(2026, 10, 19))

        self.assertEqual([item.id for item in items], [100, 200])
        self.assertEqual(self.upstream.paths().count("/3/discover/tv"), 2)
        params = self.upstream.requests[0].url.params
        self.assertEqual(params.get("air_date.gte"), "2026-10-13")
        self.assertEqual(params.get("air_date.lte"), "2026-10-19")
        self.assertEqual(params.get("sort_by"), "first_air_date.desc")

    async def test_total_pages_stops_pagination(self) -> None:
        self._pages(total_pages=1, count=3)
        tmdb = TMDBClient(self.client, "test-key", max_pages=3)

        items = await tmdb.discover(date(2026, 10, 13), date(2026, 10, 19))

        self.assertEqual(len(items), 1)
        self.assertEqual(self.upstream.paths().count("/3/discover/tv"), 1)

    async def test_empty_page_stops_pagination(self) -> None:
        tmdb = TMDBClient(self.client, "test-key", max_pages=3)

        self.assertEqual(await tmdb.discover(date(2026, 10, 13), date(2026, 10, 19)), [])
        self.assertEqual(self.upstream.paths().count("/3/discover/tv"), 1)

    async def test_without_api_key_nothing_is_requested(self) -> None:
        tmdb = TMDBClient(self.client, "")

        self.assertFalse(tmdb.enabled)
        self.assertEqual(await tmdb.discover(date(2026, 10, 13), date(2026, 10, 19)), [])
        self.assertIsNone(await tmdb.imdb_id(1))
        self.assertEqual(self.upstream.requests, [])

    async def test_imdb_id(self) -> None:
        self.upstream.external_ids[5] = "tt0000005"
        tmdb = TMDBClient(self.client, "test-key")

        self.assertEqual(await tmdb.imdb_id(5), "tt0000005")
        self.assertIsNone(await tmdb.imdb_id(6))


if __name__ == "__main__":
    unittest.main()
