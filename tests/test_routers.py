import asyncio
import unittest

from fastapi.testclient import TestClient
from feed_fixtures import FakeUpstream, episode, tvmaze_show

from tvcatalog.config import CustomSettings
from tvcatalog.dependencies import get_catalog_pipeline, get_http_client, get_settings
from tvcatalog.main import app
from tvcatalog.schemas import CatalogEntry


class StubPipeline:
    def __init__(self, entries):
        self.entries = entries
        self.calls = []

    async def run(self, as_of=None):
        self.calls.append(as_of)
        return self.entries


class RoutesTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.upstream = FakeUpstream()
        self.config = CustomSettings(tmdb_api_key="", catalog_id="recent_shows")
        self.pipeline = StubPipeline([
            CatalogEntry(
                id="tvmaze:1",
                name="The Great Bake Off",
                description="Baking.",
                poster="m.jpg",
                background="o.jpg",
                airstamp="2026-10-16T00:00:00+00:00",
            )
        ])
        app.dependency_overrides[get_settings] = lambda: self.config
        self.http_client = self.upstream.client()
        app.dependency_overrides[get_http_client] = lambda: self.http_client
        app.dependency_overrides[get_catalog_pipeline] = lambda: self.pipeline
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        asyncio.run(self.http_client.aclose())

    def test_manifest(self) -> None:
        response = self.client.get("/manifest.json")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["catalogs"], [
            {"type": "series", "id": "recent_shows", "name": self.config.catalog_name, "extra": []}
        ])
        self.assertEqual(body["resources"], ["catalog", "meta"])
        self.assertEqual(body["idPrefixes"], ["tvmaze"])

    def test_catalog(self) -> None:
        response = self.client.get("/catalog/series/recent_shows.json")

        self.assertEqual(response.status_code, 200)
        metas = response.json()["metas"]
        self.assertEqual([meta["id"] for meta in metas], ["tvmaze:1"])
        self.assertEqual(metas[0]["type"], "series")
        self.assertEqual(len(self.pipeline.calls), 1)
        self.assertIsNotNone(self.pipeline.calls[0].tzinfo)

    def test_unknown_catalog(self) -> None:
        response = self.client.get("/catalog/series/other.json")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.pipeline.calls, [])

    def test_meta_projects_episodes(self) -> None:
        self.upstream.shows[1] = tvmaze_show(
            1,
            "The Great Bake Off",
            image={"medium": "m.jpg", "original": "o.jpg"},
            episodes=[
                episode(10, airdate="2026-10-16", name="Bread Week", summary="<p>Loaves.</p>"),
                episode(11, season=1, number=2),
            ],
        )

        response = self.client.get("/meta/series/tvmaze:1.json")

        self.assertEqual(response.status_code, 200)
        meta = response.json()["meta"]
        self.assertEqual(meta["id"], "tvmaze:1")
        self.assertEqual(meta["poster"], "o.jpg")
        self.assertEqual(meta["description"], "The Great Bake Off summary.")
        self.assertEqual(meta["videos"], [
            {
                "id": "tvmaze:10",
                "title": "Bread Week",
                "season": 1,
                "episode": 1,
                "released": "2026-10-16",
                "overview": "Loaves.",
            },
            {
                "id": "tvmaze:11",
                "title": "Episode 2",
                "season": 1,
                "episode": 2,
                "released": None,
                "overview": "",
            },
        ])

    def test_meta_for_unknown_show(self) -> None:
        response = self.client.get("/meta/series/tvmaze:404.json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["meta"]["name"], "Unknown")
        self.assertEqual(response.json()["meta"]["videos"], [])

    def test_meta_with_invalid_id(self) -> None:
        self.assertEqual(self.client.get("/meta/series/tvmaze:abc.json").status_code, 404)

    def test_meta_with_non_ascii_digit_id(self) -> None:
        response = self.client.get("/meta/series/tvmaze:%C2%B2.json")

        self.assertEqual(response.status_code, 404)
        self.assertNotIn("/shows/", "".join(self.upstream.paths()))

    def test_health(self) -> None:
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
