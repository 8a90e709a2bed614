import asyncio
import tempfile
import unittest

from fakes import make_session_factory

from trailerfinder.schemas.movie import MovieSummary
from trailerfinder.services.trending_service import TrendingService, normalize_query


class NormalizeQueryTests(unittest.TestCase):
    def test_normalize(self):
        self.assertEqual(normalize_query("  The   Dark KNIGHT "), "the dark knight")
        self.assertEqual(normalize_query(""), "")


class TrendingServiceTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.engine, factory = await make_session_factory(self.tmpdir.name)
        self.trending = TrendingService(factory, default_limit=5)
        self.batman = MovieSummary(id=268, title="Batman", poster_path="/bat.jpg")
        self.alien = MovieSummary(id=348, title="Alien")

    async def asyncTearDown(self):
        await self.engine.dispose()
        self.tmpdir.cleanup()

    async def test_first_search_creates_counter(self):
        await self.trending.record_search("Batman", self.batman, "https://img/bat.jpg")

        entries = await self.trending.get_trending()
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].search_term, "batman")
        self.assertEqual(entries[0].search_count, 1)
        self.assertEqual(entries[0].movie_id, 268)
        self.assertEqual(entries[0].poster_url, "https://img/bat.jpg")

    async def test_normalized_queries_share_a_counter(self):
        await self.trending.record_search("batman", self.batman)
        await self.trending.record_search("  BatMan ", self.batman)
        await self.trending.record_search("batman", self.alien)

        entries = await self.trending.get_trending()
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].search_count, 3)
        # Seeded by the first search only
        self.assertEqual(entries[0].title, "Batman")

    async def test_leaderboard_order_and_limit(self):
        for _ in range(3):
            await self.trending.record_search("alien", self.alien)
        await self.trending.record_search("batman", self.batman)
        for index in range(6):
            await self.trending.record_search(f"movie {index}", self.batman)

        entries = await self.trending.get_trending()
        self.assertEqual(len(entries), 5)
        self.assertEqual(entries[0].search_term, "alien")
        self.assertEqual(entries[0].search_count, 3)

        top_two = await self.trending.get_trending(2)
        self.assertEqual(len(top_two), 2)

    async def test_concurrent_first_searches_count_twice(self):
        await asyncio.gather(
            self.trending.record_search("dune", self.alien),
            self.trending.record_search("dune", self.alien),
        )
        entries = await self.trending.get_trending()
        self.assertEqual(entries[0].search_count, 2)

    async def test_blank_query_is_not_recorded(self):
        await self.trending.record_search("   ", self.batman)
        self.assertEqual(await self.trending.get_trending(), [])


if __name__ == "__main__":
    unittest.main()
