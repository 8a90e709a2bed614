import asyncio
import unittest

from fakes import FakeCatalog, FakeTrending, movie, settle, trending_entry

from trailerfinder.config import SearchRacePolicy
from trailerfinder.core.orchestrator import FetchOrchestrator
from trailerfinder.core.state import FETCH_ERROR_MESSAGE, FetchStatus, ViewStateMachine
from trailerfinder.schemas.movie import MovieSummary


class FetchOrchestratorTests(unittest.IsolatedAsyncioTestCase):
    policy = SearchRacePolicy.LATEST_WINS

    async def asyncSetUp(self):
        self.catalog = FakeCatalog()
        self.catalog.pages = {
            1: [movie(1), movie(2)],
            2: [movie(3), movie(4)],
            3: [movie(5), movie(6)],
        }
        self.catalog.search_results = {
            "batman": [movie(268, "Batman", "/bat.jpg"), movie(272, "Batman Begins")],
            "slow": [movie(900, "Slow Result")],
            "fast": [movie(901, "Fast Result")],
        }
        self.tmdb = self.catalog.service()
        self.trending = FakeTrending()
        self.machine = ViewStateMachine()
        self.replaced = []
        self.orchestrator = FetchOrchestrator(
            self.machine,
            self.tmdb,
            self.trending,
            policy=self.policy,
            on_replace=self.replaced.append,
        )

    async def asyncTearDown(self):
        await self.tmdb.close()

    @property
    def state(self):
        return self.machine.state

    def ids(self):
        return [m.id for m in self.state.movies]

    async def test_search_replaces_list_and_resets_page(self):
        await self.orchestrator.fetch_movies("", reset_page=True)
        await self.orchestrator.fetch_movies("", reset_page=False)
        self.assertEqual(self.state.page, 3)

        self.machine.commit_term("batman")
        await self.orchestrator.fetch_movies("batman", reset_page=True)

        self.assertEqual(self.ids(), [268, 272])
        self.assertEqual(self.state.page, 1)
        self.assertIs(self.state.status, FetchStatus.IDLE)
        request = self.catalog.calls("/search/movie")[0]
        self.assertEqual(request.url.params["query"], "batman")
        self.assertEqual(request.url.params["language"], "en-US")

    async def test_discover_appends_and_advances_cursor(self):
        self.state.page = 3
        self.machine.replace_movies([MovieSummary(id=10), MovieSummary(id=11)])

        await self.orchestrator.fetch_movies("", reset_page=False)

        self.assertEqual(self.ids(), [10, 11, 5, 6])
        self.assertEqual(self.state.page, 4)
        request = self.catalog.calls("/discover/movie")[0]
        self.assertEqual(request.url.params["page"], "3")
        self.assertEqual(request.url.params["sort_by"], "popularity.desc")

    async def test_discover_reset_replaces_but_still_advances(self):
        self.machine.replace_movies([MovieSummary(id=10)])

        await self.orchestrator.fetch_movies("", reset_page=True)

        self.assertEqual(self.ids(), [1, 2])
        self.assertEqual(self.state.page, 2)
        self.assertEqual(len(self.replaced), 1)

    async def test_empty_search_clears_list_without_trending_write(self):
        self.machine.replace_movies([MovieSummary(id=10)])

        await self.orchestrator.fetch_movies("zzzz", reset_page=True)
        await self.orchestrator.drain()

        self.assertEqual(self.state.movies, [])
        self.assertEqual(self.trending.recorded, [])

    async def test_search_records_only_top_result_once(self):
        await self.orchestrator.fetch_movies("batman", reset_page=True)
        await self.orchestrator.drain()

        self.assertEqual(len(self.trending.recorded), 1)
        query, top, poster_url = self.trending.recorded[0]
        self.assertEqual(query, "batman")
        self.assertEqual(top.id, 268)
        self.assertEqual(poster_url, "https://image.tmdb.org/t/p/w500/bat.jpg")

    async def test_failure_keeps_list_and_sets_fixed_message(self):
        await self.orchestrator.fetch_movies("", reset_page=True)
        before = list(self.state.movies)

        self.catalog.fail_status = 500
        await self.orchestrator.fetch_movies("", reset_page=False)

        self.assertEqual(self.state.movies, before)
        self.assertEqual(self.state.page, 2)
        self.assertIs(self.state.status, FetchStatus.ERROR)
        self.assertEqual(self.state.error_message, FETCH_ERROR_MESSAGE)

        self.catalog.fail_status = None
        await self.orchestrator.fetch_movies("", reset_page=False)

        self.assertEqual(self.state.error_message, "")
        self.assertIs(self.state.status, FetchStatus.IDLE)
        self.assertEqual(self.ids(), [1, 2, 3, 4])

    async def test_malformed_body_is_reported_like_transport_error(self):
        self.catalog.malformed = True
        await self.orchestrator.fetch_movies("batman", reset_page=True)

        self.assertEqual(self.state.movies, [])
        self.assertEqual(self.state.error_message, FETCH_ERROR_MESSAGE)

    async def test_trending_write_failure_does_not_touch_view(self):
        self.trending.fail_writes = True

        await self.orchestrator.fetch_movies("batman", reset_page=True)
        await self.orchestrator.drain()

        self.assertIs(self.state.status, FetchStatus.IDLE)
        self.assertEqual(self.state.error_message, "")
        self.assertEqual(self.ids(), [268, 272])

    async def test_fetch_log_carries_generation(self):
        with self.assertLogs("trailerfinder.fetch", level="DEBUG") as captured:
            await self.orchestrator.fetch_movies("", reset_page=True)
        tagged = [r for r in captured.records if r.getMessage() == "Discover page 1"]
        self.assertEqual(tagged[0].generation, self.state.generation)

    async def test_load_trending(self):
        self.trending.entries = [trending_entry(1, 9), trending_entry(2, 4)]
        await self.orchestrator.load_trending()
        self.assertEqual([e.search_count for e in self.state.trending], [9, 4])

    async def test_load_trending_failure_keeps_previous_entries(self):
        self.trending.entries = [trending_entry(1, 9)]
        await self.orchestrator.load_trending()
        self.trending.fail_reads = True
        await self.orchestrator.load_trending()
        self.assertEqual(len(self.state.trending), 1)

    async def _race(self):
        """Start a slow search, finish a fast one, then release the slow one"""
        gate = asyncio.Event()
        self.catalog.gates["slow"] = gate
        slow = asyncio.create_task(self.orchestrator.fetch_movies("slow", reset_page=True))
        await settle()
        await self.orchestrator.fetch_movies("fast", reset_page=True)
        gate.set()
        await slow
        await self.orchestrator.drain()

    async def test_latest_wins_discards_stale_search(self):
        await self._race()

        self.assertEqual(self.ids(), [901])
        self.assertIs(self.state.status, FetchStatus.IDLE)
        self.assertEqual([q for q, _, _ in self.trending.recorded], ["fast"])

    async def test_schedule_fetch_cancels_previous_task(self):
        self.catalog.gates["slow"] = asyncio.Event()
        first = self.orchestrator.schedule_fetch("slow", reset_page=True)
        await settle()
        second = self.orchestrator.schedule_fetch("fast", reset_page=True)
        await second
        await settle()

        self.assertTrue(first.cancelled())
        self.assertEqual(self.ids(), [901])
        self.assertIs(self.state.status, FetchStatus.IDLE)
        self.assertEqual(self.orchestrator.in_flight, 0)


class LastWriteWinsTests(FetchOrchestratorTests):
    policy = SearchRacePolicy.LAST_WRITE_WINS

    async def test_latest_wins_discards_stale_search(self):
        self.skipTest("latest_wins only")

    async def test_schedule_fetch_cancels_previous_task(self):
        self.skipTest("latest_wins only")

    async def test_stale_search_overwrites_newer_results(self):
        await self._race()

        self.assertEqual(self.ids(), [900])
        self.assertIs(self.state.status, FetchStatus.IDLE)
        self.assertEqual(sorted(q for q, _, _ in self.trending.recorded), ["fast", "slow"])

    async def test_cancel_stops_every_scheduled_fetch(self):
        self.catalog.gates["slow"] = asyncio.Event()
        self.catalog.gates["fast"] = asyncio.Event()
        first = self.orchestrator.schedule_fetch("slow", reset_page=True)
        second = self.orchestrator.schedule_fetch("fast", reset_page=True)
        await settle()

        self.orchestrator.cancel()
        await settle()

        self.assertTrue(first.cancelled())
        self.assertTrue(second.cancelled())
        self.assertEqual(self.orchestrator.in_flight, 0)
        self.assertIs(self.state.status, FetchStatus.IDLE)
        self.assertEqual(self.trending.recorded, [])

    async def test_stays_loading_while_any_fetch_is_outstanding(self):
        gate = asyncio.Event()
        self.catalog.gates["slow"] = gate
        slow = self.orchestrator.schedule_fetch("slow", reset_page=True)
        await settle()
        await self.orchestrator.fetch_movies("fast", reset_page=True)

        self.assertIs(self.state.status, FetchStatus.LOADING)
        gate.set()
        await slow
        self.assertIs(self.state.status, FetchStatus.IDLE)


if __name__ == "__main__":
    unittest.main()
