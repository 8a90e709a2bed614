"""Movie fetch orchestration (search vs discover)"""

import asyncio
from functools import partial
from typing import Callable, List, Optional, Set

from ..config import SearchRacePolicy
from ..exceptions import ParseError, TransportError
from ..schemas.movie import MovieSummary
from ..services.log_service import log_service
from ..services.tmdb_service import TMDBService
from ..services.trending_service import TrendingService
from .state import FETCH_ERROR_MESSAGE, ViewStateMachine


class FetchOrchestrator:
    """
    Decide which endpoint to call and merge the response into the view.

    Each fetch gets a generation from the state machine. With
    SearchRacePolicy.LATEST_WINS only the newest generation may touch the
    view; older responses are dropped. With LAST_WRITE_WINS every response
    is applied in the order it arrives and the view leaves LOADING once no
    fetch is outstanding.
    """

    def __init__(
        self,
        machine: ViewStateMachine,
        tmdb: TMDBService,
        trending: TrendingService,
        policy: SearchRacePolicy = SearchRacePolicy.LATEST_WINS,
        on_replace: Optional[Callable[[List[MovieSummary]], None]] = None,
    ):
        self.machine = machine
        self.tmdb = tmdb
        self.trending = trending
        self.policy = policy
        self.on_replace = on_replace
        self._tasks: Set[asyncio.Task] = set()
        self._open: Set[int] = set()
        self._writes: Set[asyncio.Task] = set()

    @property
    def state(self):
        return self.machine.state

    @property
    def in_flight(self) -> int:
        return len(self._open)

    async def fetch_movies(self, query: str = "", reset_page: bool = False):
        """Fetch search results or the next discover page and merge them"""
        generation = self._start()
        await self._run(generation, query, reset_page)

    def schedule_fetch(self, query: str = "", reset_page: bool = False) -> asyncio.Task:
        """Run fetch_movies as a task; under latest_wins earlier ones are cancelled"""
        if self.policy is SearchRacePolicy.LATEST_WINS:
            self.cancel()
        generation = self._start()
        task = asyncio.create_task(self._run(generation, query, reset_page))
        # Covers tasks cancelled before their first step
        task.add_done_callback(partial(self._finished, generation))
        self._tasks.add(task)
        return task

    def cancel(self):
        """Cancel every fetch task still running"""
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    def _start(self) -> int:
        generation = self.machine.begin_fetch()
        self._open.add(generation)
        return generation

    def _finish(self, generation: int):
        if generation not in self._open:
            return
        self._open.discard(generation)
        if self.policy is SearchRacePolicy.LAST_WRITE_WINS:
            if not self._open:
                self.machine.settle()
        elif self.machine.is_current(generation):
            self.machine.settle()

    def _finished(self, generation: int, task: asyncio.Task):
        self._tasks.discard(task)
        self._finish(generation)

    def _accepts(self, generation: int) -> bool:
        if self.policy is SearchRacePolicy.LAST_WRITE_WINS:
            return True
        return self.machine.is_current(generation)

    async def _run(self, generation: int, query: str, reset_page: bool):
        searching = bool(query)
        page = self.state.page
        log_service.fetch(
            f"Search {query!r}" if searching else f"Discover page {page}",
            generation=generation,
        )
        try:
            if searching:
                movies = await self.tmdb.search_movies(query)
            else:
                movies = await self.tmdb.discover_movies(page)

            if not self._accepts(generation):
                log_service.fetch("Discarding stale response", generation=generation)
                return

            self.machine.succeed()
            if searching:
                self._replace(movies)
                if movies:
                    self._record_search(query, movies[0])
            else:
                if reset_page:
                    self._replace(movies)
                else:
                    self.machine.append_movies(movies)
                self.machine.advance_page()
        except (TransportError, ParseError) as e:
            log_service.error(f"Error fetching movies: {e}")
            if self._accepts(generation):
                self.machine.fail(FETCH_ERROR_MESSAGE)
        finally:
            self._finish(generation)

    def _replace(self, movies: List[MovieSummary]):
        self.machine.replace_movies(movies)
        if self.on_replace is not None:
            self.on_replace(movies)

    def _record_search(self, query: str, movie: MovieSummary):
        """Fire-and-forget trending increment for the top result"""
        task = asyncio.create_task(
            self.trending.record_search(query, movie, self.tmdb.poster_url(movie.poster_path))
        )
        self._writes.add(task)
        task.add_done_callback(self._write_done)

    def _write_done(self, task: asyncio.Task):
        self._writes.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            log_service.error(f"Error updating search count: {error}")

    async def load_trending(self, limit: Optional[int] = None):
        """Read the leaderboard; failures keep the current list"""
        try:
            entries = await self.trending.get_trending(limit)
        except Exception as e:
            log_service.error(f"Error loading trending movies: {e}")
            return
        self.machine.set_trending(entries)

    async def drain(self):
        """Wait for pending trending writes"""
        if self._writes:
            await asyncio.gather(*list(self._writes), return_exceptions=True)
