"""Per-viewer discovery controller"""

from typing import List, Optional

from ..config import SearchRacePolicy, settings
from ..schemas.movie import MovieSummary
from ..schemas.session import ModalState, RankedTrendingEntry, SessionState
from ..services.log_service import log_service
from ..services.tmdb_service import TMDBService
from ..services.trending_service import TrendingService
from .debouncer import QueryDebouncer
from .orchestrator import FetchOrchestrator
from .scroll import InfiniteScrollTrigger
from .state import ViewStateMachine
from .trailers import TrailerCache, TrailerLookup, TrailerModal


class DiscoveryController:
    """
    Wires debouncer, fetch orchestrator, scroll trigger, trending and trailers
    around one view state.

    keystroke -> debounce -> commit term -> reset page -> fetch -> merge
    """

    def __init__(
        self,
        session_id: str,
        tmdb: TMDBService,
        trending: TrendingService,
        debounce_seconds: float = None,
        policy: SearchRacePolicy = None,
        trending_limit: int = None,
    ):
        self.session_id = session_id
        self.tmdb = tmdb
        self.machine = ViewStateMachine()
        self.trailers = TrailerCache(tmdb)
        self.modal = TrailerModal()
        self.trending_limit = trending_limit or settings.TRENDING_LIMIT
        self.orchestrator = FetchOrchestrator(
            self.machine,
            tmdb,
            trending,
            policy=policy or settings.SEARCH_RACE_POLICY,
            on_replace=self._cards_replaced,
        )
        self.debouncer = QueryDebouncer(
            settings.SEARCH_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds,
            self._commit,
        )
        self.scroll = InfiniteScrollTrigger(self.machine.state, self._next_page)
        self.mounted = False

    @property
    def state(self):
        return self.machine.state

    async def mount(self):
        """Load the leaderboard and the first discover page"""
        self.mounted = True
        self.scroll.observe()
        await self.orchestrator.load_trending(self.trending_limit)
        self.orchestrator.schedule_fetch("", reset_page=True)
        log_service.info(f"Session {self.session_id} mounted")

    async def unmount(self):
        """Stop timers and observers, cancel the fetch and flush trending writes"""
        self.mounted = False
        self.debouncer.cancel()
        self.scroll.unobserve()
        self.orchestrator.cancel()
        self.trailers.clear()
        self.modal.close()
        await self.orchestrator.drain()
        log_service.info(f"Session {self.session_id} unmounted")

    def set_search_term(self, term: str):
        """Record a keystroke; the committed term follows after the quiet period"""
        self.machine.type_term(term)
        self.debouncer.push(term)

    def _commit(self, term: str):
        if not self.machine.commit_term(term):
            return
        self.scroll.sync()
        self.orchestrator.schedule_fetch(term, reset_page=True)

    def _next_page(self):
        self.orchestrator.schedule_fetch("", reset_page=False)

    def sentinel_visible(self, ratio: float = 1.0) -> bool:
        return self.scroll.notify(ratio)

    def scrolled_to(self, offset: float):
        self.machine.scrolled_to(offset)

    def _cards_replaced(self, movies: List[MovieSummary]):
        self.trailers.retain([movie.id for movie in movies])

    async def play_trailer(self, movie_id: int) -> TrailerLookup:
        """Open the modal and resolve the trailer on first request"""
        self.modal.open(movie_id)
        return await self.trailers.resolve(movie_id)

    def close_trailer(self):
        self.modal.close()

    def modal_click(self, target: str) -> bool:
        return self.modal.click(target)

    def _modal_state(self) -> ModalState:
        movie_id: Optional[int] = self.modal.movie_id
        if not self.modal.visible or movie_id is None:
            return ModalState()
        lookup = self.trailers.get(movie_id)
        return ModalState(
            visible=True,
            movie_id=movie_id,
            loading=self.trailers.is_loading(movie_id),
            trailer=lookup.to_response(),
        )

    def snapshot(self) -> SessionState:
        state = self.state
        return SessionState(
            session_id=self.session_id,
            search_term=state.search_term,
            committed_term=state.committed_term,
            mode=state.mode,
            page=state.page,
            status=state.status.value,
            error_message=state.error_message,
            movies=[self.tmdb.to_card(movie) for movie in state.movies],
            trending=[
                RankedTrendingEntry(**entry.model_dump(), rank=index + 1)
                for index, entry in enumerate(state.trending)
            ],
            sentinel_observed=self.scroll.observing,
            show_scroll_top=state.show_scroll_top,
            modal=self._modal_state(),
        )
