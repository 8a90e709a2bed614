"""View state record and its transitions"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ..exceptions import InvalidTransition
from ..schemas.movie import MovieSummary, TrendingEntry

FETCH_ERROR_MESSAGE = "Failed to fetch movies. Try again later."
SCROLL_TOP_OFFSET = 400


class FetchStatus(str, Enum):
    """Fetch lifecycle of the movie list"""

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


# LOADING -> LOADING happens when overlapping fetches are allowed to run
ALLOWED_TRANSITIONS = {
    FetchStatus.IDLE: {FetchStatus.LOADING},
    FetchStatus.ERROR: {FetchStatus.LOADING},
    FetchStatus.LOADING: {FetchStatus.IDLE, FetchStatus.ERROR, FetchStatus.LOADING},
}


@dataclass
class ViewState:
    """Everything one viewer sees, in one record"""

    search_term: str = ""
    committed_term: str = ""
    movies: List[MovieSummary] = field(default_factory=list)
    page: int = 1
    status: FetchStatus = FetchStatus.IDLE
    error_message: str = ""
    trending: List[TrendingEntry] = field(default_factory=list)
    show_scroll_top: bool = False
    generation: int = 0

    @property
    def is_searching(self) -> bool:
        return bool(self.committed_term)

    @property
    def is_loading(self) -> bool:
        return self.status is FetchStatus.LOADING

    @property
    def mode(self) -> str:
        return "search" if self.is_searching else "discover"


class ViewStateMachine:
    """
    Owns a ViewState and applies every mutation to it.

    Status changes go through _transition so an invalid sequence (for
    example settling a fetch that never started) raises InvalidTransition
    instead of silently corrupting the view.
    """

    def __init__(self, state: ViewState = None):
        self.state = state or ViewState()

    def _transition(self, target: FetchStatus):
        current = self.state.status
        if target not in ALLOWED_TRANSITIONS[current]:
            raise InvalidTransition(f"Cannot move from {current.value} to {target.value}")
        self.state.status = target

    def type_term(self, term: str):
        self.state.search_term = term

    def commit_term(self, term: str) -> bool:
        """Commit a debounced term; returns False when nothing changed"""
        if term == self.state.committed_term:
            return False
        self.state.committed_term = term
        self.state.page = 1
        return True

    def begin_fetch(self) -> int:
        """Enter LOADING, clear the error and hand out a request generation"""
        self._transition(FetchStatus.LOADING)
        self.state.error_message = ""
        self.state.generation += 1
        return self.state.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.state.generation

    def replace_movies(self, movies: List[MovieSummary]):
        self.state.movies = list(movies)

    def append_movies(self, movies: List[MovieSummary]):
        self.state.movies = self.state.movies + list(movies)

    def advance_page(self):
        self.state.page += 1

    def fail(self, message: str = FETCH_ERROR_MESSAGE):
        self.state.error_message = message

    def succeed(self):
        self.state.error_message = ""

    def settle(self):
        """Leave LOADING; ends in ERROR when the fetch recorded a failure"""
        self._transition(FetchStatus.ERROR if self.state.error_message else FetchStatus.IDLE)

    def set_trending(self, entries: List[TrendingEntry]):
        self.state.trending = list(entries)

    def scrolled_to(self, offset: float):
        self.state.show_scroll_top = offset > SCROLL_TOP_OFFSET
