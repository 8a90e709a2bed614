"""Viewer session schemas"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .movie import MovieCard, TrailerResponse, TrendingEntry


class RankedTrendingEntry(TrendingEntry):
    """Trending entry with its 1-based leaderboard position"""

    rank: int


class ModalState(BaseModel):
    """Trailer modal as shown to the viewer"""

    visible: bool = False
    movie_id: Optional[int] = None
    loading: bool = False
    trailer: Optional[TrailerResponse] = None


class SessionState(BaseModel):
    """Snapshot of one viewer's discovery state"""

    session_id: str
    search_term: str
    committed_term: str
    mode: str  # 'search' or 'discover'
    page: int
    status: str
    error_message: str
    movies: List[MovieCard]
    trending: List[RankedTrendingEntry]
    sentinel_observed: bool
    show_scroll_top: bool
    modal: ModalState


class SearchUpdate(BaseModel):
    """Keystroke update for the search box"""

    term: str = ""


class SentinelEvent(BaseModel):
    """Intersection report for the end-of-list sentinel"""

    ratio: float = Field(1.0, ge=0.0, le=1.0)


class SentinelResult(BaseModel):
    """Whether a sentinel report started a page fetch"""

    triggered: bool
    state: SessionState


class ScrollEvent(BaseModel):
    """Vertical scroll offset of the page"""

    offset: float = Field(0.0, ge=0.0)


class ModalClick(BaseModel):
    """Click inside the trailer modal"""

    target: str = Field(..., pattern="^(backdrop|close|content)$")
