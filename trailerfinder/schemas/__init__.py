"""Pydantic schemas for validation"""

from .movie import (
    MovieCard,
    MovieList,
    MovieSummary,
    TrailerResponse,
    TrendingEntry,
    Video,
)
from .session import (
    ModalClick,
    ModalState,
    RankedTrendingEntry,
    ScrollEvent,
    SearchUpdate,
    SentinelEvent,
    SentinelResult,
    SessionState,
)

__all__ = [
    "MovieSummary",
    "MovieCard",
    "MovieList",
    "Video",
    "TrailerResponse",
    "TrendingEntry",
    "RankedTrendingEntry",
    "ModalState",
    "SessionState",
    "SearchUpdate",
    "SentinelEvent",
    "SentinelResult",
    "ScrollEvent",
    "ModalClick",
]
