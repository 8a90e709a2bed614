"""Trailer lookup, per-session trailer cache and the trailer modal"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..config import settings
from ..exceptions import ParseError, TrailerUnavailable, TransportError
from ..schemas.movie import TrailerResponse, Video
from ..services.log_service import log_service
from ..services.tmdb_service import TMDBService


class TrailerStatus(str, Enum):
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class TrailerLookup:
    """Cached outcome of a trailer lookup"""

    movie_id: int
    status: TrailerStatus
    key: Optional[str] = None

    @property
    def embed_url(self) -> Optional[str]:
        if not self.key:
            return None
        return embed_url(self.key)

    def to_response(self) -> TrailerResponse:
        return TrailerResponse(
            movie_id=self.movie_id,
            status=self.status.value,
            key=self.key,
            embed_url=self.embed_url,
        )


def embed_url(key: str) -> str:
    """YouTube embed URL that autoplays muted"""
    return f"{settings.YOUTUBE_EMBED_URL.rstrip('/')}/{key}?autoplay=1&mute=1"


def select_trailer(videos: Iterable[Video]) -> Optional[str]:
    """
    Pick the YouTube key to play.

    First YouTube video typed Trailer wins; otherwise the first YouTube
    video of any type. Entries without a key are skipped.
    """
    youtube = [video for video in videos if video.site == "YouTube" and video.key]
    for video in youtube:
        if video.type == "Trailer":
            return video.key
    if youtube:
        return youtube[0].key
    return None


async def find_trailer_key(tmdb: TMDBService, movie_id: int) -> str:
    """Fetch videos for a movie and select its trailer, or raise TrailerUnavailable"""
    videos = await tmdb.get_movie_videos(movie_id)
    key = select_trailer(videos)
    if not key:
        raise TrailerUnavailable(movie_id)
    return key


class TrailerCache:
    """
    Keyed trailer cache: movie id -> resolved key | unavailable | unresolved.

    Unavailable is terminal for as long as the entry lives. Entries are
    dropped with forget()/retain() when their cards go away and all of them
    with clear() when the session ends.
    """

    def __init__(self, tmdb: TMDBService):
        self.tmdb = tmdb
        self._entries: Dict[int, TrailerLookup] = {}
        self._pending: Dict[int, asyncio.Task] = {}

    def get(self, movie_id: int) -> TrailerLookup:
        return self._entries.get(
            movie_id, TrailerLookup(movie_id, TrailerStatus.UNRESOLVED)
        )

    def is_loading(self, movie_id: int) -> bool:
        return movie_id in self._pending

    async def resolve(self, movie_id: int) -> TrailerLookup:
        """Return the cached lookup, fetching it on first request"""
        cached = self._entries.get(movie_id)
        if cached is not None:
            return cached

        task = self._pending.get(movie_id)
        if task is None:
            task = asyncio.create_task(self._lookup(movie_id))
            self._pending[movie_id] = task
        return await asyncio.shield(task)

    async def _lookup(self, movie_id: int) -> TrailerLookup:
        task = asyncio.current_task()
        try:
            lookup = await self._fetch(movie_id)
        finally:
            # retain()/forget() may have dropped this lookup while it ran
            owned = self._pending.get(movie_id) is task
            if owned:
                del self._pending[movie_id]
        if owned:
            self._entries[movie_id] = lookup
        return lookup

    async def _fetch(self, movie_id: int) -> TrailerLookup:
        try:
            key = await find_trailer_key(self.tmdb, movie_id)
        except TrailerUnavailable as e:
            log_service.warning(str(e))
            return TrailerLookup(movie_id, TrailerStatus.UNAVAILABLE)
        except (TransportError, ParseError) as e:
            log_service.error(f"Error fetching trailer for movie {movie_id}: {e}")
            return TrailerLookup(movie_id, TrailerStatus.UNAVAILABLE)
        return TrailerLookup(movie_id, TrailerStatus.RESOLVED, key)

    def forget(self, movie_id: int):
        self._entries.pop(movie_id, None)
        self._pending.pop(movie_id, None)

    def retain(self, movie_ids: List[int]):
        """Keep only entries and pending lookups for the given movies"""
        keep = set(movie_ids)
        for movie_id in list(self._entries):
            if movie_id not in keep:
                del self._entries[movie_id]
        for movie_id in list(self._pending):
            if movie_id not in keep:
                del self._pending[movie_id]

    def clear(self):
        for task in self._pending.values():
            task.cancel()
        self._pending.clear()
        self._entries.clear()


class TrailerModal:
    """Modal player state; only backdrop and close clicks dismiss it"""

    def __init__(self):
        self.visible = False
        self.movie_id: Optional[int] = None

    def open(self, movie_id: int):
        self.visible = True
        self.movie_id = movie_id

    def close(self):
        self.visible = False
        self.movie_id = None

    def click(self, target: str) -> bool:
        """Handle a click inside the modal; returns True when it closed"""
        if target in ("backdrop", "close"):
            self.close()
            return True
        # Clicks on the player content stop here
        return False
