"""Registry of live viewer sessions"""

import secrets
import time
from typing import Callable, Dict, List, Optional

from ..config import SearchRacePolicy, settings
from ..services.log_service import log_service
from ..services.tmdb_service import TMDBService
from ..services.trending_service import TrendingService
from .controller import DiscoveryController


class SessionRegistry:
    """
    Create, look up and tear down discovery controllers.

    Sessions not looked up for session_ttl seconds are unmounted the next
    time the registry is touched. A ttl of 0 keeps them until DELETE.
    """

    def __init__(
        self,
        tmdb: TMDBService,
        trending: TrendingService,
        debounce_seconds: float = None,
        policy: SearchRacePolicy = None,
        trending_limit: int = None,
        session_ttl: float = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.tmdb = tmdb
        self.trending = trending
        self.debounce_seconds = debounce_seconds
        self.policy = policy
        self.trending_limit = trending_limit
        self.session_ttl = settings.SESSION_TTL if session_ttl is None else session_ttl
        self.clock = clock
        self._sessions: Dict[str, DiscoveryController] = {}
        self._last_seen: Dict[str, float] = {}

    def __len__(self):
        return len(self._sessions)

    async def create(self) -> DiscoveryController:
        await self.evict_idle()
        session_id = secrets.token_urlsafe(16)
        controller = DiscoveryController(
            session_id,
            self.tmdb,
            self.trending,
            debounce_seconds=self.debounce_seconds,
            policy=self.policy,
            trending_limit=self.trending_limit,
        )
        self._sessions[session_id] = controller
        self._last_seen[session_id] = self.clock()
        await controller.mount()
        return controller

    async def get(self, session_id: str) -> Optional[DiscoveryController]:
        if session_id in self._sessions and self._expired(session_id):
            log_service.info(f"Session {session_id} expired")
            await self.close(session_id)
        controller = self._sessions.get(session_id)
        if controller is not None:
            self._last_seen[session_id] = self.clock()
        return controller

    def _expired(self, session_id: str) -> bool:
        if not self.session_ttl:
            return False
        return self.clock() - self._last_seen.get(session_id, 0) > self.session_ttl

    async def evict_idle(self) -> List[str]:
        """Unmount every session idle for longer than the ttl"""
        expired = [session_id for session_id in self._sessions if self._expired(session_id)]
        for session_id in expired:
            log_service.info(f"Session {session_id} expired")
            await self.close(session_id)
        return expired

    async def close(self, session_id: str) -> bool:
        controller = self._sessions.pop(session_id, None)
        self._last_seen.pop(session_id, None)
        if controller is None:
            return False
        await controller.unmount()
        return True

    async def close_all(self):
        """Tear down every session (server shutdown)"""
        for session_id in list(self._sessions):
            try:
                await self.close(session_id)
            except Exception as e:
                log_service.error(f"Failed to close session {session_id}: {e}")
