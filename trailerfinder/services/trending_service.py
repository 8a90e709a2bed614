"""Trending leaderboard service (per-query search counters)"""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from ..database import AsyncSessionLocal
from ..models.search_metric import SearchMetric
from ..schemas.movie import MovieSummary, TrendingEntry
from .log_service import log_service


def normalize_query(query: str) -> str:
    """Counter key for a search: trimmed, lower-cased, single-spaced"""
    return " ".join((query or "").split()).lower()


class TrendingService:
    """Read the most-searched leaderboard and record completed searches"""

    def __init__(self, session_factory=None, default_limit: int = 5):
        self.session_factory = session_factory or AsyncSessionLocal
        self.default_limit = default_limit

    async def get_trending(self, limit: Optional[int] = None) -> List[TrendingEntry]:
        """Most searched entries, highest count first"""
        limit = limit or self.default_limit
        async with self.session_factory() as db:
            result = await db.execute(
                select(SearchMetric)
                .order_by(
                    SearchMetric.count.desc(),
                    SearchMetric.updated_at.desc(),
                    SearchMetric.id.desc(),
                )
                .limit(limit)
            )
            metrics = result.scalars().all()

        return [
            TrendingEntry(
                id=metric.id,
                search_term=metric.search_term,
                movie_id=metric.movie_id,
                title=metric.title,
                poster_url=metric.poster_url,
                search_count=metric.count,
            )
            for metric in metrics
        ]

    async def _increment(self, db, term: str) -> bool:
        result = await db.execute(
            update(SearchMetric)
            .where(SearchMetric.search_term == term)
            .values(count=SearchMetric.count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def record_search(
        self, query: str, movie: MovieSummary, poster_url: Optional[str] = None
    ):
        """
        Count one search for query.

        Increments the counter of the normalized query, or creates it seeded
        with the movie that topped the results.
        """
        term = normalize_query(query)
        if not term:
            return

        async with self.session_factory() as db:
            if await self._increment(db, term):
                await db.commit()
                log_service.info(f"Incremented search count for '{term}'")
                return

            db.add(
                SearchMetric(
                    search_term=term,
                    count=1,
                    movie_id=movie.id,
                    title=movie.title,
                    poster_url=poster_url,
                )
            )
            try:
                await db.commit()
                log_service.info(f"Started search count for '{term}' ({movie.title})")
            except IntegrityError:
                # Another writer created the row first
                await db.rollback()
                await self._increment(db, term)
                await db.commit()
