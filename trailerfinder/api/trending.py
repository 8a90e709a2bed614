"""Trending leaderboard API routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..schemas.movie import TrendingEntry
from ..services.log_service import log_service
from ..services.trending_service import TrendingService

router = APIRouter(prefix="/api/trending", tags=["trending"])


def get_trending_service(request: Request) -> TrendingService:
    """Get the shared trending service instance"""
    return request.app.state.trending


@router.get("", response_model=List[TrendingEntry])
async def trending_movies(
    limit: Optional[int] = Query(None, ge=1, le=50),
    trending: TrendingService = Depends(get_trending_service),
):
    """Most searched movies, highest count first"""
    try:
        return await trending.get_trending(limit)
    except Exception as e:
        log_service.error(f"Error loading trending movies: {e}")
        raise HTTPException(status_code=500, detail="Failed to load trending movies")
