"""Movie catalog API routes (search, discover, trailers)"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..core.trailers import TrailerLookup, TrailerStatus, find_trailer_key
from ..exceptions import ParseError, TrailerUnavailable, TransportError
from ..schemas.movie import MovieList, TrailerResponse
from ..services.log_service import log_service
from ..services.tmdb_service import TMDBService

router = APIRouter(prefix="/api/movies", tags=["movies"])


def get_tmdb_service(request: Request) -> TMDBService:
    """Get the shared TMDB service instance"""
    tmdb = getattr(request.app.state, "tmdb", None)
    if tmdb is None:
        raise HTTPException(status_code=503, detail="TMDB API token not configured")
    return tmdb


@router.get("/search", response_model=MovieList)
async def search_movies(
    query: str = Query(..., min_length=1),
    tmdb: TMDBService = Depends(get_tmdb_service),
):
    """Search for movies by title"""
    try:
        movies = await tmdb.search_movies(query)
    except (TransportError, ParseError) as e:
        raise HTTPException(status_code=502, detail=str(e))

    return MovieList(results=[tmdb.to_card(movie) for movie in movies])


@router.get("/discover", response_model=MovieList)
async def discover_movies(
    page: int = Query(1, ge=1),
    tmdb: TMDBService = Depends(get_tmdb_service),
):
    """Get one page of popular movies"""
    try:
        movies = await tmdb.discover_movies(page)
    except (TransportError, ParseError) as e:
        raise HTTPException(status_code=502, detail=str(e))

    return MovieList(results=[tmdb.to_card(movie) for movie in movies], page=page)


@router.get("/{movie_id}/trailer", response_model=TrailerResponse)
async def movie_trailer(movie_id: int, tmdb: TMDBService = Depends(get_tmdb_service)):
    """Find the YouTube trailer of a movie"""
    try:
        key = await find_trailer_key(tmdb, movie_id)
    except TrailerUnavailable as e:
        log_service.warning(str(e))
        return TrailerLookup(movie_id, TrailerStatus.UNAVAILABLE).to_response()
    except (TransportError, ParseError) as e:
        raise HTTPException(status_code=502, detail=str(e))

    return TrailerLookup(movie_id, TrailerStatus.RESOLVED, key).to_response()
