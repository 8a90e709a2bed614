"""TMDB API service"""

from typing import Dict, List, Optional

import httpx

from ..config import settings
from ..exceptions import ParseError, TransportError
from ..schemas.movie import MovieCard, MovieSummary, Video
from .log_service import log_service


class TMDBService:
    """The Movie Database API integration (bearer token auth)"""

    def __init__(self, api_token: str, client: httpx.AsyncClient = None):
        self.api_token = api_token
        self.base_url = settings.TMDB_BASE_URL.rstrip("/")
        self.image_base_url = settings.TMDB_IMAGE_BASE_URL.rstrip("/")
        self.language = settings.TMDB_LANGUAGE
        self.client = client or httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT)

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "accept": "application/json",
        }

    async def _request(self, endpoint: str, params: Dict = None) -> Dict:
        """Make request to TMDB API and return the decoded JSON object"""
        if params is None:
            params = {}

        params["language"] = self.language

        url = f"{self.base_url}/{endpoint}"
        log_service.fetch(f"GET {url} {params}")

        try:
            response = await self.client.get(url, params=params, headers=self.headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            log_service.error(f"TMDB API error: {e}")
            raise TransportError(
                f"TMDB answered {e.response.status_code} for {endpoint}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            log_service.error(f"TMDB API error: {e}")
            raise TransportError(f"TMDB request to {endpoint} failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            log_service.error(f"TMDB returned malformed JSON for {endpoint}: {e}")
            raise ParseError(f"Malformed response body from {endpoint}") from e

        if not isinstance(data, dict) or not isinstance(data.get("results", []), list):
            raise ParseError(f"Unexpected response shape from {endpoint}")

        return data

    def _parse_results(self, data: Dict, endpoint: str) -> List[MovieSummary]:
        try:
            return [MovieSummary(**item) for item in data.get("results") or []]
        except (TypeError, ValueError) as e:
            log_service.error(f"Could not parse movies from {endpoint}: {e}")
            raise ParseError(f"Malformed movie record from {endpoint}") from e

    async def search_movies(self, query: str) -> List[MovieSummary]:
        """Search for movies by title"""
        data = await self._request("search/movie", {"query": query})
        return self._parse_results(data, "search/movie")

    async def discover_movies(self, page: int = 1) -> List[MovieSummary]:
        """Get one page of the popularity-sorted discover feed"""
        data = await self._request(
            "discover/movie", {"sort_by": "popularity.desc", "page": page}
        )
        return self._parse_results(data, "discover/movie")

    async def get_movie_videos(self, movie_id: int) -> List[Video]:
        """Get videos (trailers, teasers, clips) attached to a movie"""
        data = await self._request(f"movie/{movie_id}/videos")
        try:
            return [
                Video(**item)
                for item in data.get("results") or []
                if isinstance(item, dict)
            ]
        except (TypeError, ValueError) as e:
            log_service.error(f"Could not parse videos for movie {movie_id}: {e}")
            raise ParseError(f"Malformed video record for movie {movie_id}") from e

    def poster_url(self, poster_path: Optional[str]) -> str:
        """Resolve a poster path against the image CDN, or the placeholder"""
        if not poster_path:
            return settings.POSTER_PLACEHOLDER
        return f"{self.image_base_url}/{poster_path.lstrip('/')}"

    def to_card(self, movie: MovieSummary) -> MovieCard:
        """Attach the display fields a movie card needs"""
        return MovieCard(
            **movie.model_dump(),
            poster_url=self.poster_url(movie.poster_path),
            rating=movie.rating_label,
            year=movie.release_year,
        )

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()
