"""Movie, trailer and trending schemas"""

from typing import List, Optional

from pydantic import BaseModel


class MovieSummary(BaseModel):
    """Movie record as returned by TMDB search/discover"""

    id: int
    title: str = ""
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    vote_average: Optional[float] = None
    original_language: Optional[str] = None

    class Config:
        frozen = True

    @property
    def rating_label(self) -> str:
        """Vote average to one decimal, or N/A when unrated"""
        if not self.vote_average:
            return "N/A"
        return f"{self.vote_average:.1f}"

    @property
    def release_year(self) -> str:
        if not self.release_date:
            return "N/A"
        return self.release_date.split("-")[0]


class MovieCard(MovieSummary):
    """Movie summary with display fields resolved"""

    poster_url: str
    rating: str
    year: str


class MovieList(BaseModel):
    """Movies returned by a proxy endpoint"""

    results: List[MovieCard]
    page: Optional[int] = None


class Video(BaseModel):
    """Entry of /movie/{id}/videos"""

    site: Optional[str] = None
    type: Optional[str] = None
    key: Optional[str] = None
    name: Optional[str] = None


class TrailerResponse(BaseModel):
    """Trailer lookup outcome for one movie"""

    movie_id: int
    status: str  # 'resolved' or 'unavailable'
    key: Optional[str] = None
    embed_url: Optional[str] = None


class TrendingEntry(BaseModel):
    """Leaderboard row of most searched movies"""

    id: int
    search_term: str
    movie_id: int
    title: str
    poster_url: Optional[str] = None
    search_count: int
