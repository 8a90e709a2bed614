"""Configuration management"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

from .exceptions import ConfigurationError


class SearchRacePolicy(str, Enum):
    """How overlapping movie fetches are resolved"""

    LATEST_WINS = "latest_wins"  # stale responses are cancelled/discarded
    LAST_WRITE_WINS = "last_write_wins"  # whichever response lands last is kept


class Settings(BaseSettings):
    """Application settings"""

    # TMDB
    TMDB_API_TOKEN: Optional[str] = None
    TMDB_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE_URL: str = "https://image.tmdb.org/t/p/w500"
    TMDB_LANGUAGE: str = "en-US"
    POSTER_PLACEHOLDER: str = "/No-Poster.png"
    YOUTUBE_EMBED_URL: str = "https://www.youtube.com/embed"
    REQUEST_TIMEOUT: Optional[float] = None  # None = wait indefinitely

    # Database (trending leaderboard)
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/trailerfinder.db"

    # Discovery behaviour
    SEARCH_DEBOUNCE_SECONDS: float = 0.5
    TRENDING_LIMIT: int = 5
    SEARCH_RACE_POLICY: SearchRacePolicy = SearchRacePolicy.LATEST_WINS
    SESSION_TTL: float = 1800  # Idle seconds before a session is dropped, 0 = never

    # Directories
    BASE_DIR: Path = Path(__file__).parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    LOGS_DIR: Path = DATA_DIR / "logs"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8765
    ALLOWED_ORIGINS: Optional[str] = None  # Comma-separated origins for the API

    class Config:
        env_file = ".env"
        case_sensitive = True

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Ensure directories exist
        self.DATA_DIR.mkdir(exist_ok=True)
        self.LOGS_DIR.mkdir(exist_ok=True)

    def require_api_token(self) -> str:
        """Return the TMDB bearer token or fail fast when it is missing"""
        token = (self.TMDB_API_TOKEN or "").strip()
        if not token:
            raise ConfigurationError(
                "TMDB_API_TOKEN is not set. Add it to the environment or .env "
                "before starting the server."
            )
        return token


# Global settings instance
settings = Settings()
