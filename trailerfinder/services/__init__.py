"""Services layer"""

from .log_service import LogService
from .tmdb_service import TMDBService
from .trending_service import TrendingService

__all__ = [
    "LogService",
    "TMDBService",
    "TrendingService",
]
