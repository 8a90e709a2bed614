"""Database models"""

from .search_metric import SearchMetric

__all__ = ["SearchMetric"]
