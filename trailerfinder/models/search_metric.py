"""Search metric model"""

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from ..database import Base


class SearchMetric(Base):
    """How often a normalized query was searched, and the movie it found first"""

    __tablename__ = "search_metrics"

    id = Column(Integer, primary_key=True, index=True)
    search_term = Column(String(255), unique=True, nullable=False, index=True)
    count = Column(Integer, nullable=False, default=1, index=True)

    # Top result of the first search for this term
    movie_id = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    poster_url = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self):
        return f"<SearchMetric {self.search_term!r} count={self.count}>"
