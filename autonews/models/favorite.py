from datetime import datetime, UTC
import uuid
from sqlalchemy import Column, String, DateTime, UniqueConstraint

from autonews.db.database import Base

class Favorite(Base):
    """A viewer liking a post"""
    __tablename__ = "favorites"
    # at most one row per (viewer, post)
    __table_args__ = (UniqueConstraint("viewer_id", "post_id", name="uq_favorite_viewer_post"),)

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    viewer_id = Column(String, nullable=False, index=True)
    post_id = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(UTC))
