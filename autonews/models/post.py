from sqlalchemy import Column, String, Text, Enum, DateTime
from autonews.db.database import Base
from datetime import datetime, UTC
from enum import Enum as PyEnum
import uuid

class PostStatus(str, PyEnum):
    """Post status"""
    DRAFT = "draft"          # Authored but pending review, only visible to admins
    PUBLISHED = "published"  # Visible in public listings
    REJECTED = "rejected"    # Declined draft, only visible to admins

class Topic(str, PyEnum):
    """Fixed set of topics"""
    CRYPTO = "Crypto"
    US_POLITICS = "US Politics"
    WORLD = "World"
    REGULATION = "Regulation"
    OPINION = "Opinion"

class Origin(str, PyEnum):
    """How a post was authored"""
    MANUAL = "manual"      # admin form, published immediately
    ASSISTED = "assisted"  # generated draft, waits for review

class Post(Base):
    """Post model"""
    __tablename__ = "posts"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    topic = Column(Enum(Topic), nullable=False, default=Topic.CRYPTO)
    byline = Column(String, nullable=False, default="AutoNews Desk")
    author = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    content_html = Column(Text, nullable=True)
    image = Column(String, nullable=True)
    status = Column(Enum(PostStatus), nullable=False, default=PostStatus.PUBLISHED)
    # ordering timestamp, re-stamped on publish and on edit
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
    published_at = Column(DateTime(timezone=True), nullable=True)
