from datetime import datetime, UTC
import enum
from sqlalchemy import String, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column
from autonews.db.database import Base

class Role(str, enum.Enum):
    """Viewer role"""
    GUEST = "guest"  # anonymous viewer, never stored
    USER = "user"
    ADMIN = "admin"  # may author, edit, approve and delete posts

class Profile(Base):
    """Profile record, keyed by email"""
    __tablename__ = "profiles"

    email: Mapped[str] = mapped_column(String, primary_key=True)
    role: Mapped[Role] = mapped_column(Enum(Role), nullable=False, default=Role.USER)
    display_name: Mapped[str] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
