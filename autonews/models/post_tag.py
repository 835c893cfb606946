from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from autonews.db.database import Base
import uuid

class PostTag(Base):
    """文章标签关联模型"""
    __tablename__ = "post_tags"
    __table_args__ = (UniqueConstraint("post_id", "tag", name="uq_post_tag"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    post_id: Mapped[str] = mapped_column(String(36), index=True)  # 不使用外键，只存储文章ID
    tag: Mapped[str] = mapped_column(String(50), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)  # 保留标签的输入顺序
