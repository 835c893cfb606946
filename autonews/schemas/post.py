from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List, Union
from autonews.models.post import PostStatus, Topic, Origin

class PostBase(BaseModel):
    """文章基础模型"""
    # emptiness is checked by the lifecycle manager, not here
    title: str = Field(..., max_length=200)
    content: str
    topic: Topic = Topic.CRYPTO
    tags: Union[List[str], str] = Field(default_factory=list, description="标签列表或以逗号分隔的字符串")
    byline: Optional[str] = None
    image: Optional[str] = Field(default=None, description="封面图片地址")

class PostCreate(PostBase):
    """创建文章请求模型"""
    origin: Origin = Origin.MANUAL

class PostUpdate(BaseModel):
    """更新文章请求模型"""
    title: Optional[str] = Field(default=None, max_length=200)
    content: Optional[str] = None
    topic: Optional[Topic] = None
    tags: Optional[Union[List[str], str]] = None
    byline: Optional[str] = None
    image: Optional[str] = None

class PostResponse(BaseModel):
    """文章响应模型"""
    id: str
    title: str
    topic: Topic
    tags: List[str]
    byline: str
    author: str
    content: str
    content_html: Optional[str] = None
    image: Optional[str] = None
    status: PostStatus
    created_at: datetime
    published_at: Optional[datetime] = None
    favorites_count: int = 0

    class Config:
        from_attributes = True

class PostChangesResponse(BaseModel):
    """变更版本号"""
    version: int
