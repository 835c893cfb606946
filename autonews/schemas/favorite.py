from typing import Dict, List, Literal
from pydantic import BaseModel, Field

class FavoriteResult(BaseModel):
    """收藏写入结果"""
    result: Literal["ok", "duplicate"]

class FavoriteList(BaseModel):
    """当前用户收藏的文章ID"""
    post_ids: List[str]

class FavoriteCountsRequest(BaseModel):
    """批量获取收藏数"""
    post_ids: List[str] = Field(default_factory=list, max_length=200)

FavoriteCounts = Dict[str, int]
