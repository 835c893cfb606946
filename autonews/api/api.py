from fastapi import APIRouter
from autonews.api.endpoints import (
    users,
    posts,
    favorites,
    tags,
    markets,
    pages
)

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
api_router.include_router(tags.router, prefix="/tags", tags=["tags"])
api_router.include_router(markets.router, prefix="/markets", tags=["markets"])
api_router.include_router(pages.router, prefix="/pages", tags=["pages"])
