"""The page of stories currently on screen.

A change notification never patches the page in place; it only tells the feed
to fetch the whole page again.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from autonews.client.context import SessionContext
from autonews.client.favorites import FavoriteClient
from autonews.core.events import PostChange

logger = logging.getLogger(__name__)


@dataclass
class FeedQuery:
    topic: Optional[str] = None
    tag: Optional[str] = None
    page: int = 0
    page_size: int = 20

    def params(self) -> dict:
        return {
            "topic": self.topic,
            "tag": self.tag,
            "offset": self.page * self.page_size,
            "limit": self.page_size,
        }


class PostFeed:
    def __init__(self, context: SessionContext, favorites: FavoriteClient, query: Optional[FeedQuery] = None):
        self.context = context
        self.favorites = favorites
        self.query = query or FeedQuery()
        self.posts: List[dict] = []
        self.version: Optional[int] = None
        self.stale = False

    async def refresh(self) -> List[dict]:
        """Fetch the current page and its favorite counts, one request each"""
        version = await self.context.backend.changes_version()
        posts = await self.context.backend.list_posts(self.query.params())
        await self.favorites.load_counts(post["id"] for post in posts)
        self.posts = posts
        self.version = version
        self.stale = False
        return posts

    async def show(self, query: FeedQuery) -> List[dict]:
        self.query = query
        return await self.refresh()

    def on_change(self, event: PostChange) -> None:
        """Change subscription callback; marks the page for re-fetch"""
        logger.debug("Post %s %s, page is stale", event.post_id, event.kind)
        self.stale = True

    async def sync(self) -> bool:
        """Re-fetch when the posts table changed since the last fetch; returns True if it did"""
        if not self.stale:
            version = await self.context.backend.changes_version()
            if version == self.version:
                return False
        await self.refresh()
        return True
