"""Post lifecycle: create, review transitions, edit and delete.

Manual posts are published on creation. Assisted posts start as drafts and
move to ``published`` or ``rejected`` exactly once; both are terminal.
"""
import logging
import re
from datetime import datetime, UTC
from typing import Callable, List, Optional, Union

from autonews.core.config import get_settings
from autonews.core.errors import InvalidTransitionError, NotFoundError, ValidationError
from autonews.core.render import render_content
from autonews.db.store import Store
from autonews.models.post import Origin, Post, PostStatus
from autonews.schemas.post import PostCreate, PostUpdate

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    PostStatus.DRAFT: {PostStatus.PUBLISHED, PostStatus.REJECTED},
    PostStatus.PUBLISHED: set(),
    PostStatus.REJECTED: set(),
}

DEFAULT_BYLINE = "AutoNews Desk"


def normalize_tags(value: Union[str, List[str], None]) -> List[str]:
    """"#BTC, macro btc" -> ["btc", "macro"]"""
    if value is None:
        return []
    raw = value if isinstance(value, str) else " ".join(value)
    tags: List[str] = []
    for token in re.split(r"[\s,]+", raw):
        tag = token.lstrip("#").strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def utcnow() -> datetime:
    return datetime.now(UTC)


class PostLifecycleManager:
    def __init__(self, store: Store, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    def _load(self, post_id: str) -> Post:
        post = self.store.get_post(post_id)
        if post is None:
            raise NotFoundError()
        return post

    def create(self, fields: PostCreate, author: str, origin: Optional[Origin] = None) -> Post:
        """Create a post; manual posts are published at once, assisted ones become drafts"""
        origin = origin or fields.origin
        title = (fields.title or "").strip()
        content = (fields.content or "").strip()
        if not title or not content:
            raise ValidationError("Title and article content are required")

        now = self.clock()
        post = Post(
            title=title,
            topic=fields.topic,
            byline=(fields.byline or "").strip() or DEFAULT_BYLINE,
            author=author,
            content=content,
            content_html=render_content(content),
            image=(fields.image or "").strip() or get_settings().default_cover_image,
            created_at=now,
        )
        if origin == Origin.MANUAL:
            post.status = PostStatus.PUBLISHED
            post.published_at = now
        else:
            post.status = PostStatus.DRAFT
            post.published_at = None

        self.store.insert_post(post, normalize_tags(fields.tags))
        logger.info("Created %s post %s (%s)", origin.value, post.id, post.status.value)
        return post

    def transition(self, post_id: str, target: PostStatus) -> Post:
        post = self._load(post_id)
        if target not in ALLOWED_TRANSITIONS[post.status]:
            raise InvalidTransitionError(
                f"Cannot move post from {post.status.value} to {target.value}"
            )

        fields = {"status": target}
        if target == PostStatus.PUBLISHED:
            now = self.clock()
            fields["created_at"] = now
            fields["published_at"] = now
        self.store.update_post(post_id, fields)
        logger.info("Post %s moved to %s", post_id, target.value)
        return post

    def edit(self, post_id: str, changes: PostUpdate) -> Post:
        """Update content in any status; the display form is re-rendered in the same write"""
        self._load(post_id)
        fields = {}
        if changes.title is not None:
            title = changes.title.strip()
            if not title:
                raise ValidationError("Title cannot be empty")
            fields["title"] = title
        if changes.content is not None:
            content = changes.content.strip()
            if not content:
                raise ValidationError("Article content cannot be empty")
            fields["content"] = content
            fields["content_html"] = render_content(content)
        if changes.topic is not None:
            fields["topic"] = changes.topic
        if changes.byline is not None:
            fields["byline"] = changes.byline.strip() or DEFAULT_BYLINE
        if changes.image is not None:
            fields["image"] = changes.image.strip() or get_settings().default_cover_image
        fields["created_at"] = self.clock()

        tags = normalize_tags(changes.tags) if changes.tags is not None else None
        self.store.update_post(post_id, fields, tags)
        return self._load(post_id)

    def delete(self, post_id: str) -> None:
        self.store.delete_post(post_id)
        logger.info("Deleted post %s", post_id)
