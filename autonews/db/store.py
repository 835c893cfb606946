"""Backing store operations over a SQLAlchemy session.

Every database failure is rolled back and surfaced as ``StoreError`` so callers
can tell a backend problem apart from a validation problem.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from autonews.core.errors import DuplicateError, NotFoundError, StoreError
from autonews.core.events import ChangeFeed, change_feed
from autonews.models.favorite import Favorite
from autonews.models.post import Post, PostStatus, Topic
from autonews.models.post_tag import PostTag

logger = logging.getLogger(__name__)

FAVORITE_OK = "ok"
FAVORITE_DUPLICATE = "duplicate"


@dataclass
class PostFilter:
    status: Optional[PostStatus] = PostStatus.PUBLISHED  # None lists every status
    topic: Optional[Topic] = None
    tag: Optional[str] = None


class Store:
    def __init__(self, session: Session, feed: ChangeFeed = change_feed):
        self.session = session
        self.feed = feed

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("Constraint violation during %s: %s", action, e.orig)
            raise DuplicateError(f"{action} rejected: duplicate row") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Store failure during %s: %s", action, e)
            raise StoreError(f"{action} failed") from e

    # Posts

    def list_posts(self, post_filter: PostFilter, offset: int = 0, limit: int = 20) -> List[Post]:
        """Posts matching the filter, newest first"""
        with self._guard("list posts"):
            query = self.session.query(Post)
            if post_filter.status is not None:
                query = query.filter(Post.status == post_filter.status)
            if post_filter.topic is not None:
                query = query.filter(Post.topic == post_filter.topic)
            if post_filter.tag:
                query = query.join(PostTag, PostTag.post_id == Post.id).filter(
                    PostTag.tag == post_filter.tag.lower()
                )
            return (
                query.order_by(Post.created_at.desc(), Post.id)
                .offset(offset)
                .limit(limit)
                .all()
            )

    def get_post(self, post_id: str) -> Optional[Post]:
        with self._guard("get post"):
            return self.session.query(Post).filter(Post.id == post_id).first()

    def tags_for(self, post_ids: Iterable[str]) -> Dict[str, List[str]]:
        """Ordered tags of each post"""
        post_ids = list(post_ids)
        if not post_ids:
            return {}
        with self._guard("load tags"):
            rows = (
                self.session.query(PostTag)
                .filter(PostTag.post_id.in_(post_ids))
                .order_by(PostTag.post_id, PostTag.position)
                .all()
            )
        tags: Dict[str, List[str]] = {post_id: [] for post_id in post_ids}
        for row in rows:
            tags[row.post_id].append(row.tag)
        return tags

    def list_tags(self) -> List[str]:
        """Distinct tags of published posts"""
        with self._guard("list tags"):
            rows = (
                self.session.query(PostTag.tag)
                .join(Post, Post.id == PostTag.post_id)
                .filter(Post.status == PostStatus.PUBLISHED)
                .distinct()
                .all()
            )
        return sorted(row.tag for row in rows)

    def count_posts(self) -> int:
        with self._guard("count posts"):
            return self.session.query(func.count(Post.id)).scalar()

    def insert_post(self, post: Post, tags: List[str]) -> str:
        with self._guard("insert post"):
            self.session.add(post)
            self.session.flush()  # Flush to get the post ID
            self._write_tags(post.id, tags)
            self.session.commit()
        self.feed.publish("insert", post.id)
        return post.id

    def update_post(self, post_id: str, fields: dict, tags: Optional[List[str]] = None) -> None:
        post = self.get_post(post_id)
        if post is None:
            raise NotFoundError()
        with self._guard("update post"):
            for name, value in fields.items():
                setattr(post, name, value)
            if tags is not None:
                self.session.query(PostTag).filter(PostTag.post_id == post_id).delete(
                    synchronize_session=False
                )
                self._write_tags(post_id, tags)
            self.session.commit()
        self.feed.publish("update", post_id)

    def delete_post(self, post_id: str) -> None:
        post = self.get_post(post_id)
        if post is None:
            raise NotFoundError()
        with self._guard("delete post"):
            self.session.query(PostTag).filter(PostTag.post_id == post_id).delete(synchronize_session=False)
            self.session.query(Favorite).filter(Favorite.post_id == post_id).delete(synchronize_session=False)
            self.session.delete(post)
            self.session.commit()
        self.feed.publish("delete", post_id)

    def _write_tags(self, post_id: str, tags: List[str]) -> None:
        for position, tag in enumerate(tags):
            self.session.add(PostTag(post_id=post_id, tag=tag, position=position))

    # Favorites

    def list_favorites_for_viewer(self, viewer_id: str) -> Set[str]:
        with self._guard("list favorites"):
            rows = self.session.query(Favorite.post_id).filter(Favorite.viewer_id == viewer_id).all()
        return {row.post_id for row in rows}

    def _favorite_exists(self, viewer_id: str, post_id: str) -> bool:
        with self._guard("check favorite"):
            return self.session.query(Favorite.id).filter(
                Favorite.viewer_id == viewer_id, Favorite.post_id == post_id
            ).first() is not None

    def insert_favorite(self, viewer_id: str, post_id: str) -> str:
        """Returns "duplicate" instead of failing when the pair already exists"""
        if self._favorite_exists(viewer_id, post_id):
            return FAVORITE_DUPLICATE
        try:
            with self._guard("insert favorite"):
                self.session.add(Favorite(viewer_id=viewer_id, post_id=post_id))
                self.session.commit()
        except DuplicateError as e:
            # only a row inserted concurrently makes this a duplicate
            if self._favorite_exists(viewer_id, post_id):
                return FAVORITE_DUPLICATE
            raise StoreError("insert favorite failed") from e
        return FAVORITE_OK

    def delete_favorite(self, viewer_id: str, post_id: str) -> None:
        with self._guard("delete favorite"):
            self.session.query(Favorite).filter(
                Favorite.viewer_id == viewer_id, Favorite.post_id == post_id
            ).delete(synchronize_session=False)
            self.session.commit()

    def count_favorites(self, post_ids: List[str]) -> Dict[str, int]:
        """Favorite count per post; posts without favorites are omitted"""
        if not post_ids:
            return {}
        with self._guard("count favorites"):
            rows = (
                self.session.query(Favorite.post_id, func.count(Favorite.id))
                .filter(Favorite.post_id.in_(post_ids))
                .group_by(Favorite.post_id)
                .all()
            )
        return {post_id: count for post_id, count in rows}
