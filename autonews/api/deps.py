from typing import List
from fastapi import Depends
from sqlalchemy.orm import Session

from autonews.db.database import get_session
from autonews.db.store import Store
from autonews.models.post import Post
from autonews.services.lifecycle import PostLifecycleManager

def get_store(session: Session = Depends(get_session)) -> Store:
    return Store(session)

def get_lifecycle(store: Store = Depends(get_store)) -> PostLifecycleManager:
    return PostLifecycleManager(store)

def serialize_posts(store: Store, posts: List[Post]) -> List[dict]:
    """Posts with their tags and favorite counts, two queries per page"""
    post_ids = [post.id for post in posts]
    tags = store.tags_for(post_ids)
    counts = store.count_favorites(post_ids)
    return [{
        "id": post.id,
        "title": post.title,
        "topic": post.topic,
        "tags": tags.get(post.id, []),
        "byline": post.byline,
        "author": post.author,
        "content": post.content,
        "content_html": post.content_html,
        "image": post.image,
        "status": post.status,
        "created_at": post.created_at,
        "published_at": post.published_at,
        "favorites_count": counts.get(post.id, 0)
    } for post in posts]
