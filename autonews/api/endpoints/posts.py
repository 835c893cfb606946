from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from autonews.api.deps import get_lifecycle, get_store, serialize_posts
from autonews.core.events import change_feed
from autonews.core.security import get_optional_current_user, get_role, require_admin
from autonews.db.database import get_session
from autonews.db.store import PostFilter, Store
from autonews.models.post import PostStatus, Topic
from autonews.models.profile import Role
from autonews.models.user import User
from autonews.schemas.post import PostChangesResponse, PostCreate, PostUpdate, PostResponse
from autonews.services.lifecycle import PostLifecycleManager
from typing import List, Optional

router = APIRouter()

@router.get("", response_model=List[PostResponse], summary="List published posts")
def list_posts(
    topic: Optional[Topic] = None,
    tag: Optional[str] = None,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    store: Store = Depends(get_store)
):
    """List published posts, newest first"""
    posts = store.list_posts(PostFilter(topic=topic, tag=tag), offset=offset, limit=limit)
    return serialize_posts(store, posts)

@router.get("/all", response_model=List[PostResponse], summary="List posts in every status")
def list_all_posts(
    post_status: Optional[PostStatus] = Query(default=None, alias="status"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    store: Store = Depends(get_store),
    current_user: User = Depends(require_admin)
):
    """List drafts, published and rejected posts for review"""
    posts = store.list_posts(PostFilter(status=post_status), offset=offset, limit=limit)
    return serialize_posts(store, posts)

@router.get("/changes", response_model=PostChangesResponse, summary="Current change version of the posts table")
def get_changes():
    """Clients re-fetch their page when the version moves"""
    return {"version": change_feed.version}

@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED, summary="Create a new post")
def create_post(
    post: PostCreate,
    lifecycle: PostLifecycleManager = Depends(get_lifecycle),
    current_user: User = Depends(require_admin)
):
    """Create a post; manual posts are published, assisted posts are saved as drafts"""
    new_post = lifecycle.create(post, author=current_user.email)
    return serialize_posts(lifecycle.store, [new_post])[0]

@router.get("/{post_id}", response_model=PostResponse, summary="Get a specific post")
def get_post(
    post_id: str,
    store: Store = Depends(get_store),
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_optional_current_user)
):
    """Get a specific post"""
    post = store.get_post(post_id)
    # unpublished posts are hidden from everyone but admins
    if not post or (post.status != PostStatus.PUBLISHED and get_role(session, current_user) != Role.ADMIN):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    return serialize_posts(store, [post])[0]

@router.put("/{post_id}", response_model=PostResponse, summary="Edit the content of a post in any status")
def update_post(
    post_id: str,
    post_update: PostUpdate,
    lifecycle: PostLifecycleManager = Depends(get_lifecycle),
    current_user: User = Depends(require_admin)
):
    """Edit a post"""
    post = lifecycle.edit(post_id, post_update)
    return serialize_posts(lifecycle.store, [post])[0]

@router.post("/{post_id}:publishPost", response_model=PostResponse, summary="Publish a draft")
def publish_post(
    post_id: str,
    lifecycle: PostLifecycleManager = Depends(get_lifecycle),
    current_user: User = Depends(require_admin)
):
    """Approve a draft"""
    post = lifecycle.transition(post_id, PostStatus.PUBLISHED)
    return serialize_posts(lifecycle.store, [post])[0]

@router.post("/{post_id}:rejectPost", response_model=PostResponse, summary="Reject a draft")
def reject_post(
    post_id: str,
    lifecycle: PostLifecycleManager = Depends(get_lifecycle),
    current_user: User = Depends(require_admin)
):
    """Reject a draft"""
    post = lifecycle.transition(post_id, PostStatus.REJECTED)
    return serialize_posts(lifecycle.store, [post])[0]

@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a post and its favorites")
def delete_post(
    post_id: str,
    lifecycle: PostLifecycleManager = Depends(get_lifecycle),
    current_user: User = Depends(require_admin)
):
    """Delete a post permanently"""
    lifecycle.delete(post_id)
    return None
