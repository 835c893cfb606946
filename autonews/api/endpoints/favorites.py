from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, status

from autonews.api.deps import get_store
from autonews.core.security import get_current_user
from autonews.db.store import Store
from autonews.models.post import PostStatus
from autonews.models.user import User
from autonews.schemas.favorite import FavoriteCounts, FavoriteCountsRequest, FavoriteList, FavoriteResult

router = APIRouter()

@router.get("", response_model=FavoriteList, summary="Post ids the current viewer has favorited")
def list_favorites(
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[Store, Depends(get_store)]
):
    """List favorites of the current viewer"""
    return {"post_ids": sorted(store.list_favorites_for_viewer(current_user.email))}

@router.put("/{post_id}", response_model=FavoriteResult, summary="Favorite a published post")
def add_favorite(
    post_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[Store, Depends(get_store)]
):
    """Favorite a post; favoriting twice reports "duplicate" instead of failing"""
    post = store.get_post(post_id)
    if not post or post.status != PostStatus.PUBLISHED:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    return {"result": store.insert_favorite(current_user.email, post_id)}

@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove a favorite")
def remove_favorite(
    post_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[Store, Depends(get_store)]
):
    """Remove a favorite; removing a missing favorite is a no-op"""
    store.delete_favorite(current_user.email, post_id)
    return None

@router.post("/counts", response_model=FavoriteCounts, summary="Favorite counts for a page of posts")
def count_favorites(
    request: FavoriteCountsRequest,
    store: Annotated[Store, Depends(get_store)]
):
    """Posts without favorites are left out of the result"""
    return store.count_favorites(request.post_ids)
