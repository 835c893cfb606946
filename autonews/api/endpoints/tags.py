from typing import List
from fastapi import APIRouter, Depends

from autonews.api.deps import get_store
from autonews.db.store import Store

router = APIRouter()

@router.get("", response_model=List[str], summary="Tags used by published posts")
def list_tags(store: Store = Depends(get_store)):
    """List distinct tags, sorted"""
    return store.list_tags()
