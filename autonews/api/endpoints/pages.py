from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from autonews.api.deps import get_store
from autonews.core.security import get_optional_current_user, get_role
from autonews.db.database import get_session
from autonews.db.store import Store
from autonews.models.post import Topic
from autonews.models.user import User
from autonews.pages.controllers import ALL_TOPICS, PageContext, get_page

router = APIRouter()

@router.get("/{page_name}", summary="View model of a site page")
def render_page(
    page_name: str,
    request: Request,
    store: Annotated[Store, Depends(get_store)],
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[User | None, Depends(get_optional_current_user)]
) -> dict:
    """Render one of: home, login, admin, post, account"""
    page = get_page(page_name)
    params = dict(request.query_params)
    topic = params.get("topic")
    if topic and topic != ALL_TOPICS and topic not in {t.value for t in Topic}:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown topic {topic!r}"
        )
    context = PageContext(
        store=store,
        viewer=current_user.email if current_user else None,
        role=get_role(session, current_user),
        params=params,
    )
    return page.render(context)
