from datetime import datetime, timedelta, timezone
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session
from autonews.core.config import get_settings
from autonews.core.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    get_current_user,
    normalize_email,
)
from autonews.db.database import get_session
from autonews.models.profile import Profile, Role
from autonews.models.user import User
from autonews.schemas.user import UserCreate, UserResponse, Token, UserLogin

router = APIRouter()

def _user_response(user: User, profile: Profile | None) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "role": profile.role if profile else Role.USER,
        "display_name": profile.display_name if profile else None,
        "created_at": user.created_at,
        "last_login": user.last_login,
    }

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: UserCreate,
    session: Annotated[Session, Depends(get_session)]
) -> dict:
    """Create a new account and its profile"""
    email = normalize_email(user_in.email)
    result = session.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=400,
            detail="Account already exists"
        )

    role = Role.ADMIN if get_settings().is_admin_email(email) else Role.USER
    user = User(email=email, password_hash=get_password_hash(user_in.password))
    profile = session.get(Profile, email)
    if profile is None:
        profile = Profile(email=email, role=role, display_name=user_in.display_name)
        session.add(profile)
    session.add(user)
    session.commit()
    session.refresh(user)
    return _user_response(user, profile)

@router.post("/login", response_model=Token)
def login(
    user_in: UserLogin,
    session: Annotated[Session, Depends(get_session)]
) -> dict:
    """Login with email and password"""
    email = normalize_email(user_in.email)
    result = session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(user_in.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Update last login time
    user.last_login = datetime.now(timezone.utc)
    session.commit()

    access_token_expires = timedelta(minutes=get_settings().access_token_expire_minutes)
    access_token = create_access_token(
        data={"sub": user.email}, expires_delta=access_token_expires
    )
    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/me", response_model=UserResponse)
def read_users_me(
    current_user: Annotated[User, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_session)]
) -> dict:
    """Get the current user with the role from their profile"""
    return _user_response(current_user, session.get(Profile, current_user.email))
