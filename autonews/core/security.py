from datetime import datetime, timedelta, UTC
from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.orm import Session
from autonews.core.config import get_settings
from autonews.db.database import get_session
from autonews.models.profile import Profile, Role
from autonews.models.user import User

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# OAuth2
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/users/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/users/login", auto_error=False)

def normalize_email(email: str) -> str:
    return email.strip().lower()

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """验证密码"""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """生成密码哈希"""
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """创建访问令牌"""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=15))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

def _user_from_token(token: str, session: Session) -> User | None:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    email: str = payload.get("sub")
    if email is None:
        return None
    result = session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()

def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: Session = Depends(get_session)
) -> User:
    """获取当前用户"""
    user = _user_from_token(token, session)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

def get_optional_current_user(
    token: str | None = Depends(optional_oauth2_scheme),
    session: Session = Depends(get_session)
) -> User | None:
    """获取当前用户（可选）"""
    if not token:
        return None
    user = _user_from_token(token, session)
    if user is None or not user.is_active:
        return None
    return user

def get_role(session: Session, user: User | None) -> Role:
    """Role from the profile record; never trusted from the client"""
    if user is None:
        return Role.GUEST
    profile = session.get(Profile, user.email)
    return profile.role if profile else Role.USER

def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
    session: Session = Depends(get_session)
) -> User:
    """Admin-only actions: authoring, editing, reviewing and deleting posts"""
    if get_role(session, current_user) != Role.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin only"
        )
    return current_user
