from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from typing import Optional
from functools import lru_cache

from autonews.core.config import get_settings

Base = declarative_base()

@lru_cache()
def get_engine():
    """获取数据库引擎"""
    return create_engine(
        get_settings().database_url,
        connect_args={"check_same_thread": False}
    )

def get_session_maker():
    """获取会话工厂"""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())

def get_session():
    """获取数据库会话"""
    SessionLocal = get_session_maker()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

def create_tables(db_engine: Optional[object] = None):
    """创建所有表

    Args:
        db_engine: 可选的数据库引擎，如果不提供则使用默认引擎
    """
    # register every model on Base.metadata before create_all
    from autonews.models import favorite, post, post_tag, profile, user  # noqa: F401

    engine = db_engine or get_engine()
    Base.metadata.create_all(bind=engine)
