import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

load_dotenv()

# 数据库配置
SQLITE_DEV_DB = "sqlite:///./dev.db"
SQLITE_TEST_DB = "sqlite:///./test.db"
SQLITE_PROD_DB = "sqlite:///./prod.db"


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Runtime settings read from the environment"""

    def __init__(self):
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.secret_key: str = os.getenv("SECRET_KEY", "change-me")  # don't use the default in production
        self.algorithm: str = "HS256"
        self.access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))
        self.admin_emails: List[str] = [e.lower() for e in _split(os.getenv("ADMIN_EMAILS", ""))]
        self.seed_demo_posts: bool = _flag(os.getenv("SEED_DEMO_POSTS", "false"))
        self.default_cover_image: str = os.getenv(
            "DEFAULT_COVER_IMAGE", "https://picsum.photos/1200/630?blur=2"
        )
        self.market_cache_seconds: int = int(os.getenv("MARKET_CACHE_SECONDS", "60"))
        self.market_stock_symbols: List[str] = _split(os.getenv("MARKET_STOCK_SYMBOLS", "SPY,DIA,NVDA"))
        self.market_coin_ids: List[str] = _split(os.getenv("MARKET_COIN_IDS", "bitcoin,ethereum"))
        self.fmp_api_key: str = os.getenv("FMP_API_KEY", "demo")

    @property
    def database_url(self) -> str:
        if self.app_env == "test":
            return SQLITE_TEST_DB
        if self.app_env == "production":
            return os.getenv("DATABASE_URL", SQLITE_PROD_DB)
        return SQLITE_DEV_DB

    def is_admin_email(self, email: str) -> bool:
        return email.strip().lower() in self.admin_emails


@lru_cache()
def get_settings() -> Settings:
    """获取配置"""
    return Settings()
