import os

# 设置测试环境（必须在导入应用之前）
os.environ["APP_ENV"] = "test"
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ["SEED_DEMO_POSTS"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from autonews.main import app
from autonews.core.config import SQLITE_TEST_DB
from autonews.db.database import Base, create_tables, get_session

# 测试数据库配置
test_engine = create_engine(SQLITE_TEST_DB, connect_args={"check_same_thread": False})
TestSessionLocal = sessionmaker(bind=test_engine)

ADMIN = {"email": "admin@example.com", "password": "adminpassword123"}
READER = {"email": "reader@example.com", "password": "readerpassword123"}

@pytest.fixture(autouse=True)
def clean_db():
    """清理并重建测试数据库"""
    Base.metadata.drop_all(bind=test_engine)
    create_tables(test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)

@pytest.fixture
def db_session(clean_db):
    """直接访问数据库的会话"""
    session = TestSessionLocal()
    yield session
    session.close()

@pytest.fixture
def client(clean_db):
    """创建测试客户端"""
    test_session = TestSessionLocal()

    # 覆盖依赖
    def override_get_session():
        try:
            yield test_session
        finally:
            test_session.close()

    app.dependency_overrides[get_session] = override_get_session

    client = TestClient(app)
    yield client

    # 测试结束后清理
    test_session.close()
    app.dependency_overrides.clear()

def _login(client, account):
    client.post("/api/users/register", json=account)
    response = client.post("/api/users/login", json=account)
    return response.json()["access_token"]

@pytest.fixture
def admin_token(client):
    return _login(client, ADMIN)

@pytest.fixture
def reader_token(client):
    return _login(client, READER)

@pytest.fixture
def admin_client(client, admin_token):
    """返回一个管理员客户端"""
    auth_client = TestClient(client.app)
    auth_client.headers = {"Authorization": f"Bearer {admin_token}"}
    return auth_client

@pytest.fixture
def reader_client(client, reader_token):
    """返回一个普通用户客户端"""
    auth_client = TestClient(client.app)
    auth_client.headers = {"Authorization": f"Bearer {reader_token}"}
    return auth_client

@pytest.fixture
def post_data():
    return {
        "title": "Bitcoin holds $60k",
        "content": "Markets stayed range-bound.\n\nKey drivers:\n- Macro\n- ETF flows",
        "topic": "Crypto",
        "tags": ["btc", "macro"]
    }
