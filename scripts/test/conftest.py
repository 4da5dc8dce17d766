"""
测试公共夹具

测试使用内存 SQLite 和内存字典会话存储，不依赖 MySQL / Redis。
"""

import os
import sys
from pathlib import Path

# 必须在导入 app 之前设置，Settings 在导入时读取环境变量
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"

project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(Path(__file__).parent))

import pytest
from fastapi.testclient import TestClient

from app.extensions import engine, SessionLocal
from app.main import app
from app.models import Base
from app.services.session_service import SESSION_PREFIX
from app.utils.cache import cache_manager


@pytest.fixture
def db():
    """每个测试使用全新的表结构"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        cache_manager.clear_prefix(SESSION_PREFIX)


@pytest.fixture
def client(db):
    return TestClient(app)
