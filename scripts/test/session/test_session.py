"""
登录态测试：Cookie 会话存储与 JWT 令牌

- 会话的创建、读取、删除与过期
- 缓存管理器在 Redis 不可用时回退到内存字典
- 令牌签发、过期、篡改、User-Agent 绑定

使用方法:
    pytest scripts/test/session
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from jose import jwt

from app.config import settings
from app.errors import InvalidTokenError, SessionStoreError
from app.services import session_service, token_service
from app.utils.cache import CacheManager, cache_manager
from test_utils import log_test_start, log_success


# -------------------------- Cookie 会话 --------------------------

def test_session_lifecycle(db):
    """测试会话创建、读取、删除"""
    log_test_start("会话生命周期")

    session_id = session_service.create_session(42)
    assert len(session_id) >= 32
    assert session_service.get_session_user_id(session_id) == 42

    assert session_service.destroy_session(session_id) is True
    assert session_service.get_session_user_id(session_id) is None
    assert session_service.destroy_session(session_id) is False

    log_success("会话生命周期测试通过")


def test_session_ids_are_unique(db):
    """测试每次登录生成不同的会话ID"""
    first = session_service.create_session(1)
    second = session_service.create_session(1)
    assert first != second


def test_session_unknown_or_empty(db):
    """测试不存在或为空的会话ID"""
    assert session_service.get_session_user_id(None) is None
    assert session_service.get_session_user_id("") is None
    assert session_service.get_session_user_id("no-such-session") is None
    assert session_service.destroy_session(None) is False


def test_session_expires(db, monkeypatch):
    """测试会话按 SESSION_MAX_AGE 过期"""
    monkeypatch.setattr(settings, "SESSION_MAX_AGE", -1)
    # 过期时间已过，存储拒绝写入，不能返回一个无效的会话ID
    with pytest.raises(SessionStoreError) as exc_info:
        session_service.create_session(7)
    assert exc_info.value.code == 500


def test_cookie_options():
    """测试登录态 Cookie 属性"""
    options = session_service.cookie_options()
    assert options["key"] == settings.SESSION_COOKIE_NAME
    assert options["max_age"] == settings.SESSION_MAX_AGE
    assert options["httponly"] is True
    assert options["secure"] is settings.SESSION_COOKIE_SECURE


# -------------------------- 缓存管理器 --------------------------

def test_cache_memory_expiry():
    """测试内存字典缓存的过期处理"""
    log_test_start("内存缓存过期")

    cache = CacheManager(use_redis=False)
    assert cache.using_redis is False

    past = datetime.now(timezone.utc) - timedelta(seconds=1)
    assert cache.set("session", "old", {"userId": 1}, expire_at=past) is False
    assert cache.get("session", "old") is None

    future = datetime.now(timezone.utc) + timedelta(minutes=5)
    assert cache.set("session", "live", {"userId": 2}, expire_at=future) is True
    assert cache.get("session", "live") == {"userId": 2}

    # 模拟时间流逝
    cache._fallback_cache["session"]["live"]["expire_at"] = past
    assert cache.get("session", "live") is None

    log_success("内存缓存过期测试通过")


def test_cache_purges_expired_entries_on_set():
    """测试写入时清理同前缀下未再读取的过期条目"""
    log_test_start("过期条目清理")

    cache = CacheManager(use_redis=False)
    future = datetime.now(timezone.utc) + timedelta(minutes=5)
    for i in range(1000):
        cache.set("session", f"old-{i}", {"userId": i}, expire_at=future)
    cache.set("other", "keep", 1, expire_at=future)

    past = datetime.now(timezone.utc) - timedelta(seconds=1)
    for entry in cache._fallback_cache["session"].values():
        entry["expire_at"] = past

    assert cache.set("session", "new", {"userId": 1000}, expire_at=future) is True
    assert list(cache._fallback_cache["session"]) == ["new"]
    # 其他前缀不受影响
    assert cache.get("other", "keep") == 1

    log_success("过期条目在写入时被清理")


def test_session_store_does_not_grow_with_expired_sessions(db):
    """测试会话过期后不再读取也不会在内存中堆积"""
    for user_id in range(50):
        session_service.create_session(user_id)
    past = datetime.now(timezone.utc) - timedelta(seconds=1)
    for entry in cache_manager._fallback_cache[session_service.SESSION_PREFIX].values():
        entry["expire_at"] = past

    session_id = session_service.create_session(99)
    assert list(cache_manager._fallback_cache[session_service.SESSION_PREFIX]) == [session_id]


def test_cache_naive_expire_at_treated_as_utc():
    """测试 naive datetime 过期时间按 UTC 处理"""
    cache = CacheManager(use_redis=False)
    naive_future = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(minutes=5)
    assert cache.set("session", "naive", "value", expire_at=naive_future) is True
    assert cache.get("session", "naive") == "value"


def test_cache_clear_prefix():
    """测试按前缀清除缓存"""
    cache = CacheManager(use_redis=False)
    cache.set("session", "a", 1)
    cache.set("session", "b", 2)
    cache.set("other", "c", 3)

    assert cache.clear_prefix("session") == 2
    assert cache.get("session", "a") is None
    assert cache.get("other", "c") == 3


def test_cache_falls_back_when_redis_unreachable(monkeypatch):
    """测试 Redis 连接失败时回退到内存字典"""
    log_test_start("Redis 不可用回退")

    monkeypatch.setattr(settings, "REDIS_HOST", "127.0.0.1")
    monkeypatch.setattr(settings, "REDIS_PORT", 1)

    cache = CacheManager(use_redis=True)
    assert cache.using_redis is False
    assert cache.set("session", "k", {"userId": 3}) is True
    assert cache.get("session", "k") == {"userId": 3}

    log_success("Redis 不可用时正确回退")


# -------------------------- JWT 令牌 --------------------------

def test_token_roundtrip():
    """测试令牌签发与解析"""
    log_test_start("令牌签发与解析")

    token = token_service.create_token(5, "Mozilla/5.0")
    claims = token_service.parse_token(token, "Mozilla/5.0")

    assert claims.uid == 5
    assert claims.user_agent == "Mozilla/5.0"
    assert claims.expires_at > datetime.now(timezone.utc)
    assert claims.expires_at <= datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

    header = jwt.get_unverified_header(token)
    assert header["alg"] == settings.JWT_ALGORITHM

    log_success("令牌签发与解析测试通过")


def test_token_user_agent_mismatch():
    """测试令牌与 User-Agent 绑定"""
    token = token_service.create_token(5, "Mozilla/5.0")
    with pytest.raises(InvalidTokenError) as exc_info:
        token_service.parse_token(token, "curl/8.0")
    assert exc_info.value.code == 401


def test_token_expired(monkeypatch):
    """测试过期令牌被拒绝"""
    monkeypatch.setattr(settings, "JWT_EXPIRE_MINUTES", -1)
    token = token_service.create_token(5, "Mozilla/5.0")

    with pytest.raises(InvalidTokenError) as exc_info:
        token_service.parse_token(token, "Mozilla/5.0")
    assert exc_info.value.detail == "令牌已过期"


@pytest.mark.parametrize("token", [
    "",
    "invalid.jwt.token",
    "header.payload.signature.extra",
])
def test_token_malformed(token):
    """测试格式错误的令牌"""
    with pytest.raises(InvalidTokenError):
        token_service.parse_token(token, "Mozilla/5.0")


def test_token_wrong_secret():
    """测试用其他密钥签名的令牌"""
    forged = jwt.encode(
        {
            "uid": 1,
            "userAgent": "Mozilla/5.0",
            "exp": datetime.now(timezone.utc) + timedelta(minutes=1),
        },
        "wrong_secret",
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(InvalidTokenError):
        token_service.parse_token(forged, "Mozilla/5.0")


def test_token_missing_uid():
    """测试缺少 uid 声明的令牌"""
    token = jwt.encode(
        {
            "userAgent": "Mozilla/5.0",
            "exp": datetime.now(timezone.utc) + timedelta(minutes=1),
        },
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(InvalidTokenError):
        token_service.parse_token(token, "Mozilla/5.0")


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
