"""
Cookie 会话服务

登录成功后在缓存中写入会话记录，Cookie 里只保存随机会话ID。
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import logging
import secrets

from app.config import settings
from app.errors import SessionStoreError
from app.utils.cache import cache_manager

logger = logging.getLogger(__name__)

SESSION_PREFIX = "session"


def create_session(user_id: int) -> str:
    """
    创建会话

    返回：
    - 会话ID（写入 Cookie 的值）

    异常：
    - SessionStoreError，如果会话未能写入存储
    """
    session_id = secrets.token_urlsafe(32)
    expire_at = datetime.now(timezone.utc) + timedelta(seconds=settings.SESSION_MAX_AGE)
    if not cache_manager.set(SESSION_PREFIX, session_id, {"userId": user_id}, expire_at=expire_at):
        logger.error(f"会话未写入存储: userId={user_id}, SESSION_MAX_AGE={settings.SESSION_MAX_AGE}")
        raise SessionStoreError()
    logger.info(f"创建会话: userId={user_id}, 有效期 {settings.SESSION_MAX_AGE} 秒")
    return session_id


def get_session_user_id(session_id: Optional[str]) -> Optional[int]:
    """
    读取会话中的用户ID

    返回：
    - 用户ID，如果会话存在且未过期
    - None，否则
    """
    if not session_id:
        return None
    data = cache_manager.get(SESSION_PREFIX, session_id)
    if not isinstance(data, dict):
        return None
    user_id = data.get("userId")
    return int(user_id) if user_id is not None else None


def destroy_session(session_id: Optional[str]) -> bool:
    """删除会话，返回是否删除了已有会话"""
    if not session_id:
        return False
    return cache_manager.delete(SESSION_PREFIX, session_id)


def cookie_options() -> dict:
    """登录态 Cookie 的属性"""
    return {
        "key": settings.SESSION_COOKIE_NAME,
        "max_age": settings.SESSION_MAX_AGE,
        "secure": settings.SESSION_COOKIE_SECURE,
        "httponly": True,
        "samesite": "lax",
    }
