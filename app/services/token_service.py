"""
JWT 登录态服务

令牌携带用户ID和登录时的 User-Agent，过期时间固定且较短，不提供刷新。
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import logging

from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.errors import InvalidTokenError

logger = logging.getLogger(__name__)


@dataclass
class UserClaims:
    """令牌中的用户声明"""
    uid: int
    user_agent: str
    expires_at: datetime


def create_token(user_id: int, user_agent: str) -> str:
    """
    生成访问令牌

    参数：
    - user_id: 用户ID
    - user_agent: 登录请求的 User-Agent

    返回：
    - 签名后的令牌字符串
    """
    now = datetime.now(timezone.utc)
    payload = {
        "uid": user_id,
        "userAgent": user_agent or "",
        "exp": now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
        "iat": now,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def parse_token(token: str, user_agent: str) -> UserClaims:
    """
    校验并解析访问令牌

    异常：
    - InvalidTokenError，如果令牌过期、签名错误、格式错误或 User-Agent 不一致
    """
    if not token:
        raise InvalidTokenError("缺少令牌")

    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise InvalidTokenError("令牌已过期")
    except JWTError as e:
        logger.warning(f"令牌校验失败: {e}")
        raise InvalidTokenError()

    uid = payload.get("uid")
    if not isinstance(uid, int) or "exp" not in payload:
        raise InvalidTokenError()

    if payload.get("userAgent", "") != (user_agent or ""):
        # 令牌被换到了别的客户端上使用
        logger.warning(f"令牌 User-Agent 不一致: uid={uid}")
        raise InvalidTokenError("令牌与当前客户端不匹配")

    return UserClaims(
        uid=uid,
        user_agent=payload.get("userAgent", ""),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
