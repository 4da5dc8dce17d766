"""
缓存工具模块
支持 Redis 和内存字典两种缓存方案
优先使用 Redis，如果 Redis 未启用或不可用则回退到内存字典

当前用于存放 Cookie 会话（prefix = 'session'）
"""

import json
from datetime import datetime, timezone
from typing import Any, Optional, Dict
import logging

import redis

from app.config import settings

logger = logging.getLogger(__name__)

KEY_NAMESPACE = "usercenter"


def ensure_aware_datetime(dt: datetime) -> datetime:
    """将 naive datetime 视为 UTC，统一为 offset-aware"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class CacheManager:
    """
    缓存管理器
    优先使用 Redis，如果 Redis 不可用则回退到内存字典
    """

    def __init__(self, use_redis: Optional[bool] = None):
        self._redis_client = None
        self._use_redis = False
        self._fallback_cache: Dict[str, Dict[str, Dict[str, Any]]] = {}  # 回退缓存（内存字典）

        enabled = settings.REDIS_ENABLED if use_redis is None else use_redis
        if enabled:
            try:
                self._redis_client = redis.Redis(
                    host=settings.REDIS_HOST,
                    port=settings.REDIS_PORT,
                    db=settings.REDIS_DB,
                    password=settings.REDIS_PASSWORD if settings.REDIS_PASSWORD else None,
                    decode_responses=True,
                    socket_connect_timeout=2,
                    socket_timeout=2
                )
                # 测试连接
                self._redis_client.ping()
                self._use_redis = True
                logger.info("✓ Redis 缓存已启用")
            except redis.RedisError as e:
                logger.warning(f"Redis 连接失败，使用内存字典缓存: {e}")
                self._redis_client = None
                self._use_redis = False
        else:
            logger.info("Redis 未启用，使用内存字典缓存")

    @property
    def using_redis(self) -> bool:
        return self._use_redis

    def _get_key(self, prefix: str, key: str) -> str:
        """生成 Redis 键名"""
        return f"{KEY_NAMESPACE}:{prefix}:{key}"

    def set(self, prefix: str, key: str, value: Any, expire_at: Optional[datetime] = None) -> bool:
        """
        设置缓存值

        参数:
        - prefix: 缓存前缀（如 'session'）
        - key: 缓存键
        - value: 缓存值（需可 JSON 序列化）
        - expire_at: 过期时间（绝对时间）

        返回:
        - True 如果成功，False 如果已过期未存储
        """
        now = datetime.now(timezone.utc)
        if expire_at:
            expire_at = ensure_aware_datetime(expire_at)
            if expire_at <= now:
                logger.warning(f"缓存已过期，不存储: prefix={prefix}, key={key}, expire_at={expire_at}")
                return False

        if self._use_redis and self._redis_client:
            try:
                serialized = json.dumps(value, default=str)
                if expire_at:
                    ttl = max(1, int((expire_at - now).total_seconds()))
                    self._redis_client.setex(self._get_key(prefix, key), ttl, serialized)
                else:
                    self._redis_client.set(self._get_key(prefix, key), serialized)
                return True
            except redis.RedisError as e:
                logger.warning(f"Redis 设置失败，回退到内存字典: {e}")
                self._use_redis = False

        # 回退到内存字典
        entries = self._fallback_cache.setdefault(prefix, {})
        self._purge_expired(entries, now)
        entries[key] = {
            'value': value,
            'expire_at': expire_at
        }
        return True

    @staticmethod
    def _purge_expired(entries: Dict[str, Dict[str, Any]], now: datetime) -> int:
        """删除同一前缀下已过期的内存条目，返回删除数量"""
        expired = [
            key for key, entry in entries.items()
            if entry.get('expire_at') and entry['expire_at'] <= now
        ]
        for key in expired:
            del entries[key]
        if expired:
            logger.debug(f"清理过期缓存 {len(expired)} 条")
        return len(expired)

    def get(self, prefix: str, key: str) -> Optional[Any]:
        """
        获取缓存值

        返回:
        - 缓存值，如果存在且未过期
        - None，如果不存在或已过期
        """
        if self._use_redis and self._redis_client:
            try:
                value = self._redis_client.get(self._get_key(prefix, key))
                if value is None:
                    return None
                return json.loads(value)
            except redis.RedisError as e:
                logger.warning(f"Redis 获取失败，回退到内存字典: {e}")
                self._use_redis = False
            except json.JSONDecodeError as e:
                logger.error(f"缓存反序列化失败: prefix={prefix}, key={key}, error={e}")
                return None

        entries = self._fallback_cache.get(prefix)
        if not entries or key not in entries:
            return None

        cache_entry = entries[key]
        expire_at = cache_entry.get('expire_at')
        if expire_at and datetime.now(timezone.utc) > expire_at:
            # 已过期，删除
            del entries[key]
            return None

        return cache_entry['value']

    def delete(self, prefix: str, key: str) -> bool:
        """
        删除缓存值

        返回:
        - True 如果删除了已有的键，False 如果键不存在
        """
        if self._use_redis and self._redis_client:
            try:
                return self._redis_client.delete(self._get_key(prefix, key)) > 0
            except redis.RedisError as e:
                logger.warning(f"Redis 删除失败，回退到内存字典: {e}")
                self._use_redis = False

        entries = self._fallback_cache.get(prefix)
        if entries and key in entries:
            del entries[key]
            return True
        return False

    def clear_prefix(self, prefix: str) -> int:
        """
        清除指定前缀的所有缓存（测试夹具在每个用例结束时用它重置会话）

        返回:
        - 删除的键数量
        """
        if self._use_redis and self._redis_client:
            try:
                keys = list(self._redis_client.scan_iter(match=self._get_key(prefix, "*")))
                if keys:
                    return self._redis_client.delete(*keys)
                return 0
            except redis.RedisError as e:
                logger.warning(f"Redis 清除失败，回退到内存字典: {e}")
                self._use_redis = False

        entries = self._fallback_cache.pop(prefix, {})
        return len(entries)


# 创建全局缓存管理器实例
cache_manager = CacheManager()
