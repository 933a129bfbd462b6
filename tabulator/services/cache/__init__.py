"""
缓存模块 - 提供 Redis 缓存功能
"""

from .redis_service import RedisService
from .keys import CacheKeys

__all__ = [
    "RedisService",
    "CacheKeys",
]
