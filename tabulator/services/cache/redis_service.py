"""
Redis 缓存服务
"""
from typing import Any, Optional
import json
import asyncio
import redis.asyncio as redis
from tabulator.services.base import BaseService, CacheError
from tabulator.core.config import settings


class RedisService(BaseService):
    """Redis 缓存服务封装"""

    def __init__(self, redis_url: Optional[str] = None):
        """
        初始化 Redis 服务

        Args:
            redis_url: Redis 连接 URL，不提供则从配置读取
        """
        super().__init__("RedisService")
        self.redis_url = redis_url or settings.redis.dsn
        self.redis_client: Optional[redis.Redis] = None
        self._lock = asyncio.Lock()

    async def _ensure_connected(self) -> redis.Redis:
        """确保 Redis 连接"""
        if self.redis_client is None:
            async with self._lock:
                if self.redis_client is None:
                    try:
                        client = redis.from_url(
                            self.redis_url,
                            encoding="utf-8",
                            decode_responses=True
                        )
                        # 测试连接
                        await client.ping()
                        self.redis_client = client
                        self.log_info(f"Redis 连接成功: {self.redis_url}")
                    except Exception as e:
                        self.log_error(f"Redis 连接失败: {e}", error=e)
                        raise CacheError(
                            f"无法连接到 Redis: {str(e)}",
                            code="REDIS_CONNECTION_ERROR"
                        ) from e
        return self.redis_client

    async def get(self, key: str) -> Optional[Any]:
        """
        获取缓存值

        Args:
            key: 缓存键

        Returns:
            缓存值，不存在返回 None
        """
        client = await self._ensure_connected()
        try:
            data = await client.get(key)
        except Exception as e:
            self.log_error(f"获取缓存失败: {key}", error=e)
            raise CacheError(
                f"获取缓存失败: {str(e)}",
                code="CACHE_GET_ERROR",
                details={"key": key}
            ) from e

        if data is None:
            self.log_debug(f"缓存未命中: {key}")
            return None

        try:
            value = self._deserialize(data)
        except json.JSONDecodeError as e:
            self.log_error(f"缓存数据解析失败: {key}", error=e)
            # 删除损坏的缓存
            await self.delete(key)
            return None
        self.log_debug(f"缓存命中: {key}")
        return value

    async def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None
    ) -> bool:
        """
        设置缓存值

        Args:
            key: 缓存键
            value: 缓存值
            ttl: 过期时间（秒）

        Returns:
            是否设置成功
        """
        client = await self._ensure_connected()
        data = self._serialize(value)
        try:
            if ttl:
                result = await client.setex(key, ttl, data)
            else:
                result = await client.set(key, data)
        except Exception as e:
            self.log_error(f"设置缓存失败: {key}", error=e)
            raise CacheError(
                f"设置缓存失败: {str(e)}",
                code="CACHE_SET_ERROR",
                details={"key": key}
            ) from e

        self.log_debug(f"缓存设置成功: {key}, TTL={ttl}")
        return bool(result)

    async def delete(self, key: str) -> bool:
        """删除缓存"""
        try:
            client = await self._ensure_connected()
            result = await client.delete(key)
            self.log_debug(f"删除缓存: {key}, 结果={result}")
            return bool(result)
        except Exception as e:
            self.log_error(f"删除缓存失败: {key}", error=e)
            return False

    async def clear_pattern(self, pattern: str) -> int:
        """删除匹配模式的所有键"""
        client = await self._ensure_connected()
        try:
            keys = [key async for key in client.scan_iter(match=pattern)]
            if not keys:
                return 0
            return await client.delete(*keys)
        except Exception as e:
            self.log_error(f"批量删除失败: {pattern}", error=e)
            raise CacheError(
                f"批量删除失败: {str(e)}",
                code="CACHE_CLEAR_ERROR",
                details={"pattern": pattern}
            ) from e

    async def close(self) -> None:
        """关闭 Redis 连接"""
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None
            self.log_info("Redis 连接已关闭")

    def _serialize(self, value: Any) -> str:
        """序列化数据"""
        return json.dumps(value, ensure_ascii=False, default=str)

    def _deserialize(self, data: str) -> Any:
        """反序列化数据"""
        return json.loads(data)
