"""
依赖注入模块 - 提供各种服务依赖
"""
from typing import Annotated, Optional
from fastapi import Depends, Request
from tabulator.clients.feishu import FeishuClient
from tabulator.core.config import settings
from tabulator.services.cache import RedisService
from tabulator.services.feishu import SheetService
from tabulator.services.reader import WorksheetReader


# 全局服务实例
_redis_service: Optional[RedisService] = None


def get_feishu_client(request: Request) -> FeishuClient:
	"""获取全局 feishu client，首次使用时创建"""
	client = getattr(request.app.state, "feishu", None)
	if client is None:
		client = FeishuClient()
		request.app.state.feishu = client
	return client


def get_redis_service() -> Optional[RedisService]:
	"""获取 Redis 服务，未启用缓存时返回 None"""
	global _redis_service
	if not settings.redis.enabled:
		return None
	if _redis_service is None:
		_redis_service = RedisService()
	return _redis_service


async def close_redis_service() -> None:
	global _redis_service
	if _redis_service is not None:
		await _redis_service.close()
		_redis_service = None


def get_sheet_service(
	feishu_client: Annotated[FeishuClient, Depends(get_feishu_client)],
) -> SheetService:
	"""获取 Sheet 服务"""
	return SheetService(feishu_client)


def get_worksheet_reader(
	sheet_service: Annotated[SheetService, Depends(get_sheet_service)],
	redis_service: Annotated[Optional[RedisService], Depends(get_redis_service)],
) -> WorksheetReader:
	"""获取工作表读取服务"""
	return WorksheetReader(sheet_service=sheet_service, redis_service=redis_service)


# 类型别名，方便在端点中使用
WorksheetReaderDep = Annotated[WorksheetReader, Depends(get_worksheet_reader)]
