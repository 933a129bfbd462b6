"""
工作表读取服务：从飞书读取（或从 Redis 缓存取回）原始二维数组，
按行选择配置构建 Table，并可将结果导出为 JSON 文件。
"""
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from tabulator.core.config import settings
from tabulator.services.base import BaseService, CacheError, DestinationWriteError
from tabulator.services.cache import CacheKeys, RedisService
from tabulator.services.feishu import SheetService
from tabulator.services.transform import HeaderNormalizer, RowSelection, Table, Transliterator, build_table


class WorksheetReader(BaseService):
    """工作表读取服务"""

    def __init__(
        self,
        sheet_service: SheetService,
        redis_service: Optional[RedisService] = None,
        normalizer: Optional[HeaderNormalizer] = None,
        cache_ttl: Optional[int] = None,
    ) -> None:
        super().__init__("WorksheetReader")
        self.sheet_service = sheet_service
        self.redis = redis_service
        self.normalizer = normalizer or HeaderNormalizer(
            Transliterator(replacement=settings.table.transliteration_replacement)
        )
        self.cache_ttl = settings.redis.ttl_seconds if cache_ttl is None else cache_ttl

    def default_selection(self) -> RowSelection:
        return RowSelection(header=settings.table.header_row, skip=settings.table.skip_rows)

    async def read_grid(
        self,
        spreadsheet_token: str,
        worksheet: Union[str, int],
    ) -> List[List[Any]]:
        """读取原始二维数组；启用缓存时优先命中缓存，缓存异常时回退到数据源"""
        key = CacheKeys.grid_key(spreadsheet_token, worksheet)
        if self.redis is not None:
            try:
                cached = await self.redis.get(key)
                if cached is not None:
                    return cached
            except CacheError as e:
                self.log_warning(f"读取缓存失败，回退到飞书: {e}")

        grid = await self.sheet_service.get_worksheet_grid(spreadsheet_token, worksheet)

        if self.redis is not None:
            try:
                await self.redis.set(key, grid, self.cache_ttl)
            except CacheError as e:
                self.log_warning(f"写入缓存失败: {e}")
        return grid

    async def read(
        self,
        spreadsheet_token: str,
        worksheet: Union[str, int],
        selection: Optional[RowSelection] = None,
    ) -> Table:
        """
        读取工作表并构建 Table

        Args:
            spreadsheet_token: 表格 token
            worksheet: 工作表标题或位置
            selection: 行选择配置，不提供则使用配置中的默认值

        Returns:
            Table
        """
        grid = await self.read_grid(spreadsheet_token, worksheet)
        table = build_table(grid, selection or self.default_selection(), self.normalizer)
        self.log_info(f"工作表 {worksheet} 转换完成，共 {len(table)} 条记录")
        self.record_metric("records_built", len(table))
        return table

    async def export(
        self,
        spreadsheet_token: str,
        worksheet: Union[str, int],
        destination: Union[str, Path],
        selection: Optional[RowSelection] = None,
        fields: Optional[Sequence[str]] = None,
    ) -> Path:
        """读取工作表并写入 JSON 文件，fields 非空时只保留这些字段"""
        table = await self.read(spreadsheet_token, worksheet, selection)
        if fields:
            table = table.only(*fields)
        path = Path(destination)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DestinationWriteError(
                f"无法创建导出目录: {e}",
                code="DESTINATION_WRITE_ERROR",
                details={"destination": str(path)},
            ) from e
        return table.persist(path)

    async def invalidate(self, spreadsheet_token: str) -> int:
        """清除某个表格的全部缓存，返回删除的键数量"""
        if self.redis is None:
            return 0
        return await self.redis.clear_pattern(CacheKeys.grid_pattern(spreadsheet_token))
