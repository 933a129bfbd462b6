"""
飞书 Sheet 服务 - 处理工作表查找与表格数据读取
"""
from typing import Any, List, Union
import asyncio
import re

from tabulator.services.base import (
    AuthenticationError,
    BaseService,
    ServiceException,
    SourceUnavailableError,
    WorksheetNotFoundError,
)
from tabulator.clients.feishu import FeishuClient
from .models import SheetMeta


# 飞书鉴权相关错误码：token 缺失/无效、app_id 或 app_secret 错误
AUTH_ERROR_CODES = {
    "10003",
    "10014",
    "99991661",
    "99991663",
    "99991664",
    "99991668",
    "99991671",
}


class SheetService(BaseService):
    """飞书 Sheet 服务，负责将工作表读取为原始文本二维数组"""

    def __init__(self, feishu_client: FeishuClient):
        """
        初始化 Sheet 服务

        Args:
            feishu_client: 飞书客户端实例
        """
        super().__init__("SheetService")
        self.feishu_client = feishu_client

    async def list_worksheets(self, spreadsheet_token: str) -> List[SheetMeta]:
        """列出工作簿内所有工作表，按 index 排序"""
        loop = asyncio.get_event_loop()
        try:
            response = await loop.run_in_executor(
                None,
                self.feishu_client.list_sheets,
                spreadsheet_token,
            )
        except ServiceException:
            raise
        except Exception as e:
            self._handle_api_error(e, spreadsheet_token)

        sheets = getattr(response.data, "sheets", None) if response.data else None
        if sheets is None and isinstance(response.data, dict):
            sheets = response.data.get("sheets")
        metas = [SheetMeta.from_api_response(s) for s in sheets or []]
        return sorted(metas, key=lambda m: m.index)

    async def get_worksheet(
        self,
        spreadsheet_token: str,
        worksheet: Union[str, int],
    ) -> SheetMeta:
        """
        按标题或位置（0-based）查找工作表

        Raises:
            WorksheetNotFoundError: 工作表不存在
        """
        metas = await self.list_worksheets(spreadsheet_token)
        if isinstance(worksheet, int):
            if 0 <= worksheet < len(metas):
                return metas[worksheet]
        else:
            for meta in metas:
                if meta.title == worksheet:
                    return meta
        raise WorksheetNotFoundError(
            f"未找到工作表: {worksheet}",
            code="SHEET_NOT_FOUND",
            details={
                "spreadsheet_token": spreadsheet_token,
                "worksheet": worksheet,
                "available_sheets": [m.title for m in metas],
            },
        )

    async def get_worksheet_grid(
        self,
        spreadsheet_token: str,
        worksheet: Union[str, int],
    ) -> List[List[str]]:
        """
        读取整个工作表，返回原始文本二维数组

        Args:
            spreadsheet_token: 表格 token
            worksheet: 工作表标题或位置

        Returns:
            [[单元格文本, ...], ...]
        """
        meta = await self.get_worksheet(spreadsheet_token, worksheet)
        range_str = meta.a1_range()
        self.log_info(f"获取表格数据: token={spreadsheet_token}, range={range_str}")

        loop = asyncio.get_event_loop()
        try:
            values = await loop.run_in_executor(
                None,
                self.feishu_client.read_range_values,
                spreadsheet_token,
                range_str,
            )
        except ServiceException:
            raise
        except Exception as e:
            self._handle_api_error(e, spreadsheet_token)

        grid = [[self._cell_text(cell) for cell in (row or [])] for row in values]
        self.record_metric("rows_fetched", len(grid))
        self.record_metric("cols_fetched", max((len(row) for row in grid), default=0))
        return grid

    def _cell_text(self, cell: Any) -> str:
        """单元格统一为文本：None 为空串，富文本片段拼接 text"""
        if cell is None:
            return ""
        if isinstance(cell, str):
            return cell
        if isinstance(cell, bool):
            return "TRUE" if cell else "FALSE"
        if isinstance(cell, list):
            return "".join(self._cell_text(seg) for seg in cell)
        if isinstance(cell, dict):
            return str(cell.get("text") or cell.get("link") or "")
        return str(cell)

    def _handle_api_error(self, error: Exception, spreadsheet_token: str) -> None:
        """将客户端异常转换为鉴权失败或数据源不可用"""
        error_msg = str(error)

        error_code = "UNKNOWN"
        if hasattr(error, "code"):
            error_code = str(error.code)
        else:
            match = re.search(r"code=(\w+)", error_msg)
            if match:
                error_code = match.group(1)

        self.log_error(f"飞书 API 错误: {error_code} - {error_msg}")

        exc_type = AuthenticationError if error_code in AUTH_ERROR_CODES else SourceUnavailableError
        raise exc_type(
            f"飞书 API 调用失败: {error_msg}",
            code=error_code,
            details={"spreadsheet_token": spreadsheet_token},
        ) from error
