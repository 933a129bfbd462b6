"""
工作表 API 端点
"""
from pathlib import Path as FilePath
from typing import List, Optional, Union

from fastapi import APIRouter, HTTPException, Path, Query, Response
from pydantic import BaseModel

from tabulator.core.config import settings
from tabulator.dependencies import WorksheetReaderDep
from tabulator.services.transform import RowSelection

router = APIRouter()


class ExportResponse(BaseModel):
	"""导出响应"""
	success: bool
	path: str
	message: str = ""


class InvalidateResponse(BaseModel):
	"""缓存清除响应"""
	success: bool
	deleted: int


def _parse_reject(values: List[str]) -> List[Union[int, range]]:
	"""解析剔除参数：整数索引或 `start..end` 闭区间，如 `-2..-1`"""
	entries: List[Union[int, range]] = []
	for value in values:
		text = value.strip()
		try:
			if ".." in text:
				start, end = text.split("..", 1)
				entries.append(range(int(start), int(end) + 1))
			else:
				entries.append(int(text))
		except ValueError:
			raise HTTPException(
				status_code=422,
				detail=f"无效的 reject 参数: {value}，应为整数或 start..end",
			)
	return entries


def _selection(header: Optional[int], skip: Optional[int], reject: List[str]) -> Optional[RowSelection]:
	"""未传任何行选择参数时返回 None，由读取服务使用配置默认值；未传的单个参数同样取配置值"""
	if header is None and skip is None and not reject:
		return None
	return RowSelection.from_options(
		header=settings.table.header_row if header is None else header,
		skip=settings.table.skip_rows if skip is None else skip,
		reject=_parse_reject(reject),
	)


@router.get("/{spreadsheet_token}/{worksheet}", summary="读取工作表为 JSON 记录")
async def read_worksheet(
	reader: WorksheetReaderDep,
	spreadsheet_token: str = Path(..., description="表格 token"),
	worksheet: str = Path(..., description="工作表标题"),
	header: Optional[int] = Query(None, ge=0, description="表头所在行（0-based）"),
	skip: Optional[int] = Query(None, ge=0, description="数据开始行，默认 header + 1"),
	reject: List[str] = Query([], description="需要剔除的行：整数索引（可为负数）或 start..end 闭区间"),
	only: List[str] = Query([], description="只保留的字段"),
):
	table = await reader.read(spreadsheet_token, worksheet, _selection(header, skip, reject))
	if only:
		table = table.only(*only)
	return Response(content=table.serialize(), media_type="application/json")


@router.post(
	"/{spreadsheet_token}/{worksheet}/export",
	response_model=ExportResponse,
	summary="导出工作表为 JSON 文件",
)
async def export_worksheet(
	reader: WorksheetReaderDep,
	spreadsheet_token: str = Path(..., description="表格 token"),
	worksheet: str = Path(..., description="工作表标题"),
	filename: Optional[str] = Query(None, description="导出文件名，默认 <工作表>.json"),
	header: Optional[int] = Query(None, ge=0),
	skip: Optional[int] = Query(None, ge=0),
	reject: List[str] = Query([]),
	only: List[str] = Query([]),
):
	# 只取文件名部分，导出始终落在配置目录下
	name = FilePath(filename or f"{worksheet}.json").name
	destination = FilePath(settings.export.directory) / name
	path = await reader.export(
		spreadsheet_token,
		worksheet,
		destination,
		selection=_selection(header, skip, reject),
		fields=only,
	)
	return ExportResponse(success=True, path=str(path), message=f"已导出工作表 {worksheet}")


@router.delete(
	"/{spreadsheet_token}/cache",
	response_model=InvalidateResponse,
	summary="清除表格缓存",
)
async def invalidate_cache(
	reader: WorksheetReaderDep,
	spreadsheet_token: str = Path(..., description="表格 token"),
):
	deleted = await reader.invalidate(spreadsheet_token)
	return InvalidateResponse(success=True, deleted=deleted)
