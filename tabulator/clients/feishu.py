import json
import logging
from typing import Any, List, Optional
from urllib.parse import quote

import lark_oapi as lark
from lark_oapi.api.sheets.v3 import (
	QuerySpreadsheetSheetRequest,
	QuerySpreadsheetSheetResponse,
)

from tabulator.core.config import settings
from tabulator.services.base import AuthenticationError


class FeishuClient:
	"""
	最小实现：鉴权 + Sheets 列出工作表 + 读取范围值。
	凭据来自 `settings.feishu.auth`，若缺失将抛出 AuthenticationError。
	"""

	def __init__(
		self,
		app_id: Optional[str] = None,
		app_secret: Optional[str] = None,
		log_level: lark.LogLevel = lark.LogLevel.WARNING,
	) -> None:
		self._logger = logging.getLogger("tabulator.feishu")
		cid = app_id or settings.feishu.auth.app_id
		csecret = app_secret or settings.feishu.auth.app_secret
		if not cid or not csecret:
			raise AuthenticationError(
				"Feishu credentials missing: configure TAB_FEISHU__AUTH__APP_ID/APP_SECRET",
				code="CREDENTIALS_MISSING",
			)
		self.client = (
			lark.Client.builder()
			.app_id(cid)
			.app_secret(csecret)
			.domain(settings.feishu.base_url)
			.timeout(settings.feishu.timeout_seconds)
			.log_level(log_level)
			.build()
		)

	# ---------- Sheets v3：列出工作表（返回原生响应对象） ----------
	def list_sheets(self, spreadsheet_token: str) -> QuerySpreadsheetSheetResponse:
		request: QuerySpreadsheetSheetRequest = (
			QuerySpreadsheetSheetRequest.builder()
			.spreadsheet_token(spreadsheet_token)
			.build()
		)
		response: QuerySpreadsheetSheetResponse = (
			self.client.sheets.v3.spreadsheet_sheet.query(request)
		)
		if not response.success():
			self._logger.error(
				f"client.sheets.v3.spreadsheet_sheet.query failed, code: {response.code}, msg: {response.msg}, "
				f"log_id: {response.get_log_id()}"
			)
			raise RuntimeError(
				f"Sheets query failed: code={response.code}, msg={response.msg}"
			)
		return response

	# ---------- Sheets v2：读取指定范围的值（使用 lark 原生 BaseRequest 调用） ----------
	def read_range_values(
		self,
		spreadsheet_token: str,
		range_a1: str,
		value_render_option: str = "ToString",
		date_time_render_option: str = "FormattedString",
	) -> List[List[Any]]:
		# URL 中的 range 需要进行 path 安全编码，但保留 '!' 和 ':'
		encoded_range = quote(range_a1, safe="!:")
		uri = f"/open-apis/sheets/v2/spreadsheets/{spreadsheet_token}/values/{encoded_range}"

		self._logger.debug(f"准备读取表格范围数据: spreadsheet_token={spreadsheet_token}, range={range_a1}")

		request = (
			lark.BaseRequest.builder()
			.http_method(lark.HttpMethod.GET)
			.uri(uri)
			.token_types({lark.AccessTokenType.TENANT})
			.queries([
				("valueRenderOption", value_render_option),
				("dateTimeRenderOption", date_time_render_option),
			])
			.build()
		)

		response: lark.BaseResponse = self.client.request(request)
		if not response.success():
			self._logger.error(
				f"valueRange get failed: code={response.code}, msg={response.msg}, log_id={response.get_log_id()}"
			)
			raise RuntimeError(
				f"valueRange get failed: code={response.code}, msg={response.msg}, log_id={response.get_log_id()}"
			)

		try:
			body = json.loads(response.raw.content.decode("utf-8"))
		except (ValueError, UnicodeDecodeError) as ex:
			self._logger.error(f"解析响应体失败: {ex}")
			raise RuntimeError(f"invalid json body: {ex}") from ex

		values = (
			(body or {}).get("data", {}).get("valueRange", {}).get("values", [])
			or []
		)
		self._logger.debug(f"成功获取表格数据，行数: {len(values)}")
		return values
