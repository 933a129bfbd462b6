"""
飞书相关数据模型
"""
from dataclasses import dataclass
from typing import Any, Optional


def _g(obj: Any, key: str) -> Optional[Any]:
    """兼容 dict 与 lark 响应对象的取值"""
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def col_number_to_letters(col_number: int) -> str:
    """1 -> A, 26 -> Z, 27 -> AA ..."""
    result = ""
    n = max(col_number, 1)
    while n > 0:
        n, rem = divmod(n - 1, 26)
        result = chr(65 + rem) + result
    return result


@dataclass
class SheetMeta:
    """工作表元数据模型"""
    sheet_id: str  # Sheet ID
    title: str  # Sheet 名称
    index: int  # 在工作簿中的位置
    row_count: int  # 行数
    column_count: int  # 列数

    @classmethod
    def from_api_response(cls, data: Any) -> 'SheetMeta':
        """从飞书 v3 spreadsheet_sheet.query 返回的单个 sheet 创建实例（dict 或 lark 对象）"""
        grid = _g(data, "grid_properties") or {}
        return cls(
            sheet_id=_g(data, "sheet_id") or "",
            title=_g(data, "title") or "",
            index=int(_g(data, "index") or 0),
            row_count=int(_g(grid, "row_count") or 0),
            column_count=int(_g(grid, "column_count") or 0),
        )

    def a1_range(self) -> str:
        """覆盖整个工作表的 A1 范围，使用 sheet_id 形式"""
        rows = max(self.row_count, 1)
        cols = max(self.column_count, 1)
        return f"{self.sheet_id}!A1:{col_number_to_letters(cols)}{rows}"
