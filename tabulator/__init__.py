"""
sheet-tabulator：将飞书表格转换为以规范化列名为键的 JSON 记录
"""

from tabulator.services.transform import (
    HeaderNormalizer,
    RowSelection,
    RowSelector,
    Table,
    build_table,
)

__version__ = "0.1.0"

__all__ = [
    "HeaderNormalizer",
    "RowSelection",
    "RowSelector",
    "Table",
    "build_table",
]
