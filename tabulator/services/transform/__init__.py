"""
数据转换模块 - 负责将原始二维数组转换为记录集合
"""

from .header import HeaderNormalizer, Transliterator, DEFAULT_APPROXIMATIONS
from .selection import RowSelection, RowSelector
from .table import Record, Table, build_table

__all__ = [
    "HeaderNormalizer",
    "Transliterator",
    "DEFAULT_APPROXIMATIONS",
    "RowSelection",
    "RowSelector",
    "Record",
    "Table",
    "build_table",
]
