"""
飞书服务模块 - 提供飞书 Sheets 封装
"""

from .sheet_service import SheetService
from .models import SheetMeta

__all__ = [
    "SheetService",
    "SheetMeta",
]
