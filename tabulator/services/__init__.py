"""
服务层模块 - 提供业务逻辑实现
"""

from .reader import WorksheetReader

__all__ = [
    "WorksheetReader",
]
