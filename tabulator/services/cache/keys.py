"""
缓存键生成规则
"""
from typing import Union


class CacheKeys:
    """缓存键生成器"""

    # 键前缀
    PREFIX = "tab"

    # 键模板
    GRID = "{prefix}:grid:{sheet_token}:{worksheet}"

    @classmethod
    def grid_key(cls, sheet_token: str, worksheet: Union[str, int]) -> str:
        """
        生成原始表格二维数组的缓存键

        Args:
            sheet_token: 表格 token
            worksheet: 工作表标题或位置

        Returns:
            缓存键
        """
        return cls.GRID.format(
            prefix=cls.PREFIX,
            sheet_token=sheet_token,
            worksheet=worksheet,
        )

    @classmethod
    def grid_pattern(cls, sheet_token: str) -> str:
        """某个表格下所有工作表的缓存键匹配模式"""
        return cls.GRID.format(prefix=cls.PREFIX, sheet_token=sheet_token, worksheet="*")
