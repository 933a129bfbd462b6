"""
行选择 - 决定表头行、数据起始行以及需要剔除的行
"""
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from tabulator.services.base import BaseService


Row = List[Any]
RowPredicate = Callable[[Row], bool]
RejectEntry = Union[int, slice, range, RowPredicate]


@dataclass
class RowSelection:
    """行选择配置（0-based），仅在构建 Table 时使用"""
    header: int = 0  # 表头所在行
    skip: Optional[int] = None  # 数据开始行，None 表示 header + 1
    reject: Union[RejectEntry, Sequence[RejectEntry], None] = field(default_factory=list)

    @property
    def data_start(self) -> int:
        return self.header + 1 if self.skip is None else self.skip

    @property
    def reject_entries(self) -> List[RejectEntry]:
        """单个条目与条目序列统一为列表"""
        if self.reject is None:
            return []
        if isinstance(self.reject, (int, slice, range)) or callable(self.reject):
            return [self.reject]
        return list(self.reject)

    @classmethod
    def from_options(
        cls,
        header: Optional[int] = None,
        skip: Optional[int] = None,
        reject: Union[RejectEntry, Sequence[RejectEntry], None] = None,
    ) -> "RowSelection":
        """从松散的可选参数构建，未提供的 header 取 0"""
        return cls(
            header=0 if header is None else header,
            skip=skip,
            reject=[] if reject is None else reject,
        )


class RowSelector(BaseService):
    """行选择器"""

    def __init__(self):
        super().__init__("RowSelector")

    def select(
        self,
        grid: Sequence[Sequence[Any]],
        selection: Optional[RowSelection] = None,
    ) -> Tuple[Row, List[Row]]:
        """
        按配置从二维数组中选出表头与数据行

        剔除条目按顺序作用于逐步缩小的行集合；负索引相对于当前集合末尾。
        越界的索引、表头或起始行不会报错，只会得到空结果。

        Args:
            grid: 原始二维数组
            selection: 行选择配置

        Returns:
            (表头行, 数据行列表)
        """
        selection = selection or RowSelection()
        rows: List[Row] = [list(row) for row in grid]

        for entry in selection.reject_entries:
            before = len(rows)
            if callable(entry):
                rows = [row for row in rows if not entry(row)]
            else:
                rows = self._reject_positions(rows, entry)
            self.log_debug(f"剔除条目 {entry!r}: {before} -> {len(rows)} 行")

        header_row = rows[selection.header] if 0 <= selection.header < len(rows) else []
        data_rows = rows[max(selection.data_start, 0):]
        return header_row, data_rows

    def _reject_positions(self, rows: List[Row], entry: Union[int, slice, range]) -> List[Row]:
        size = len(rows)
        if isinstance(entry, slice):
            positions = set(range(size)[entry])
        elif isinstance(entry, range):
            positions = {self._resolve(i, size) for i in entry}
        else:
            positions = {self._resolve(entry, size)}
        return [row for idx, row in enumerate(rows) if idx not in positions]

    @staticmethod
    def _resolve(index: int, size: int) -> int:
        return index + size if index < 0 else index
