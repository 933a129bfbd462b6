"""
不可变记录集合 - 由表头与数据行构建，每个操作都返回新的 Table
"""
import copy
import dataclasses
import inspect
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Union

from tabulator.services.base import DestinationWriteError
from .header import HeaderNormalizer
from .selection import RowSelection, RowSelector


Record = Dict[str, Any]

logger = logging.getLogger("tabulator.services.Table")


class Table:
    """记录集合

    - 构造时深拷贝传入的记录，之后不再与外部共享可变结构
    - only / apply / reject 均返回新的 Table，原 Table 不变
    - records() 返回深拷贝
    """

    def __init__(self, records: Sequence[Record] = ()):
        self._records: List[Record] = [dict(r) for r in copy.deepcopy(list(records))]

    @classmethod
    def _owning(cls, records: List[Record]) -> "Table":
        """直接接管已是独立副本的记录，避免重复拷贝"""
        table = cls.__new__(cls)
        table._records = records
        return table

    @classmethod
    def build(
        cls,
        header_cells: Sequence[Any],
        data_rows: Sequence[Sequence[Any]],
        normalizer: Optional[HeaderNormalizer] = None,
    ) -> "Table":
        """
        用表头与数据行构建 Table

        短于表头的行缺失尾部字段（不补 None）；长于表头的行丢弃多余的值。
        """
        fields = (normalizer or HeaderNormalizer()).normalize_row(header_cells)
        records = [dict(zip(fields, copy.deepcopy(list(row)))) for row in data_rows]
        return cls._owning(records)

    def only(self, *fields: str) -> "Table":
        """只保留指定字段，字段顺序与原记录一致"""
        wanted = set(fields)
        return self._owning([
            {key: copy.deepcopy(value) for key, value in record.items() if key in wanted}
            for record in self._records
        ])

    def apply(
        self,
        field: str,
        transform: Union[Callable[[Any], Any], Callable[[Any, Record], Any]],
    ) -> "Table":
        """
        对每条记录的字段执行转换

        transform 接受两个位置参数时传入 (当前值, 整条记录)，否则只传当前值。
        字段不存在时当前值为 None，结果追加到记录末尾。
        """
        with_record = _accepts_record(transform)
        records: List[Record] = []
        for record in copy.deepcopy(self._records):
            current = record.get(field)
            value = transform(current, record) if with_record else transform(current)
            record[field] = copy.deepcopy(value)
            records.append(record)
        return self._owning(records)

    def reject(self, predicate: Callable[[Record], bool]) -> "Table":
        """剔除 predicate 为真的记录，保持相对顺序"""
        return self._owning([
            record for record in copy.deepcopy(self._records)
            if not predicate(record)
        ])

    def records(self) -> List[Record]:
        return copy.deepcopy(self._records)

    def serialize(self) -> str:
        """两空格缩进的 JSON 数组，字段顺序稳定"""
        return json.dumps(self.records(), indent=2, ensure_ascii=False, default=_json_default)

    def persist(self, destination: Union[str, Path]) -> Path:
        """
        将 serialize() 的结果原样写入文件

        Raises:
            DestinationWriteError: 写入失败
        """
        path = Path(destination)
        content = self.serialize()
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            logger.error(f"写入文件失败: {path}", exc_info=e)
            raise DestinationWriteError(
                f"写入文件失败: {e}",
                code="DESTINATION_WRITE_ERROR",
                details={"destination": str(path)},
            ) from e
        logger.info(f"已写入 {len(self._records)} 条记录: {path}")
        return path

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records())

    def __repr__(self) -> str:
        return f"Table(records={len(self._records)})"


def build_table(
    grid: Sequence[Sequence[Any]],
    selection: Optional[RowSelection] = None,
    normalizer: Optional[HeaderNormalizer] = None,
) -> Table:
    """原始二维数组 -> 行选择 -> 表头规范化 -> Table"""
    header, data_rows = RowSelector().select(grid, selection)
    return Table.build(header, data_rows, normalizer)


def _accepts_record(transform: Callable) -> bool:
    try:
        params = inspect.signature(transform).parameters.values()
    except (TypeError, ValueError):
        # 部分内置函数没有签名信息
        return False
    positional = 0
    for p in params:
        if p.kind == p.VAR_POSITIONAL:
            return True
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 2


def _json_default(value: Any) -> Any:
    if isinstance(value, Table):
        return value.records()
    if hasattr(value, "to_dict") and callable(value.to_dict):
        return value.to_dict()
    if hasattr(value, "model_dump") and callable(value.model_dump):
        return value.model_dump()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    return str(value)
