"""
表头规范化 - 将表头单元格转换为 ASCII 小写标识符，并处理重名
"""
import re
import unicodedata
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence


# NFKD 分解后仍不是 ASCII 的常见字母
DEFAULT_APPROXIMATIONS: Dict[str, str] = {
    "ß": "ss", "ẞ": "SS",
    "æ": "ae", "Æ": "AE",
    "œ": "oe", "Œ": "OE",
    "ø": "o", "Ø": "O",
    "đ": "d", "Đ": "D",
    "ð": "d", "Ð": "D",
    "þ": "th", "Þ": "Th",
    "ł": "l", "Ł": "L",
    "ı": "i",
    "ħ": "h", "Ħ": "H",
    "ŋ": "n", "Ŋ": "N",
    "ĸ": "k",
    "ŀ": "l", "Ŀ": "L",
    "ŧ": "t", "Ŧ": "T",
    "‘": "'", "’": "'",
    "“": '"', "”": '"',
    "–": "-", "—": "-",
}

_WHITESPACE_RUN = re.compile(r"\s+")


class Transliterator:
    """静态映射表 + NFKD 分解的转写器，不依赖任何全局 locale 状态"""

    def __init__(
        self,
        approximations: Optional[Mapping[str, str]] = None,
        replacement: str = "?",
    ) -> None:
        self.approximations = dict(DEFAULT_APPROXIMATIONS if approximations is None else approximations)
        self.replacement = replacement

    def __call__(self, text: str) -> str:
        out: List[str] = []
        for char in text:
            if char.isascii():
                out.append(char)
                continue
            if char in self.approximations:
                out.append(self.approximations[char])
                continue
            decomposed = "".join(
                c for c in unicodedata.normalize("NFKD", char)
                if not unicodedata.combining(c)
            )
            if decomposed and decomposed.isascii():
                out.append(decomposed)
            else:
                out.append(self.replacement)
        return "".join(out)


class HeaderNormalizer:
    """表头规范化器

    单元格：去首尾空白 -> 连续空白替换为 `_` -> 转写为 ASCII -> 小写。
    同一行内重名时，在原始文本后追加 `_1`、`_2`… 再重新规范化，直到唯一。
    """

    def __init__(self, transliterate: Optional[Callable[[str], str]] = None) -> None:
        self.transliterate = transliterate or Transliterator()

    def normalize(self, raw_text: Any) -> str:
        text = "" if raw_text is None else str(raw_text)
        text = _WHITESPACE_RUN.sub("_", text.strip())
        return self.transliterate(text).lower()

    def normalize_row(self, raw_header_cells: Sequence[Any]) -> List[str]:
        accepted: List[str] = []
        seen = set()
        for cell in raw_header_cells:
            raw = "" if cell is None else str(cell)
            identifier = self.normalize(raw)
            suffix = 1
            while identifier in seen:
                identifier = self.normalize(f"{raw}_{suffix}")
                suffix += 1
            seen.add(identifier)
            accepted.append(identifier)
        return accepted
