"""
文件路径：textflow/components/text.py

说明：文本切分（段落、换行单元）与宽度估算相关工具函数。
"""

from __future__ import annotations

import re
from typing import List, Optional

from ..variables import (
    CONST_CHAR_WIDTH_RATIO,
    CONST_PARAGRAPH_BREAK_PATTERN,
    CONST_WORD_UNIT_PATTERN,
)


_PARAGRAPH_BREAK_RE = re.compile(CONST_PARAGRAPH_BREAK_PATTERN)
_WORD_UNIT_RE = re.compile(CONST_WORD_UNIT_PATTERN)


def estimate_text_width(
    text: str,
    font_size: float,
    char_width_ratio: float = CONST_CHAR_WIDTH_RATIO,
) -> float:
    """估算文本宽度（简化版）。

    - 非 ASCII（如中文）按 font_size 计算；ASCII 按 font_size * char_width_ratio。
    """
    if not text:
        return 0.0
    width = 0.0
    for char in text:
        if ord(char) > 127:
            width += font_size
        else:
            width += font_size * char_width_ratio
    return width


def split_paragraphs(text: Optional[str]) -> List[str]:
    """按 `\\n` / `\\r\\n` 拆分段落，保留空段落（含末尾换行产生的空段）。

    与 str.splitlines 不同：不识别其它换行字符，也不丢弃末尾空段。
    空文本或 None 返回空列表。
    """
    if not text:
        return []
    return _PARAGRAPH_BREAK_RE.split(str(text))


def split_units(paragraph: str, split_by_grapheme: bool = False) -> List[str]:
    """将段落切分为换行单元。

    - split_by_grapheme=True：逐字符切分；
    - 否则按空白切分，并保留空白串作为独立单元（便于按宽度累加）。
    """
    if split_by_grapheme:
        return list(paragraph)
    return [u for u in _WORD_UNIT_RE.split(paragraph) if u]


def is_whitespace_unit(unit: str) -> bool:
    """单元是否全部由空白组成。"""
    return bool(unit) and unit.isspace()


__all__ = [
    "estimate_text_width",
    "split_paragraphs",
    "split_units",
    "is_whitespace_unit",
]
