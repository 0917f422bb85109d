"""
文件路径：textflow/processors/layout.py

说明：贪心换行（与度量解耦，度量通过 `measure(line) -> width` 回调注入）。

- wrap_text_lines：按 `\\n` / `\\r\\n` 拆段，空段落输出一个空行，非空段落逐段换行后顺序拼接；
- wrap_paragraph：单段贪心换行。单元（单词/空白串，或逐字符）逐个累加，
  `measure(当前行 + 单元) <= max_width` 即接受（等于也接受）；
  单个单元本身超宽时：逐字符模式或单字符单元原样独占一行，
  按词模式下的超长单词退化为逐字符装箱，末尾残段作为下一行缓冲的起点。

不变量：除“单个字符本身超宽”外，任何输出行的度量宽度都不超过 max_width；
每一步至少消费一个单元或字符，因此对任意宽度都能终止。
"""

from __future__ import annotations

from typing import Callable, List, Optional

from ..components import is_whitespace_unit, split_paragraphs, split_units


MeasureFunc = Callable[[str], float]


def _flush(lines: List[str], buffer: str) -> None:
    """将累积行去除首尾空白后输出；去空白后为空则不输出。"""
    line = buffer.strip()
    if line:
        lines.append(line)


def _pack_characters(word: str, measure: MeasureFunc, max_width: float, lines: List[str]) -> str:
    """将超长单词逐字符装箱：完整子行直接输出（不去空白），返回末尾残段。"""
    chunk = ""
    for char in word:
        trial = chunk + char
        if measure(trial) <= max_width:
            chunk = trial
        else:
            if chunk:
                lines.append(chunk)
            chunk = char
    return chunk


def wrap_paragraph(
    paragraph: str,
    measure: MeasureFunc,
    max_width: float,
    split_by_grapheme: bool = False,
) -> List[str]:
    """对单个非空段落执行贪心换行。

    参数：
        paragraph: 不含换行符的段落文本。
        measure: 度量回调，返回字符串在当前字体下的宽度。
        max_width: 最大行宽。
        split_by_grapheme: True 时按字符切分单元，否则按空白切分（保留空白单元）。

    返回：
        行列表；整段已能放下时原样返回 `[paragraph]`（不去空白）。
    """
    if measure(paragraph) <= max_width:
        return [paragraph]

    lines: List[str] = []
    buffer = ""
    for unit in split_units(paragraph, split_by_grapheme):
        if measure(buffer + unit) <= max_width:
            buffer += unit
            continue

        if buffer:
            _flush(lines, buffer)
            buffer = ""
            if is_whitespace_unit(unit):
                continue
            if measure(unit) <= max_width:
                buffer = unit
                continue
        elif is_whitespace_unit(unit):
            # 行首空白本就会被去除，超宽时直接丢弃
            continue

        # 单元本身超宽
        if split_by_grapheme or len(unit) == 1:
            lines.append(unit)
        else:
            buffer = _pack_characters(unit, measure, max_width, lines)

    if buffer:
        _flush(lines, buffer)

    return lines if lines else [""]


def wrap_text_lines(
    text: Optional[str],
    measure: MeasureFunc,
    max_width: float,
    split_by_grapheme: bool = False,
) -> List[str]:
    """按最大行宽将整段文本分行。

    - 空文本或 None 返回空列表；
    - 空段落（连续换行、末尾换行）各输出一个空行，不会被丢弃；
    - 输出行数 >= 段落数。
    """
    wrapped: List[str] = []
    for paragraph in split_paragraphs(text):
        if not paragraph:
            wrapped.append("")
            continue
        wrapped.extend(wrap_paragraph(paragraph, measure, max_width, split_by_grapheme))
    return wrapped


def max_line_width(lines: List[str], measure: MeasureFunc) -> float:
    """多行中的最大度量宽度；空列表为 0。"""
    return max((measure(line) for line in lines), default=0.0)


__all__ = ["wrap_paragraph", "wrap_text_lines", "max_line_width"]
