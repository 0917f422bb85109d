"""
文件路径：textflow/textbox.py

模块职责：
- 文本框模型：持有文本、宽度约束、字体配置与外观样式，并维护派生状态（换行结果与高度）；
- 任何影响布局的修改（文本、宽度、最小宽度、切分模式、换行策略、字体字段）在返回前完成重新换行，
  调用方通过修改接口永远读不到过期布局；
- 字体字段变化时整体清空度量缓存；纯几何（宽度）变化不清空。

组成（组合而非继承）：
- FontConfig：影响字形宽度与行距的字体配置（不可变）；
- TextStyle：填充、描边、透明度、对齐等外观（不影响布局）；
- SelectionRange：可选的选区（可编辑能力作为附加值存在）；
- TextBoxOptions：批量更新时显式枚举的可识别字段。

变量引用说明（来自 textflow/variables.py）：
- STYLE_* 默认字体与外观，CONST_TEXT_ALIGNS，ERR_INVALID_FONT_CONFIG / ERR_UNKNOWN_OPTION / ERR_DATA_INVALID
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .components import ErrorHandler, get_logger, split_paragraphs
from .processors.layout import max_line_width, wrap_text_lines
from .processors.metrics import MeasureCache, MetricsProvider, ReportLabMetrics
from .variables import (
    CONST_TEXT_ALIGNS,
    ERR_DATA_INVALID,
    ERR_INVALID_FONT_CONFIG,
    ERR_UNKNOWN_OPTION,
    STYLE_BOX_MIN_WIDTH_DEFAULT,
    STYLE_BOX_WIDTH_DEFAULT,
    STYLE_CHAR_SPACING_DEFAULT,
    STYLE_FILL_DEFAULT,
    STYLE_FONT_FAMILY_DEFAULT,
    STYLE_FONT_SIZE_DEFAULT,
    STYLE_FONT_STYLE_DEFAULT,
    STYLE_FONT_WEIGHT_DEFAULT,
    STYLE_LINE_HEIGHT_DEFAULT,
    STYLE_OPACITY_DEFAULT,
    STYLE_STROKE_WIDTH_DEFAULT,
    STYLE_TEXT_ALIGN_DEFAULT,
)


logger = get_logger(__name__)


@dataclass(frozen=True)
class FontConfig:
    """字体配置（不可变）。

    属性：
        family: 字体族，例如 "Arial"、"Times New Roman" 或已注册的 TTF 名称。
        size: 字号（> 0）。
        weight: 字重，"normal" / "bold" 或数值（>= 600 视为粗体）。
        style: "normal" / "italic" / "oblique"。
        line_height: 行高倍数（> 0）。
        char_spacing: 字符间距（px），可为负。
    """

    family: str = STYLE_FONT_FAMILY_DEFAULT
    size: float = STYLE_FONT_SIZE_DEFAULT
    weight: Union[str, int] = STYLE_FONT_WEIGHT_DEFAULT
    style: str = STYLE_FONT_STYLE_DEFAULT
    line_height: float = STYLE_LINE_HEIGHT_DEFAULT
    char_spacing: float = STYLE_CHAR_SPACING_DEFAULT

    def __post_init__(self) -> None:
        if not _is_positive_number(self.size):
            raise ValueError(ErrorHandler.format_error(ERR_INVALID_FONT_CONFIG, f"字号必须为正数: {self.size!r}"))
        if not _is_positive_number(self.line_height):
            raise ValueError(ErrorHandler.format_error(ERR_INVALID_FONT_CONFIG, f"行高必须为正数: {self.line_height!r}"))
        if not math.isfinite(float(self.char_spacing)):
            raise ValueError(ErrorHandler.format_error(ERR_INVALID_FONT_CONFIG, f"字符间距非法: {self.char_spacing!r}"))

    def width_key(self) -> Tuple[Any, ...]:
        """影响字形宽度的字段，用作度量缓存键的一部分（行高不影响宽度）。"""
        return (self.family, self.size, self.weight, self.style, self.char_spacing)

    @property
    def line_advance(self) -> float:
        """相邻两行基线间距：size * line_height。"""
        return self.size * self.line_height


def _is_positive_number(value: Any) -> bool:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(v) and v > 0


@dataclass
class TextStyle:
    """外观样式，不参与布局计算。"""

    fill: str = STYLE_FILL_DEFAULT
    stroke: Optional[str] = None
    stroke_width: float = STYLE_STROKE_WIDTH_DEFAULT
    opacity: float = STYLE_OPACITY_DEFAULT
    visible: bool = True
    text_align: str = STYLE_TEXT_ALIGN_DEFAULT

    def __post_init__(self) -> None:
        if self.text_align not in CONST_TEXT_ALIGNS:
            raise ValueError(ErrorHandler.format_error(ERR_DATA_INVALID, f"未知的对齐方式: {self.text_align!r}"))


@dataclass
class SelectionRange:
    """选区 [start, end)。"""

    start: int = 0
    end: int = 0


@dataclass
class TextBoxOptions:
    """批量更新的可识别字段；值为 None 表示不修改。

    影响：
    - text：重新拆段并换行；
    - width / min_width / split_by_grapheme / wrap：重新换行；
    - font_*、line_height、char_spacing：清空度量缓存并重新换行；
    - left / top / 样式字段：仅更新属性。
    """

    text: Optional[str] = None
    left: Optional[float] = None
    top: Optional[float] = None
    width: Optional[float] = None
    min_width: Optional[float] = None
    split_by_grapheme: Optional[bool] = None
    wrap: Optional[bool] = None
    font_family: Optional[str] = None
    font_size: Optional[float] = None
    font_weight: Optional[Union[str, int]] = None
    font_style: Optional[str] = None
    line_height: Optional[float] = None
    char_spacing: Optional[float] = None
    text_align: Optional[str] = None
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[float] = None
    opacity: Optional[float] = None
    visible: Optional[bool] = None

    # 外部（JSON / 前端）常用的驼峰命名 -> 字段名
    ALIASES = {
        "minWidth": "min_width",
        "splitByGrapheme": "split_by_grapheme",
        "fontFamily": "font_family",
        "fontSize": "font_size",
        "fontWeight": "font_weight",
        "fontStyle": "font_style",
        "lineHeight": "line_height",
        "charSpacing": "char_spacing",
        "textAlign": "text_align",
        "strokeWidth": "stroke_width",
    }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TextBoxOptions":
        """由字典构造；支持驼峰别名，未知键抛出 ValueError。"""
        known = set(cls.__dataclass_fields__)
        values: Dict[str, Any] = {}
        unknown: List[str] = []
        for raw_key, value in data.items():
            key = cls.ALIASES.get(str(raw_key), str(raw_key))
            if key not in known:
                unknown.append(str(raw_key))
                continue
            values[key] = value
        if unknown:
            raise ValueError(ErrorHandler.format_error(ERR_UNKNOWN_OPTION, f"未知的文本框属性: {', '.join(sorted(unknown))}"))
        return cls(**values)

    def font_changes(self) -> Dict[str, Any]:
        """本次更新涉及的 FontConfig 字段（已转换为 FontConfig 字段名）。"""
        changes: Dict[str, Any] = {}
        if self.font_family is not None:
            changes["family"] = self.font_family
        if self.font_size is not None:
            changes["size"] = self.font_size
        if self.font_weight is not None:
            changes["weight"] = self.font_weight
        if self.font_style is not None:
            changes["style"] = self.font_style
        if self.line_height is not None:
            changes["line_height"] = self.line_height
        if self.char_spacing is not None:
            changes["char_spacing"] = self.char_spacing
        return changes


class TextBox:
    """自动换行文本框。

    - wrap=True（文本框）：width 为外部给定的宽度约束（不低于 min_width），
      height = 换行后行数 * size * line_height；
    - wrap=False（普通文本）：仅按换行符拆段，width = 各行最大度量宽度。

    单线程、单写者；跨线程修改需由调用方加锁串行化。
    """

    def __init__(
        self,
        text: Optional[str] = "",
        *,
        left: float = 0.0,
        top: float = 0.0,
        width: float = STYLE_BOX_WIDTH_DEFAULT,
        min_width: float = STYLE_BOX_MIN_WIDTH_DEFAULT,
        split_by_grapheme: bool = False,
        wrap: bool = True,
        font: Optional[FontConfig] = None,
        style: Optional[TextStyle] = None,
        metrics: Optional[MetricsProvider] = None,
        editable: bool = True,
    ) -> None:
        self._text: str = "" if text is None else str(text)
        self.left = float(left)
        self.top = float(top)
        self._min_width = float(min_width)
        self._width = max(float(width), self._min_width) if wrap else float(width)
        self._split_by_grapheme = bool(split_by_grapheme)
        self._wrap = bool(wrap)
        self._font = font or FontConfig()
        self.style = style or TextStyle()
        self.metrics = metrics or ReportLabMetrics()
        self.editable = editable
        self.selection: Optional[SelectionRange] = None

        self._cache = MeasureCache()
        self._wrapped_lines: List[str] = []
        self._height: float = 0.0
        self._relayout()

    # ---------- 只读属性 ----------
    @property
    def text(self) -> str:
        return self._text

    @property
    def width(self) -> float:
        return self._width

    @property
    def min_width(self) -> float:
        return self._min_width

    @property
    def height(self) -> float:
        return self._height

    @property
    def split_by_grapheme(self) -> bool:
        return self._split_by_grapheme

    @property
    def wrap(self) -> bool:
        return self._wrap

    @property
    def font(self) -> FontConfig:
        return self._font

    @property
    def cache(self) -> MeasureCache:
        return self._cache

    @property
    def wrapped_lines(self) -> List[str]:
        return list(self._wrapped_lines)

    def get_wrapped_lines(self) -> List[str]:
        """换行结果的副本（渲染行号 = 列表下标）。"""
        return list(self._wrapped_lines)

    def get_text(self) -> str:
        return self._text

    # ---------- 度量 ----------
    def measure_line(self, line: str) -> float:
        """以当前字体度量一行文本（经度量缓存）。"""
        return self._cache.get_width(line, self._font, self.metrics.measure)

    # ---------- 修改接口 ----------
    def set_text(self, text: Optional[str]) -> "TextBox":
        """更新文本并重新换行。"""
        self._text = "" if text is None else str(text)
        self._clamp_selection()
        self._relayout()
        return self

    def set_width(self, width: float) -> "TextBox":
        """更新宽度约束（不低于 min_width）并重新换行；不清空度量缓存。"""
        self._width = max(float(width), self._min_width)
        self._relayout()
        return self

    def set_font_size(self, font_size: float) -> "TextBox":
        return self.set(TextBoxOptions(font_size=font_size))

    def set_font_family(self, font_family: str) -> "TextBox":
        return self.set(TextBoxOptions(font_family=font_family))

    def set(self, options: Union[TextBoxOptions, Mapping[str, Any]]) -> "TextBox":
        """批量更新显式枚举的字段，需要时在返回前完成重新换行。

        先构造并校验全部新值，再统一写回；任一字段非法时抛出 ValueError，文本框保持原状。
        """
        if not isinstance(options, TextBoxOptions):
            options = TextBoxOptions.from_mapping(options)

        font = self._font
        font_changes = options.font_changes()
        if font_changes:
            font = replace(self._font, **font_changes)

        style = self.style
        style_changes = {
            name: value
            for name, value in (
                ("text_align", options.text_align),
                ("fill", options.fill),
                ("stroke", options.stroke),
                ("stroke_width", options.stroke_width),
                ("opacity", options.opacity),
                ("visible", options.visible),
            )
            if value is not None
        }
        if style_changes:
            style = replace(self.style, **style_changes)

        try:
            text = self._text if options.text is None else str(options.text)
            wrap = self._wrap if options.wrap is None else bool(options.wrap)
            min_width = self._min_width if options.min_width is None else float(options.min_width)
            width = self._width if options.width is None else float(options.width)
            left = self.left if options.left is None else float(options.left)
            top = self.top if options.top is None else float(options.top)
        except (TypeError, ValueError) as exc:
            raise ValueError(ErrorHandler.format_error(ERR_DATA_INVALID, f"文本框属性非法: {exc}")) from exc
        if wrap and (options.wrap is not None or options.width is not None or options.min_width is not None):
            width = max(width, min_width)

        relayout = any(
            value is not None
            for value in (options.text, options.wrap, options.split_by_grapheme, options.min_width, options.width)
        )

        # 写回
        if options.text is not None:
            self._text = text
            self._clamp_selection()
        if font != self._font:
            self._font = font
            self._cache.clear()
            relayout = True
        self._wrap = wrap
        if options.split_by_grapheme is not None:
            self._split_by_grapheme = bool(options.split_by_grapheme)
        self._min_width = min_width
        self._width = width
        self.left = left
        self.top = top
        self.style = style

        if relayout:
            self._relayout()
        return self

    # ---------- 选区 ----------
    def set_selection_start(self, index: int) -> "TextBox":
        """设置选区起点（不小于 0）；不可编辑时忽略。"""
        if not self.editable:
            return self
        sel = self.selection or SelectionRange()
        self.selection = SelectionRange(max(int(index), 0), sel.end)
        return self

    def set_selection_end(self, index: int) -> "TextBox":
        """设置选区终点（不超过文本长度）；不可编辑时忽略。"""
        if not self.editable:
            return self
        sel = self.selection or SelectionRange()
        self.selection = SelectionRange(sel.start, min(int(index), len(self._text)))
        return self

    def get_selected_text(self) -> str:
        if self.selection is None:
            return ""
        return self._text[self.selection.start:self.selection.end]

    def _clamp_selection(self) -> None:
        if self.selection is None:
            return
        n = len(self._text)
        self.selection = SelectionRange(min(self.selection.start, n), min(self.selection.end, n))

    # ---------- 布局 ----------
    def _relayout(self) -> None:
        if not self._text:
            self._wrapped_lines = []
            self._height = 0.0
            if not self._wrap:
                self._width = 0.0
            return

        if self._wrap:
            self._wrapped_lines = wrap_text_lines(
                self._text,
                self.measure_line,
                self._width,
                self._split_by_grapheme,
            )
        else:
            self._wrapped_lines = split_paragraphs(self._text)
            self._width = max_line_width(self._wrapped_lines, self.measure_line)

        self._height = len(self._wrapped_lines) * self._font.line_advance
        logger.debug(
            "重新布局：lines=%s, width=%.2f, height=%.2f, cache(size=%s, hits=%s, misses=%s)",
            len(self._wrapped_lines),
            self._width,
            self._height,
            len(self._cache),
            self._cache.hits,
            self._cache.misses,
        )

    def to_dict(self) -> Dict[str, Any]:
        """导出为普通字典（用于日志与 CLI 输出）。"""
        return {
            "text": self._text,
            "left": self.left,
            "top": self.top,
            "width": self._width,
            "height": self._height,
            "min_width": self._min_width,
            "split_by_grapheme": self._split_by_grapheme,
            "wrap": self._wrap,
            "font": {
                "family": self._font.family,
                "size": self._font.size,
                "weight": self._font.weight,
                "style": self._font.style,
                "line_height": self._font.line_height,
                "char_spacing": self._font.char_spacing,
            },
            "text_align": self.style.text_align,
            "fill": self.style.fill,
            "lines": list(self._wrapped_lines),
        }


__all__ = [
    "FontConfig",
    "TextStyle",
    "SelectionRange",
    "TextBoxOptions",
    "TextBox",
]
