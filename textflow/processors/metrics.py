"""
文件路径：textflow/processors/metrics.py

说明：文本度量（Metrics Provider）与度量缓存。

- 度量约定：`measure(text, font) -> float`，空串为 0；字符间距非 0 时追加 (len - 1) * char_spacing；
- 默认使用 ReportLab 字体度量（pdfmetrics.stringWidth），失败时回退为宽度估算；
- MeasureCache 以 (文本, 影响宽度的字体字段...) 元组为键，由所属文本框独占。
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from reportlab.pdfbase import pdfmetrics

from ..components import (
    estimate_text_width,
    font_file_for,
    get_logger,
    resolve_reportlab_font_name,
)
from ..variables import CONST_CHAR_WIDTH_RATIO, CONST_MEASURE_CACHE_MAX_ENTRIES

if TYPE_CHECKING:  # pragma: no cover
    from ..textbox import FontConfig


logger = get_logger(__name__)


class MetricsProvider:
    """度量提供者基类；子类实现 `_raw_width`（不含字符间距）。"""

    name: str = "base"

    def measure(self, text: str, font: "FontConfig") -> float:
        """返回 text 在 font 下的像素宽度（>= 0）。"""
        if not text:
            return 0.0
        width = float(self._raw_width(text, font))
        if font.char_spacing:
            width += (len(text) - 1) * font.char_spacing
        return max(0.0, width)

    def _raw_width(self, text: str, font: "FontConfig") -> float:
        raise NotImplementedError


class EstimatedMetrics(MetricsProvider):
    """按字符类别估算宽度：非 ASCII 计整字号，ASCII 计 ratio * 字号。无需字体文件，结果稳定。"""

    name = "estimate"

    def __init__(self, char_width_ratio: float = CONST_CHAR_WIDTH_RATIO) -> None:
        self.char_width_ratio = char_width_ratio

    def _raw_width(self, text: str, font: "FontConfig") -> float:
        return estimate_text_width(text, font.size, self.char_width_ratio)


class ReportLabMetrics(MetricsProvider):
    """ReportLab 字体度量；度量失败时回退为宽度估算。"""

    name = "reportlab"

    def _raw_width(self, text: str, font: "FontConfig") -> float:
        font_name = resolve_reportlab_font_name(font.family, font.weight, font.style)
        try:
            return pdfmetrics.stringWidth(text, font_name, font.size)
        except Exception as exc:  # noqa: BLE001
            logger.debug("ReportLab 度量失败（%s），回退为估算：%s", font_name, exc)
            return estimate_text_width(text, font.size)


@lru_cache(maxsize=32)
def _load_truetype(font_file: str, size: float):
    from PIL import ImageFont  # 延迟导入 Pillow

    return ImageFont.truetype(font_file, size)


class PillowMetrics(MetricsProvider):
    """Pillow TrueType 度量，与光栅引擎的实际绘制保持一致。

    未提供字体文件且字体未注册 TTF 时，回退到 ReportLab 度量。
    """

    name = "pillow"

    def __init__(self, font_file: Optional[Path] = None) -> None:
        self.font_file = Path(font_file) if font_file else None
        self._fallback = ReportLabMetrics()

    def _resolve_font_file(self, font: "FontConfig") -> Optional[Path]:
        if self.font_file is not None:
            return self.font_file
        return font_file_for(resolve_reportlab_font_name(font.family, font.weight, font.style))

    def _raw_width(self, text: str, font: "FontConfig") -> float:
        font_file = self._resolve_font_file(font)
        if font_file is None:
            return self._fallback._raw_width(text, font)
        return _load_truetype(str(font_file), font.size).getlength(text)


class MeasureCache:
    """文本宽度缓存：键为 (text, family, size, weight, style, char_spacing)。

    字体字段变化时由文本框整体清空；宽度约束变化不影响缓存。
    条目数超过 max_entries 时淘汰最早写入的条目。
    """

    def __init__(self, max_entries: int = CONST_MEASURE_CACHE_MAX_ENTRIES) -> None:
        self.max_entries = max(int(max_entries), 1)
        self._widths: Dict[Tuple, float] = {}
        self.hits: int = 0
        self.misses: int = 0

    def get_width(
        self,
        text: str,
        font: "FontConfig",
        measure: Callable[[str, "FontConfig"], float],
    ) -> float:
        if not text:
            return 0.0
        key = (text,) + font.width_key()
        cached = self._widths.get(key)
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        width = measure(text, font)
        if len(self._widths) >= self.max_entries:
            del self._widths[next(iter(self._widths))]
        self._widths[key] = width
        return width

    def clear(self) -> None:
        self._widths.clear()

    def __len__(self) -> int:
        return len(self._widths)

    def __contains__(self, key: object) -> bool:
        return key in self._widths


__all__ = [
    "MetricsProvider",
    "EstimatedMetrics",
    "ReportLabMetrics",
    "PillowMetrics",
    "MeasureCache",
]
