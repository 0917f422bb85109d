"""
文件路径：textflow/components/fonts.py

说明：字体解析与注册。

- 将 FontConfig 的 family/weight/style 解析为 ReportLab 字体名（Base-14 或已注册的 TTF）；
- 将 ReportLab Base-14 字体名映射为 PyMuPDF 内置字体别名；
- 注册 TTF/OTF 字体文件（进程级，写入加锁，读取无锁）。
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Dict, Optional, Union

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase._fontdata import standardFonts
from reportlab.pdfbase.ttfonts import TTFont

from . import ErrorHandler, get_logger
from ..variables import (
    CONST_FONT_FAMILY_ALIASES,
    CONST_FONT_FAMILY_FALLBACK,
    CONST_PYMUPDF_BASE14,
    ERR_FONT_REGISTER_FAILED,
)


logger = get_logger(__name__)

_REGISTER_LOCK = threading.Lock()
_REGISTERED_FONT_FILES: Dict[str, Path] = {}

# Base-14 字体族的变体命名
_BASE14_VARIANTS: Dict[str, Dict[str, str]] = {
    "Helvetica": {
        "regular": "Helvetica",
        "bold": "Helvetica-Bold",
        "italic": "Helvetica-Oblique",
        "bold_italic": "Helvetica-BoldOblique",
    },
    "Times": {
        "regular": "Times-Roman",
        "bold": "Times-Bold",
        "italic": "Times-Italic",
        "bold_italic": "Times-BoldItalic",
    },
    "Courier": {
        "regular": "Courier",
        "bold": "Courier-Bold",
        "italic": "Courier-Oblique",
        "bold_italic": "Courier-BoldOblique",
    },
}


def is_bold(weight: Union[str, int, float, None]) -> bool:
    """CSS 风格字重是否为粗体（bold/bolder 或数值 >= 600）。"""
    if weight is None:
        return False
    if isinstance(weight, (int, float)):
        return weight >= 600
    w = str(weight).strip().lower()
    if w in {"bold", "bolder"}:
        return True
    return w.isdigit() and int(w) >= 600


def is_italic(style: Optional[str]) -> bool:
    """CSS 风格字体样式是否为斜体（italic/oblique）。"""
    return str(style or "").strip().lower() in {"italic", "oblique"}


def _variant_key(weight: Union[str, int, float, None], style: Optional[str]) -> str:
    bold, italic = is_bold(weight), is_italic(style)
    if bold and italic:
        return "bold_italic"
    if bold:
        return "bold"
    if italic:
        return "italic"
    return "regular"


def resolve_reportlab_font_name(
    family: str,
    weight: Union[str, int, float, None] = "normal",
    style: Optional[str] = "normal",
) -> str:
    """解析 ReportLab 可用的字体名。

    优先级：
    1) family 本身是已注册字体（TTF 或 Base-14 全名）时原样使用；
    2) 通过 CONST_FONT_FAMILY_ALIASES 映射到 Base-14 字体族，再按字重/样式选变体；
    3) 均不命中时回退到 CONST_FONT_FAMILY_FALLBACK。
    """
    name = str(family or "").strip()
    if name in _REGISTERED_FONT_FILES or name in standardFonts:
        return name
    base = CONST_FONT_FAMILY_ALIASES.get(name.lower())
    if base is None:
        # 支持 "Arial, sans-serif" 这类 CSS 字体栈：取第一个可识别项
        for part in name.split(","):
            base = CONST_FONT_FAMILY_ALIASES.get(part.strip().strip("'\"").lower())
            if base is not None:
                break
    if base is None:
        logger.debug("未识别的字体族：%s，回退到 %s", name, CONST_FONT_FAMILY_FALLBACK)
        base = CONST_FONT_FAMILY_FALLBACK
    return _BASE14_VARIANTS[base][_variant_key(weight, style)]


def resolve_pymupdf_font_name(reportlab_font_name: str) -> Optional[str]:
    """ReportLab Base-14 字体名 -> PyMuPDF 内置字体别名；无法映射返回 None。"""
    return CONST_PYMUPDF_BASE14.get(reportlab_font_name)


def register_font_file(font_name: str, font_file: Path) -> str:
    """向 ReportLab 注册 TTF/OTF 字体文件，返回注册名。

    重复注册同名同文件时直接返回。

    异常：
        RuntimeError: 文件不存在或注册失败（错误码 ERR_FONT_REGISTER_FAILED）。
    """
    path = Path(font_file)
    with _REGISTER_LOCK:
        if _REGISTERED_FONT_FILES.get(font_name) == path:
            return font_name
        if not path.exists() or path.suffix.lower() not in {".ttf", ".otf"}:
            raise RuntimeError(ErrorHandler.format_error(ERR_FONT_REGISTER_FAILED, f"字体文件不可用: {path}"))
        try:
            pdfmetrics.registerFont(TTFont(font_name, str(path)))
        except Exception as exc:  # noqa: BLE001
            raise RuntimeError(ErrorHandler.format_error(ERR_FONT_REGISTER_FAILED, f"字体注册失败: {path}: {exc}")) from exc
        _REGISTERED_FONT_FILES[font_name] = path
    logger.info("已注册字体：%s -> %s", font_name, path)
    return font_name


def font_file_for(font_name: str) -> Optional[Path]:
    """返回已注册字体对应的文件路径；Base-14 或未注册时返回 None。"""
    return _REGISTERED_FONT_FILES.get(font_name)


__all__ = [
    "is_bold",
    "is_italic",
    "resolve_reportlab_font_name",
    "resolve_pymupdf_font_name",
    "register_font_file",
    "font_file_for",
]
