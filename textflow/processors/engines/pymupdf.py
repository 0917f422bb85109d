"""
文件路径：textflow/processors/engines/pymupdf.py

说明：PyMuPDF 直接绘制文本框的实现；若字体无法映射或内嵌则回退到 ReportLab 合成路径。

坐标：PyMuPDF 与文本框同为左上原点，基线 y 无需翻转。
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Tuple

import fitz  # PyMuPDF

from ...components import (
    FileHandler,
    ErrorHandler,
    font_file_for,
    get_logger,
    line_baseline_y,
    resolve_pymupdf_font_name,
    resolve_reportlab_font_name,
    aligned_line_x,
)
from ...variables import ERR_RENDER_FAILED
from .reportlab import color_to_rgb, fill_with_reportlab

if TYPE_CHECKING:  # pragma: no cover
    from ...textbox import TextBox


logger = get_logger(__name__)


def _prepare_fonts(
    page: "fitz.Page",
    boxes: Iterable["TextBox"],
    font_file: Optional[Path],
) -> Optional[Dict[str, str]]:
    """为每个 ReportLab 字体名准备 PyMuPDF 字体名；任一字体无法准备时返回 None。

    优先级：显式 font_file > 已注册 TTF > Base-14 内置别名。
    """
    names: Dict[str, str] = {}
    for box in boxes:
        rl_name = resolve_reportlab_font_name(box.font.family, box.font.weight, box.font.style)
        if rl_name in names:
            continue
        file = font_file if font_file is not None else font_file_for(rl_name)
        if file is not None:
            alias = f"F{len(names)}"
            try:
                page.insert_font(fontname=alias, fontfile=str(file))
            except Exception as exc:  # noqa: BLE001
                logger.warning("PyMuPDF 字体内嵌失败，将尝试回退：%s", exc)
                return None
            logger.info("PyMuPDF 已内嵌字体：%s -> %s", alias, file)
            names[rl_name] = alias
            continue
        builtin = resolve_pymupdf_font_name(rl_name)
        if builtin is None:
            logger.warning("PyMuPDF 无可用字体映射：%s", rl_name)
            return None
        names[rl_name] = builtin
    return names


def _draw_box(page: "fitz.Page", box: "TextBox", fontname: str) -> int:
    lines = box.get_wrapped_lines()
    if not box.style.visible or not lines:
        return 0
    font = box.font
    color = color_to_rgb(box.style.fill)
    for index, line in enumerate(lines):
        if not line:
            continue
        y = line_baseline_y(box.top, font.size, font.line_height, index)
        x = aligned_line_x(box.left, box.width, box.measure_line(line), box.style.text_align)
        if font.char_spacing == 0:
            page.insert_text(
                (x, y), line, fontsize=font.size, fontname=fontname, color=color, fill_opacity=box.style.opacity
            )
            continue
        for char in line:
            page.insert_text(
                (x, y), char, fontsize=font.size, fontname=fontname, color=color, fill_opacity=box.style.opacity
            )
            x += box.measure_line(char) + font.char_spacing
    return len(lines)


def fill_with_pymupdf(
    boxes: Iterable["TextBox"],
    output_pdf: Path,
    *,
    page_size: Tuple[float, float],
    base_pdf: Optional[Path],
    font_file: Optional[Path],
    temp_overlay_pdf: Path,
    clean_temp_on_exit: bool,
) -> Tuple[str, int]:
    """在 PDF 第一页上直接绘制文本框；必要时回退 ReportLab 合成路径。

    返回 (engine_used, lines_drawn)。
    """
    boxes = list(boxes)
    FileHandler.ensure_parent_writable(output_pdf)
    try:
        if base_pdf is not None:
            FileHandler.validate_readable_file(base_pdf)
            doc = fitz.open(str(base_pdf))
            page = doc[0]
        else:
            doc = fitz.open()
            page = doc.new_page(width=page_size[0], height=page_size[1])

        fontnames = _prepare_fonts(page, boxes, font_file)
        if fontnames is None:
            doc.close()
            return fill_with_reportlab(
                boxes,
                output_pdf,
                page_size=page_size,
                base_pdf=base_pdf,
                temp_overlay_pdf=temp_overlay_pdf,
                clean_temp_on_exit=clean_temp_on_exit,
            )

        total = 0
        for box in boxes:
            rl_name = resolve_reportlab_font_name(box.font.family, box.font.weight, box.font.style)
            total += _draw_box(page, box, fontnames[rl_name])

        doc.save(str(output_pdf), deflate=True, clean=True, garbage=4)
        doc.close()
        logger.info("PyMuPDF 输出完成：%s (%.1f KB)", output_pdf, Path(output_pdf).stat().st_size / 1024.0)
        return ("pymupdf", total)
    except (FileNotFoundError, PermissionError):
        raise
    except Exception as exc:  # noqa: BLE001
        raise RuntimeError(ErrorHandler.format_error(ERR_RENDER_FAILED, f"使用 PyMuPDF 写入失败: {exc}")) from exc


__all__ = ["fill_with_pymupdf"]
