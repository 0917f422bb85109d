"""
文件路径：textflow/processors/engines/reportlab.py

说明：ReportLab 画布绘制文本框、生成文字图层 PDF，以及使用 PyPDF2 与底稿 PDF 合并。

坐标：文本框以左上角为原点，绘制时按页面高度翻转为 ReportLab 的左下原点。
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Tuple

import pdfplumber
from PyPDF2 import PdfReader, PdfWriter
from reportlab.lib import colors
from reportlab.pdfgen import canvas

from ...components import (
    ErrorHandler,
    FileHandler,
    get_logger,
    line_baseline_y,
    resolve_reportlab_font_name,
    to_bottom_left_y,
    x_offset_for_alignment,
)
from ...variables import ERR_PDF_MERGE_FAILED

if TYPE_CHECKING:  # pragma: no cover
    from ...textbox import TextBox


logger = get_logger(__name__)


def parse_color(value: Optional[str]) -> colors.Color:
    """颜色字符串（名称 / #RRGGBB / rgb(...)）-> ReportLab Color；无法解析时回退为黑色。"""
    if not value:
        return colors.black
    try:
        return colors.toColor(value)
    except ValueError:
        logger.warning("无法解析颜色：%s，已使用黑色", value)
        return colors.black


def color_to_rgb(value: Optional[str]) -> Tuple[float, float, float]:
    """颜色字符串 -> (r, g, b)，分量范围 0~1。"""
    c = parse_color(value)
    return (float(c.red), float(c.green), float(c.blue))


def draw_textbox(c: canvas.Canvas, box: "TextBox", page_height: float) -> int:
    """在 ReportLab 画布上绘制一个文本框，返回绘制的行数。

    - 第 i 行基线：top + size + i * size * line_height（左上原点），再翻转为左下原点；
    - 对齐锚点：left + 对齐偏移（left->0, center->width/2, right->width）；
    - char_spacing 非 0 时逐字符绘制并按 字宽 + char_spacing 前进。
    """
    lines = box.get_wrapped_lines()
    if not box.style.visible or not lines:
        return 0

    font = box.font
    font_name = resolve_reportlab_font_name(font.family, font.weight, font.style)
    align = box.style.text_align
    anchor_x = box.left + x_offset_for_alignment(align, box.width)

    c.saveState()
    c.setFillColor(parse_color(box.style.fill))
    c.setFillAlpha(box.style.opacity)
    c.setFont(font_name, font.size)
    for index, line in enumerate(lines):
        if not line:
            continue
        y = to_bottom_left_y(line_baseline_y(box.top, font.size, font.line_height, index), page_height)
        if font.char_spacing == 0:
            if align == "center":
                c.drawCentredString(anchor_x, y, line)
            elif align == "right":
                c.drawRightString(anchor_x, y, line)
            else:
                c.drawString(anchor_x, y, line)
            continue

        x = anchor_x
        if align == "center":
            x -= box.measure_line(line) / 2
        elif align == "right":
            x -= box.measure_line(line)
        for char in line:
            c.drawString(x, y, char)
            x += box.measure_line(char) + font.char_spacing
    c.restoreState()
    return len(lines)


def build_text_layer(
    boxes: Iterable["TextBox"],
    overlay_path: Path,
    page_size: Tuple[float, float],
) -> int:
    """使用 ReportLab 生成仅含文本框的单页 PDF，返回绘制的总行数。"""
    FileHandler.ensure_parent_writable(overlay_path)
    w, h = page_size
    c = canvas.Canvas(str(overlay_path), pagesize=(w, h))
    total = 0
    for box in boxes:
        total += draw_textbox(c, box, page_height=h)
    c.showPage()
    c.save()
    return total


def read_page_size(pdf_path: Path, page_index: int = 0) -> Tuple[float, float]:
    """用 pdfplumber 读取底稿 PDF 指定页的尺寸（pt）。"""
    FileHandler.validate_readable_file(pdf_path)
    with pdfplumber.open(str(pdf_path)) as pdf:
        page = pdf.pages[page_index]
        return float(page.width), float(page.height)


def merge_pdfs(base_pdf: Path, overlay_pdf: Path, output_pdf: Path) -> None:
    """将 overlay 覆盖合并到 base 上，输出到 output_pdf。"""
    FileHandler.ensure_parent_writable(output_pdf)
    try:
        base_reader = PdfReader(str(base_pdf))
        overlay_reader = PdfReader(str(overlay_pdf))

        writer = PdfWriter()
        for i, page in enumerate(base_reader.pages):
            base_page = page
            if i < len(overlay_reader.pages):
                overlay_page = overlay_reader.pages[i]
                base_page.merge_page(overlay_page)  # PyPDF2 3.x API
            writer.add_page(base_page)

        with open(output_pdf, "wb") as f:  # noqa: P103
            writer.write(f)
    except Exception as exc:  # noqa: BLE001
        raise RuntimeError(ErrorHandler.format_error(ERR_PDF_MERGE_FAILED, f"PDF 合并失败: {exc}")) from exc


def fill_with_reportlab(
    boxes: Iterable["TextBox"],
    output_pdf: Path,
    *,
    page_size: Tuple[float, float],
    base_pdf: Optional[Path],
    temp_overlay_pdf: Path,
    clean_temp_on_exit: bool,
) -> Tuple[str, int]:
    """ReportLab 路径：无底稿时直接输出图层 PDF；有底稿时先生成图层再合并。

    返回 (engine_used, lines_drawn)。
    """
    boxes = list(boxes)
    if base_pdf is None:
        lines = build_text_layer(boxes, output_pdf, page_size)
        logger.info("ReportLab 输出完成：%s（%s 个文本框，%s 行）", output_pdf, len(boxes), lines)
        return ("reportlab", lines)

    size = read_page_size(base_pdf)
    lines = build_text_layer(boxes, temp_overlay_pdf, size)
    merge_pdfs(base_pdf, temp_overlay_pdf, output_pdf)
    if clean_temp_on_exit:
        temp_overlay_pdf.unlink(missing_ok=True)
    logger.info("ReportLab 合并输出完成：%s（底稿=%s）", output_pdf, base_pdf)
    return ("reportlab", lines)


__all__ = [
    "parse_color",
    "color_to_rgb",
    "draw_textbox",
    "build_text_layer",
    "read_page_size",
    "merge_pdfs",
    "fill_with_reportlab",
]
