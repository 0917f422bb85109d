"""
文件路径：textflow/components/coords.py

说明：对齐、基线与导出画布尺寸相关的坐标计算。

坐标约定：文本框的 left/top 以左上角为原点（与 SVG、PyMuPDF、Pillow 一致）；
ReportLab 以左下角为原点，绘制前需用 `to_bottom_left_y` 翻转 Y 轴。
"""

from __future__ import annotations

from typing import Tuple

from ..variables import (
    CONST_SVG_MIN_HEIGHT,
    CONST_SVG_MIN_WIDTH,
    STYLE_TEXT_ANCHORS,
)


def x_offset_for_alignment(text_align: str, width: float) -> float:
    """按对齐方式返回行锚点相对文本框左边的 X 偏移。

    left/justify -> 0，center -> width / 2，right -> width。
    """
    if text_align == "center":
        return width / 2
    if text_align == "right":
        return width
    return 0.0


def text_anchor_for_alignment(text_align: str) -> str:
    """对齐方式 -> SVG text-anchor（start / middle / end）。"""
    return STYLE_TEXT_ANCHORS.get(text_align, "start")


def line_baseline_y(top: float, font_size: float, line_height: float, index: int) -> float:
    """第 index 行（0 基）的基线 Y：top + font_size + index * font_size * line_height。"""
    return top + font_size + index * font_size * line_height


def to_bottom_left_y(y_top_based: float, page_height: float) -> float:
    """将左上原点的 Y 值转换为 ReportLab 左下原点的 Y。"""
    return page_height - y_top_based


def aligned_line_x(left: float, box_width: float, line_width: float, text_align: str) -> float:
    """返回一行文字的起笔 X（左端），使该行按对齐方式落在锚点上。

    参数：
        left: 文本框左边 X。
        box_width: 文本框宽度（对齐参照）。
        line_width: 该行已度量宽度。
        text_align: left / center / right / justify。
    """
    anchor = left + x_offset_for_alignment(text_align, box_width)
    if text_align == "center":
        return anchor - line_width / 2
    if text_align == "right":
        return anchor - line_width
    return anchor


def export_canvas_size(width: float, height: float, left: float, top: float) -> Tuple[float, float]:
    """SVG 外层画布尺寸：(max(width + left, 100), max(height + top, 50))。"""
    return (
        max(width + left, CONST_SVG_MIN_WIDTH),
        max(height + top, CONST_SVG_MIN_HEIGHT),
    )


__all__ = [
    "x_offset_for_alignment",
    "text_anchor_for_alignment",
    "line_baseline_y",
    "to_bottom_left_y",
    "aligned_line_x",
    "export_canvas_size",
]
