"""
文件路径：textflow/processors/engines/raster.py

说明：Pillow 将文本框渲染为透明 PNG；输出后缀为 .pdf 时再由 PyMuPDF 贴到页面上。
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Tuple

import fitz  # PyMuPDF
from PIL import Image, ImageDraw, ImageFont

from ...components import (
    ErrorHandler,
    FileHandler,
    font_file_for,
    get_logger,
    line_baseline_y,
    resolve_reportlab_font_name,
    aligned_line_x,
)
from ...variables import ERR_RENDER_FAILED
from .reportlab import color_to_rgb

if TYPE_CHECKING:  # pragma: no cover
    from ...textbox import TextBox


logger = get_logger(__name__)


def _load_font(box: "TextBox", font_file: Optional[Path], scale: float):
    size = box.font.size * scale
    file = font_file if font_file is not None else font_file_for(
        resolve_reportlab_font_name(box.font.family, box.font.weight, box.font.style)
    )
    if file is not None and file.exists() and file.suffix.lower() in {".ttf", ".otf"}:
        return ImageFont.truetype(str(file), size), str(file)
    return ImageFont.load_default(size=size), None


def _draw_box(draw: ImageDraw.ImageDraw, box: "TextBox", font, scale: float) -> int:
    lines = box.get_wrapped_lines()
    if not box.style.visible or not lines:
        return 0
    r, g, b = (int(round(v * 255)) for v in color_to_rgb(box.style.fill))
    fill = (r, g, b, int(round(box.style.opacity * 255)))
    ascent, _descent = font.getmetrics()
    spacing = box.font.char_spacing
    for index, line in enumerate(lines):
        if not line:
            continue
        baseline = line_baseline_y(box.top, box.font.size, box.font.line_height, index)
        x = aligned_line_x(box.left, box.width, box.measure_line(line), box.style.text_align)
        y_img = baseline * scale - ascent
        if spacing == 0:
            draw.text((x * scale, y_img), line, font=font, fill=fill)
            continue
        for char in line:
            draw.text((x * scale, y_img), char, font=font, fill=fill)
            x += box.measure_line(char) + spacing
    return len(lines)


def render_image(
    boxes: Iterable["TextBox"],
    page_size: Tuple[float, float],
    *,
    raster_scale: float,
    font_file: Optional[Path] = None,
) -> Tuple["Image.Image", int]:
    """渲染透明 RGBA 图像，返回 (image, lines_drawn)。"""
    scale = float(raster_scale) if raster_scale and raster_scale > 0 else 1.0
    img = Image.new("RGBA", (int(page_size[0] * scale), int(page_size[1] * scale)), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    total = 0
    for box in boxes:
        font, font_info = _load_font(box, font_file, scale)
        logger.debug("Raster 字体：%s", font_info or "Pillow 默认字体")
        total += _draw_box(draw, box, font, scale)
    return img, total


def fill_with_raster(
    boxes: Iterable["TextBox"],
    output_path: Path,
    *,
    page_size: Tuple[float, float],
    raster_scale: float,
    font_file: Optional[Path] = None,
) -> Tuple[str, int]:
    """渲染文本框并输出为 PNG（或 .pdf 后缀时嵌入单页 PDF）。

    返回 (engine_used, lines_drawn)。
    """
    FileHandler.ensure_parent_writable(output_path)
    try:
        img, total = render_image(boxes, page_size, raster_scale=raster_scale, font_file=font_file)
        if Path(output_path).suffix.lower() == ".pdf":
            buf = BytesIO()
            img.save(buf, format="PNG")
            doc = fitz.open()
            page = doc.new_page(width=page_size[0], height=page_size[1])
            page.insert_image(page.rect, stream=buf.getvalue(), keep_proportion=False, overlay=True)
            doc.save(str(output_path), deflate=True, clean=True, garbage=4)
            doc.close()
        else:
            img.save(str(output_path), format="PNG")
    except Exception as exc:  # noqa: BLE001
        raise RuntimeError(ErrorHandler.format_error(ERR_RENDER_FAILED, f"光栅渲染失败: {exc}")) from exc
    logger.info("Raster 输出完成：%s (%.1f KB)", output_path, Path(output_path).stat().st_size / 1024.0)
    return ("raster", total)


__all__ = ["render_image", "fill_with_raster"]
