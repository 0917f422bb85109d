"""
文件路径：textflow/processors/engines/svg.py

说明：将文本框导出为 SVG 标记。

- 每个换行结果输出一个 `<tspan>`（空行同样输出），首行 dy="0em"，其后 dy="{line_height}em"；
- tspan 的 x 为对齐偏移（left->0, center->width/2, right->width），位置由外层 translate 分组给出；
- include_bounds 时在同一分组内绘制虚线边框，便于调试。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, List

from ...components import export_canvas_size, text_anchor_for_alignment, x_offset_for_alignment
from ...components.markup import (
    AttrValue,
    create_svg_element,
    create_svg_group,
    create_svg_wrapper,
    create_text_span,
    font_props_to_svg,
    format_number,
    line_height_to_dy,
)
from ...variables import (
    CONST_SVG_SCENE_SIZE,
    STYLE_BOUNDS_DASHARRAY,
    STYLE_BOUNDS_STROKE,
)

if TYPE_CHECKING:  # pragma: no cover
    from ...textbox import TextBox


@dataclass(frozen=True)
class SVGExportOptions:
    include_wrapper: bool = True
    include_position: bool = True
    include_bounds: bool = False


def _text_attributes(box: "TextBox") -> Dict[str, AttrValue]:
    font = box.font
    style = box.style
    attributes = font_props_to_svg(
        font_family=font.family,
        font_size=font.size,
        font_weight=font.weight,
        font_style=font.style,
        fill=style.fill,
        stroke=style.stroke,
        stroke_width=style.stroke_width if style.stroke else None,
    )
    attributes["text-anchor"] = text_anchor_for_alignment(style.text_align)
    attributes["dominant-baseline"] = "text-before-edge"
    if font.char_spacing:
        attributes["letter-spacing"] = font.char_spacing
    if style.opacity != 1:
        attributes["opacity"] = style.opacity
    if not style.visible:
        attributes["visibility"] = "hidden"
    return attributes


def _box_fragment(box: "TextBox", options: SVGExportOptions) -> str:
    """单个文本框的 `<text>`（可能包在 translate 分组内），不含外层 `<svg>`。"""
    x = x_offset_for_alignment(box.style.text_align, box.width)
    spans = "".join(
        create_text_span(
            line,
            {"x": x, "dy": line_height_to_dy(box.font.line_height, is_first_line=index == 0)},
        )
        for index, line in enumerate(box.get_wrapped_lines())
    )
    content = create_svg_element("text", _text_attributes(box), spans)

    if options.include_bounds:
        bounds = create_svg_element(
            "rect",
            {
                "x": 0,
                "y": 0,
                "width": box.width,
                "height": box.height,
                "fill": "none",
                "stroke": STYLE_BOUNDS_STROKE,
                "stroke-dasharray": STYLE_BOUNDS_DASHARRAY,
            },
            self_closing=True,
        )
        content = bounds + content

    if options.include_position and (box.left != 0 or box.top != 0):
        transform = f"translate({format_number(box.left)}, {format_number(box.top)})"
        return create_svg_group(content, transform=transform)
    if options.include_bounds:
        return create_svg_group(content)
    return content


def textbox_to_svg(box: "TextBox", options: SVGExportOptions = SVGExportOptions()) -> str:
    """导出单个文本框。

    文本为空时：include_wrapper 返回仅含 xmlns 的 `<svg>`，否则返回空串。
    """
    if not box.get_wrapped_lines():
        return create_svg_wrapper("") if options.include_wrapper else ""

    fragment = _box_fragment(box, options)
    if not options.include_wrapper:
        return fragment

    left = box.left if options.include_position else 0.0
    top = box.top if options.include_position else 0.0
    width, height = export_canvas_size(box.width, box.height, left, top)
    return create_svg_wrapper(
        fragment,
        width=width,
        height=height,
        view_box=f"0 0 {format_number(width)} {format_number(height)}",
    )


def export_all_as_svg(boxes: Iterable["TextBox"], options: SVGExportOptions = SVGExportOptions()) -> str:
    """将多个文本框合并导出；带外层时使用固定的 800x600 画布。"""
    fragments: List[str] = [
        _box_fragment(box, options) for box in boxes if box.get_wrapped_lines()
    ]
    content = "".join(fragments)
    if not options.include_wrapper:
        return content
    width, height = CONST_SVG_SCENE_SIZE
    return create_svg_wrapper(content, width=width, height=height, view_box=f"0 0 {width} {height}")


__all__ = ["SVGExportOptions", "textbox_to_svg", "export_all_as_svg"]
