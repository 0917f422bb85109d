"""
文件路径：textflow/components/markup.py

说明：SVG 标记拼装工具（纯格式化函数，不做布局与度量）。
"""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from ..variables import CONST_SVG_NUMBER_PRECISION, CONST_SVG_XMLNS


AttrValue = Union[str, int, float, bool, None]


def escape_svg_text(text: str) -> str:
    """转义 SVG 文本中的特殊字符（& < > " '）。"""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def format_number(value: Union[int, float]) -> str:
    """数值转属性字符串：整数值不带小数点，其余最多保留 CONST_SVG_NUMBER_PRECISION 位。"""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return str(value)
    if float(value).is_integer():
        return str(int(value))
    text = f"{value:.{CONST_SVG_NUMBER_PRECISION}f}".rstrip("0").rstrip(".")
    return text if text not in {"", "-0"} else "0"


def attributes_to_svg(attributes: Dict[str, AttrValue]) -> str:
    """属性字典 -> `key="value"` 串。

    - None 值跳过；
    - 布尔 True 仅输出键名，False 跳过；
    - 数值经 format_number 格式化，字符串值做转义。
    """
    parts: List[str] = []
    for key, value in attributes.items():
        if value is None:
            continue
        if isinstance(value, bool):
            if value:
                parts.append(key)
        elif isinstance(value, (int, float)):
            parts.append(f'{key}="{format_number(value)}"')
        else:
            parts.append(f'{key}="{escape_svg_text(str(value))}"')
    return " ".join(parts)


def create_svg_element(
    tag_name: str,
    attributes: Optional[Dict[str, AttrValue]] = None,
    content: str = "",
    self_closing: bool = False,
) -> str:
    """生成完整的 SVG 标签字符串。"""
    attrs = attributes_to_svg(attributes or {})
    attrs_str = f" {attrs}" if attrs else ""
    if self_closing:
        return f"<{tag_name}{attrs_str} />"
    return f"<{tag_name}{attrs_str}>{content}</{tag_name}>"


def create_svg_wrapper(
    content: str,
    width: Optional[float] = None,
    height: Optional[float] = None,
    view_box: Optional[str] = None,
    class_name: Optional[str] = None,
    style: Optional[str] = None,
) -> str:
    """生成外层 `<svg>` 元素。"""
    attributes: Dict[str, AttrValue] = {
        "xmlns": CONST_SVG_XMLNS,
        "width": width,
        "height": height,
        "viewBox": view_box,
        "class": class_name,
        "style": style,
    }
    return create_svg_element("svg", attributes, content)


def create_svg_group(
    content: str,
    transform: Optional[str] = None,
    attributes: Optional[Dict[str, AttrValue]] = None,
) -> str:
    """生成 `<g>` 分组；transform 为属性值本身，例如 "translate(10, 20)"。"""
    group_attributes: Dict[str, AttrValue] = dict(attributes or {})
    group_attributes["transform"] = transform
    return create_svg_element("g", group_attributes, content)


def create_text_span(text: str, attributes: Optional[Dict[str, AttrValue]] = None) -> str:
    """生成一行 `<tspan>`，文本自动转义。"""
    return create_svg_element("tspan", attributes, escape_svg_text(text))


def font_props_to_svg(
    font_family: Optional[str] = None,
    font_size: Optional[float] = None,
    font_weight: Union[str, int, None] = None,
    font_style: Optional[str] = None,
    fill: Optional[str] = None,
    stroke: Optional[str] = None,
    stroke_width: Optional[float] = None,
) -> Dict[str, AttrValue]:
    """字体与描边属性 -> SVG 属性字典（值为 None 的项在输出时跳过）。"""
    return {
        "font-family": font_family,
        "font-size": font_size,
        "font-weight": font_weight,
        "font-style": font_style,
        "fill": fill,
        "stroke": stroke,
        "stroke-width": stroke_width,
    }


def line_height_to_dy(line_height: float, is_first_line: bool = False) -> str:
    """行高 -> tspan dy（em 单位）；首行为 0em。"""
    if is_first_line:
        return "0em"
    return f"{format_number(line_height)}em"


__all__ = [
    "escape_svg_text",
    "format_number",
    "attributes_to_svg",
    "create_svg_element",
    "create_svg_wrapper",
    "create_svg_group",
    "create_text_span",
    "font_props_to_svg",
    "line_height_to_dy",
]
