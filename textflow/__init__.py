"""
文件路径：textflow/__init__.py

说明：自动换行文本框，输出到 PDF（ReportLab / PyMuPDF）、PNG（Pillow）与 SVG。
"""

from .processors.engines.svg import SVGExportOptions, export_all_as_svg, textbox_to_svg
from .processors.layout import wrap_text_lines
from .processors.metrics import EstimatedMetrics, MeasureCache, PillowMetrics, ReportLabMetrics
from .text_renderer import (
    RenderTextboxOptions,
    TextboxRenderer,
    export_simple_textbox_as_svg,
    export_textbox_as_svg,
    render_simple_textbox,
    render_textbox,
)
from .textbox import FontConfig, SelectionRange, TextBox, TextBoxOptions, TextStyle

__version__ = "0.1.0"

__all__ = [
    "FontConfig",
    "TextStyle",
    "SelectionRange",
    "TextBoxOptions",
    "TextBox",
    "EstimatedMetrics",
    "ReportLabMetrics",
    "PillowMetrics",
    "MeasureCache",
    "wrap_text_lines",
    "SVGExportOptions",
    "textbox_to_svg",
    "export_all_as_svg",
    "RenderTextboxOptions",
    "TextboxRenderer",
    "render_textbox",
    "export_textbox_as_svg",
    "render_simple_textbox",
    "export_simple_textbox_as_svg",
]
