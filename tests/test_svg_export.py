from __future__ import annotations

import pytest

from textflow.processors.engines.svg import SVGExportOptions, export_all_as_svg, textbox_to_svg
from textflow.textbox import FontConfig, TextBox, TextStyle

TEXT_OPEN = (
    '<text font-family="Arial" font-size="10" font-weight="normal" font-style="normal" fill="black" '
    'text-anchor="start" dominant-baseline="text-before-edge">'
)


@pytest.fixture
def hello_box(estimated_metrics):
    # ASCII 宽 6 -> "Hello" / "world" 各占一行
    return TextBox("Hello world", width=40, font=FontConfig(size=10), metrics=estimated_metrics)


class TestSingleBox:
    def test_fragment_without_wrapper(self, hello_box):
        svg = textbox_to_svg(hello_box, SVGExportOptions(include_wrapper=False))
        assert svg == (
            TEXT_OPEN
            + '<tspan x="0" dy="0em">Hello</tspan><tspan x="0" dy="1.16em">world</tspan></text>'
        )

    def test_wrapper_and_translate(self, hello_box):
        hello_box.left, hello_box.top = 10, 20
        svg = textbox_to_svg(hello_box)
        assert svg.startswith(
            '<svg xmlns="http://www.w3.org/2000/svg" width="100" height="50" viewBox="0 0 100 50">'
            '<g transform="translate(10, 20)">'
        )
        assert svg.endswith("</text></g></svg>")

    def test_wrapper_grows_with_box(self, estimated_metrics):
        box = TextBox("x\n" * 9, left=100, top=0, width=150, font=FontConfig(size=10), metrics=estimated_metrics)
        svg = textbox_to_svg(box)
        assert 'width="250"' in svg
        assert 'height="116"' in svg

    def test_no_position(self, hello_box):
        hello_box.left = 10
        svg = textbox_to_svg(hello_box, SVGExportOptions(include_wrapper=False, include_position=False))
        assert "transform" not in svg

    def test_bounds_rect(self, hello_box):
        svg = textbox_to_svg(hello_box, SVGExportOptions(include_wrapper=False, include_bounds=True))
        assert (
            '<rect x="0" y="0" width="40" height="23.2" fill="none" stroke="#999999" stroke-dasharray="4 2" />'
            in svg
        )

    def test_empty_lines_emit_tspans(self, estimated_metrics):
        box = TextBox("A\n\nB", font=FontConfig(size=10), metrics=estimated_metrics)
        svg = textbox_to_svg(box, SVGExportOptions(include_wrapper=False))
        assert svg.count("<tspan") == 3
        assert '<tspan x="0" dy="1.16em"></tspan>' in svg

    def test_empty_text(self, estimated_metrics):
        box = TextBox("", metrics=estimated_metrics)
        assert textbox_to_svg(box) == '<svg xmlns="http://www.w3.org/2000/svg"></svg>'
        assert textbox_to_svg(box, SVGExportOptions(include_wrapper=False)) == ""

    @pytest.mark.parametrize("align, anchor, x", [("center", "middle", "20"), ("right", "end", "40")])
    def test_alignment(self, estimated_metrics, align, anchor, x):
        box = TextBox(
            "Hi", width=40, font=FontConfig(size=10), style=TextStyle(text_align=align), metrics=estimated_metrics
        )
        svg = textbox_to_svg(box, SVGExportOptions(include_wrapper=False))
        assert f'text-anchor="{anchor}"' in svg
        assert f'<tspan x="{x}" dy="0em">Hi</tspan>' in svg

    def test_letter_spacing_opacity_visibility(self, estimated_metrics):
        box = TextBox(
            "Hi",
            font=FontConfig(size=10, char_spacing=2),
            style=TextStyle(opacity=0.5, visible=False),
            metrics=estimated_metrics,
        )
        svg = textbox_to_svg(box, SVGExportOptions(include_wrapper=False))
        assert 'letter-spacing="2"' in svg
        assert 'opacity="0.5"' in svg
        assert 'visibility="hidden"' in svg

    def test_text_is_escaped(self, estimated_metrics):
        box = TextBox("a<b & c", width=500, font=FontConfig(size=10), metrics=estimated_metrics)
        assert "a&lt;b &amp; c" in textbox_to_svg(box)


class TestScene:
    def test_all_boxes_in_fixed_canvas(self, estimated_metrics):
        boxes = [
            TextBox("one", left=10, top=10, font=FontConfig(size=10), metrics=estimated_metrics),
            TextBox("two", left=10, top=50, font=FontConfig(size=10), metrics=estimated_metrics),
        ]
        svg = export_all_as_svg(boxes)
        assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="800" height="600" viewBox="0 0 800 600">')
        assert svg.count("<text ") == 2

    def test_without_wrapper_joins_fragments(self, estimated_metrics):
        boxes = [
            TextBox("one", font=FontConfig(size=10), metrics=estimated_metrics),
            TextBox("", font=FontConfig(size=10), metrics=estimated_metrics),
        ]
        svg = export_all_as_svg(boxes, SVGExportOptions(include_wrapper=False))
        assert svg.startswith("<text ") and svg.count("<text ") == 1
