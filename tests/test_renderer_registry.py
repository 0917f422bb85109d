from __future__ import annotations

import pdfplumber
import pytest
from reportlab.pdfgen import canvas

from textflow.text_renderer import (
    RenderTextboxOptions,
    TextboxRenderer,
    export_simple_textbox_as_svg,
    export_textbox_as_svg,
    render_simple_textbox,
    render_textbox,
)


@pytest.fixture
def renderer(estimated_metrics):
    return TextboxRenderer(metrics=estimated_metrics)


def opts(**kwargs):
    kwargs.setdefault("font_size", 10)
    return RenderTextboxOptions(**kwargs)


class TestOptions:
    def test_from_mapping_aliases(self):
        o = RenderTextboxOptions.from_mapping({"text": "a", "left": 5, "top": 6, "fontSize": 12, "align": "center"})
        assert (o.x, o.y, o.font_size, o.text_align) == (5, 6, 12, "center")

    def test_from_mapping_unknown_key(self):
        with pytest.raises(ValueError, match=r"\[2002\]"):
            RenderTextboxOptions.from_mapping({"txt": "a"})

    def test_to_textbox(self, estimated_metrics):
        box = opts(text="Hello world", width=40).to_textbox(estimated_metrics)
        assert box.get_wrapped_lines() == ["Hello", "world"]


class TestRegistry:
    def test_create_then_update_in_place(self, renderer):
        box = renderer.create_or_update("a", opts(text="Hello", width=200))
        same = renderer.create_or_update("a", opts(text="Hello world", width=40, x=3))
        assert same is box
        assert box.get_wrapped_lines() == ["Hello", "world"]
        assert box.left == 3
        assert len(renderer) == 1 and "a" in renderer

    def test_unknown_id(self, renderer, tmp_path):
        assert renderer.get("nope") is None
        assert renderer.export_as_svg("nope") == ""
        c = canvas.Canvas(str(tmp_path / "x.pdf"))
        assert renderer.render(c, "nope", 800) is False

    def test_remove_and_clear(self, renderer):
        renderer.create_or_update("a", opts(text="x"))
        renderer.create_or_update("b", opts(text="y"))
        assert renderer.remove("a") is True
        assert renderer.remove("a") is False
        assert renderer.ids() == ["b"]
        renderer.clear()
        assert len(renderer) == 0

    def test_export_all_as_svg(self, renderer):
        renderer.create_or_update("a", opts(text="one"))
        renderer.create_or_update("b", opts(text="two", y=40))
        svg = renderer.export_all_as_svg()
        assert 'width="800" height="600"' in svg
        assert svg.count("<text ") == 2

    def test_render_all_to_canvas(self, renderer, tmp_path):
        renderer.create_or_update("a", opts(text="one\ntwo", x=20, y=20))
        renderer.create_or_update("b", opts(text="three", x=20, y=100))
        path = tmp_path / "all.pdf"
        c = canvas.Canvas(str(path), pagesize=(300, 300))
        assert renderer.render_all(c, 300) == 3
        c.save()
        with pdfplumber.open(str(path)) as pdf:
            text = pdf.pages[0].extract_text()
        assert "three" in text


class TestRenderToFile:
    def test_svg_file_and_stats(self, renderer, tmp_path):
        renderer.create_or_update("a", opts(text="Hello world", width=40))
        out = renderer.render_to_file(tmp_path / "out.svg", engine="svg")
        assert out.read_text(encoding="utf-8").startswith("<svg")
        assert renderer.last_engine_used == "svg"
        assert renderer.last_render_stats == {"boxes": 1, "lines": 2, "engine": "svg"}

    def test_reportlab_pdf(self, renderer, tmp_path):
        renderer.create_or_update("a", opts(text="Hello", x=50, y=50))
        out = renderer.render_to_file(tmp_path / "out.pdf", engine="reportlab", page_size=(300, 200))
        with pdfplumber.open(str(out)) as pdf:
            assert (float(pdf.pages[0].width), float(pdf.pages[0].height)) == (300.0, 200.0)
            assert "Hello" in pdf.pages[0].extract_text()
        assert renderer.last_render_stats["engine"] == "reportlab"

    def test_unknown_engine(self, renderer, tmp_path):
        with pytest.raises(ValueError, match=r"\[3001\]"):
            renderer.render_to_file(tmp_path / "out.x", engine="canvas")

    def test_engine_failure_is_wrapped(self, renderer, tmp_path, monkeypatch):
        def boom(*args, **kwargs):
            raise KeyError("broken")

        monkeypatch.setattr("textflow.text_renderer.fill_with_raster", boom)
        renderer.create_or_update("a", opts(text="x"))
        with pytest.raises(RuntimeError, match=r"\[3002\]") as info:
            renderer.render_to_file(tmp_path / "out.png", engine="raster")
        assert isinstance(info.value.__cause__, KeyError)


class TestOneShot:
    def test_render_textbox_returns_layout(self, tmp_path, estimated_metrics):
        c = canvas.Canvas(str(tmp_path / "one.pdf"))
        box = render_textbox(c, opts(text="Hello world", width=40), 800, metrics=estimated_metrics)
        assert box.get_wrapped_lines() == ["Hello", "world"]

    def test_render_simple_textbox(self, tmp_path):
        c = canvas.Canvas(str(tmp_path / "simple.pdf"))
        box = render_simple_textbox(c, "Hello", 10, 10, 200, 800)
        assert box.font.size == 16
        assert box.get_wrapped_lines() == ["Hello"]

    def test_export_textbox_as_svg(self):
        svg = export_textbox_as_svg(opts(text="Hi", x=5, y=5))
        assert 'transform="translate(5, 5)"' in svg

    def test_export_simple_textbox_as_svg(self):
        svg = export_simple_textbox_as_svg("Hello", 200)
        assert svg.startswith("<svg")
        assert 'font-size="16"' in svg
        assert export_simple_textbox_as_svg("", 200, include_wrapper=False) == ""
