from __future__ import annotations

import pdfplumber
from PIL import Image

from textflow.processors.engines.raster import fill_with_raster, render_image
from textflow.textbox import FontConfig, TextBox, TextStyle


def _box(**style):
    return TextBox("Hello world", left=10, top=10, width=150, font=FontConfig(size=16), style=TextStyle(**style))


def test_png_output_is_scaled(tmp_path):
    out = tmp_path / "text.png"
    engine, lines = fill_with_raster([_box()], out, page_size=(200, 100), raster_scale=2.0)
    assert (engine, lines) == ("raster", 1)
    with Image.open(out) as img:
        assert img.size == (400, 200)
        assert img.mode == "RGBA"
        assert img.getbbox() is not None


def test_pixels_use_fill_color():
    img, _ = render_image([_box(fill="#ff0000")], (200, 100), raster_scale=1.0)
    inked = [px for px in img.getdata() if px[3] >= 128]
    assert inked
    assert all(r > g and r > b for r, g, b, _ in inked)


def test_invisible_box_leaves_image_transparent():
    img, lines = render_image([_box(visible=False)], (200, 100), raster_scale=1.0)
    assert lines == 0
    assert img.getbbox() is None


def test_pdf_output_embeds_image(tmp_path):
    out = tmp_path / "text.pdf"
    fill_with_raster([_box()], out, page_size=(200, 100), raster_scale=2.0)
    with pdfplumber.open(str(out)) as pdf:
        page = pdf.pages[0]
        assert (float(page.width), float(page.height)) == (200.0, 100.0)
        assert len(page.images) == 1
