from __future__ import annotations

import pytest

from textflow.components import (
    is_bold,
    is_italic,
    register_font_file,
    resolve_pymupdf_font_name,
    resolve_reportlab_font_name,
)


class TestResolveFontName:
    @pytest.mark.parametrize(
        "family, weight, style, expected",
        [
            ("Arial", "normal", "normal", "Helvetica"),
            ("Times New Roman", "bold", "normal", "Times-Bold"),
            ("'Courier New', monospace", 700, "italic", "Courier-BoldOblique"),
            ("Times-Roman", "bold", "normal", "Times-Roman"),
            ("NoSuchFamily", "normal", "normal", "Helvetica"),
        ],
    )
    def test_css_family_to_base14(self, family, weight, style, expected):
        assert resolve_reportlab_font_name(family, weight, style) == expected

    def test_pymupdf_alias(self):
        assert resolve_pymupdf_font_name("Helvetica-Bold") is not None
        assert resolve_pymupdf_font_name("MyFont") is None

    def test_weight_and_style_flags(self):
        assert is_bold("bold") and is_bold(600) and not is_bold(400)
        assert is_italic("oblique") and not is_italic("normal")


class TestRegisterFontFile:
    def test_missing_file_reports_error_code(self, tmp_path):
        with pytest.raises(RuntimeError, match=r"^\[2003\] 字体文件不可用"):
            register_font_file("Missing", tmp_path / "missing.ttf")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "font.woff"
        path.write_bytes(b"\x00")
        with pytest.raises(RuntimeError, match=r"^\[2003\]"):
            register_font_file("Woff", path)

    def test_corrupt_file_is_wrapped(self, tmp_path):
        path = tmp_path / "broken.ttf"
        path.write_bytes(b"not a font")
        with pytest.raises(RuntimeError, match=r"^\[2003\] 字体注册失败") as info:
            register_font_file("Broken", path)
        assert info.value.__cause__ is not None
