from __future__ import annotations

import math

from textflow.components import estimate_text_width, is_whitespace_unit, split_paragraphs, split_units


class TestTextWidthEstimation:
    def test_empty_text_width_is_zero(self):
        assert estimate_text_width("", 12) == 0.0

    def test_mixed_cjk_ascii_width(self):
        # "测试ABC" -> 2*CJK*12 + 3*ASCII*12*0.6 = 24 + 21.6 = 45.6
        w = estimate_text_width("测试ABC", font_size=12, char_width_ratio=0.6)
        assert math.isclose(w, 45.6, rel_tol=1e-6, abs_tol=1e-6)


class TestSplitParagraphs:
    def test_crlf_and_lf(self):
        assert split_paragraphs("a\r\nb\nc") == ["a", "b", "c"]

    def test_trailing_newline_keeps_empty_paragraph(self):
        assert split_paragraphs("a\n") == ["a", ""]

    def test_empty(self):
        assert split_paragraphs("") == []
        assert split_paragraphs(None) == []


class TestSplitUnits:
    def test_words_and_whitespace_runs(self):
        assert split_units("ab  cd e") == ["ab", "  ", "cd", " ", "e"]

    def test_leading_whitespace_unit(self):
        assert split_units(" ab") == [" ", "ab"]

    def test_grapheme_mode(self):
        assert split_units("测 试", split_by_grapheme=True) == ["测", " ", "试"]

    def test_whitespace_unit(self):
        assert is_whitespace_unit("  \t")
        assert not is_whitespace_unit("a ")
        assert not is_whitespace_unit("")
