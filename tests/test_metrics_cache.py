from __future__ import annotations

import math

import pytest

from textflow.processors.metrics import EstimatedMetrics, MeasureCache, PillowMetrics, ReportLabMetrics
from textflow.textbox import FontConfig, TextBox


class TestMetricsProviders:
    def test_empty_text_is_zero(self):
        assert ReportLabMetrics().measure("", FontConfig()) == 0.0

    def test_estimated_ascii_and_cjk(self):
        # "测试ABC" -> 2*12 + 3*12*0.6 = 45.6
        w = EstimatedMetrics().measure("测试ABC", FontConfig(size=12))
        assert math.isclose(w, 45.6, rel_tol=1e-6)

    def test_char_spacing_added_between_characters(self):
        base = EstimatedMetrics().measure("abcd", FontConfig(size=10))
        spaced = EstimatedMetrics().measure("abcd", FontConfig(size=10, char_spacing=2))
        assert math.isclose(spaced - base, 3 * 2)

    def test_single_character_has_no_spacing(self):
        base = EstimatedMetrics().measure("a", FontConfig(size=10))
        spaced = EstimatedMetrics().measure("a", FontConfig(size=10, char_spacing=5))
        assert base == spaced

    def test_negative_width_is_clamped(self):
        assert EstimatedMetrics().measure("ab", FontConfig(size=10, char_spacing=-100)) == 0.0

    def test_reportlab_matches_helvetica(self):
        from reportlab.pdfbase import pdfmetrics

        w = ReportLabMetrics().measure("Hello", FontConfig(family="Arial", size=16))
        assert math.isclose(w, pdfmetrics.stringWidth("Hello", "Helvetica", 16))

    def test_bold_is_wider(self):
        normal = ReportLabMetrics().measure("Hello", FontConfig(size=16))
        bold = ReportLabMetrics().measure("Hello", FontConfig(size=16, weight="bold"))
        assert bold > normal

    def test_pillow_without_font_file_falls_back(self):
        font = FontConfig(family="Arial", size=16)
        assert math.isclose(PillowMetrics().measure("Hello", font), ReportLabMetrics().measure("Hello", font))


class TestMeasureCache:
    def test_miss_then_hit(self):
        cache = MeasureCache()
        font = FontConfig(size=10)
        calls = []

        def measure(text, f):
            calls.append(text)
            return 1.0 * len(text)

        assert cache.get_width("abc", font, measure) == 3.0
        assert cache.get_width("abc", font, measure) == 3.0
        assert calls == ["abc"]
        assert (cache.hits, cache.misses) == (1, 1)

    def test_key_includes_font_fields(self):
        cache = MeasureCache()
        measure = lambda text, f: f.size * len(text)  # noqa: E731
        assert cache.get_width("ab", FontConfig(size=10), measure) == 20
        assert cache.get_width("ab", FontConfig(size=20), measure) == 40
        assert len(cache) == 2

    def test_line_height_does_not_split_entries(self):
        cache = MeasureCache()
        measure = lambda text, f: 1.0  # noqa: E731
        cache.get_width("ab", FontConfig(line_height=1.0), measure)
        cache.get_width("ab", FontConfig(line_height=2.0), measure)
        assert len(cache) == 1

    def test_clear(self):
        cache = MeasureCache()
        cache.get_width("ab", FontConfig(), lambda t, f: 1.0)
        cache.clear()
        assert len(cache) == 0

    @pytest.mark.parametrize("text", [""])
    def test_empty_text_is_not_cached(self, text):
        cache = MeasureCache()
        assert cache.get_width(text, FontConfig(), lambda t, f: 99.0) == 0.0
        assert len(cache) == 0


class TestMeasureCacheBound:
    def test_oldest_entry_is_evicted(self):
        cache = MeasureCache(max_entries=2)
        font = FontConfig()
        for text in ("a", "bb", "ccc"):
            cache.get_width(text, font, lambda t, f: float(len(t)))
        assert len(cache) == 2
        assert ("a",) + font.width_key() not in cache
        assert ("ccc",) + font.width_key() in cache

    def test_edited_box_stays_bounded(self, estimated_metrics):
        box = TextBox("", width=40, font=FontConfig(size=10), metrics=estimated_metrics)
        box.cache.max_entries = 16
        for i in range(50):
            box.set_text(f"draft {i} of a long paragraph")
        assert len(box.cache) <= 16
        assert box.get_wrapped_lines()[0] == "draft"
