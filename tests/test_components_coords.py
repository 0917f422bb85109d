import pytest

from textflow.components import (
    aligned_line_x,
    export_canvas_size,
    line_baseline_y,
    text_anchor_for_alignment,
    to_bottom_left_y,
    x_offset_for_alignment,
)


@pytest.mark.parametrize(
    "align, expected",
    [("left", 0), ("center", 100), ("right", 200), ("justify", 0)],
)
def test_alignment_offset(align, expected):
    assert x_offset_for_alignment(align, 200) == expected


@pytest.mark.parametrize(
    "align, anchor",
    [("left", "start"), ("center", "middle"), ("right", "end"), ("justify", "start")],
)
def test_text_anchor(align, anchor):
    assert text_anchor_for_alignment(align) == anchor


def test_baseline_of_each_line():
    assert line_baseline_y(10, 20, 1.5, 0) == 30
    assert line_baseline_y(10, 20, 1.5, 2) == 90


def test_flip_to_bottom_left():
    assert to_bottom_left_y(30, 800) == 770


@pytest.mark.parametrize(
    "align, expected",
    [("left", 10), ("center", 10 + 100 - 20), ("right", 10 + 200 - 40)],
)
def test_aligned_line_start(align, expected):
    assert aligned_line_x(10, 200, 40, align) == expected


def test_export_canvas_minimums():
    assert export_canvas_size(10, 5, 0, 0) == (100, 50)
    assert export_canvas_size(200, 80, 10, 20) == (210, 100)
