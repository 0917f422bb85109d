from __future__ import annotations

import pytest

from textflow.components.markup import (
    attributes_to_svg,
    create_svg_element,
    create_svg_group,
    create_svg_wrapper,
    create_text_span,
    escape_svg_text,
    format_number,
    line_height_to_dy,
)


def test_escape_special_characters():
    assert escape_svg_text("a<b & \"c\" 'd'>") == "a&lt;b &amp; &quot;c&quot; &#39;d&#39;&gt;"


@pytest.mark.parametrize(
    "value, expected",
    [(10, "10"), (10.0, "10"), (1.16, "1.16"), (23.200000000000003, "23.2"), (-0.0000001, "0")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_attributes_skip_none_and_format_values():
    text = attributes_to_svg({"a": None, "b": 1.5, "c": "x&y", "d": True, "e": False})
    assert text == 'b="1.5" c="x&amp;y" d'


def test_self_closing_element():
    assert create_svg_element("rect", {"width": 4}, self_closing=True) == '<rect width="4" />'


def test_wrapper_without_size_is_bare():
    assert create_svg_wrapper("") == '<svg xmlns="http://www.w3.org/2000/svg"></svg>'


def test_group_transform_is_written_once():
    assert create_svg_group("x", transform="translate(1, 2)") == '<g transform="translate(1, 2)">x</g>'


def test_text_span_escapes_content():
    assert create_text_span("<a>", {"dy": "0em"}) == '<tspan dy="0em">&lt;a&gt;</tspan>'


def test_line_height_to_dy():
    assert line_height_to_dy(1.16, is_first_line=True) == "0em"
    assert line_height_to_dy(1.16) == "1.16em"
