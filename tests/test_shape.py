from __future__ import annotations

import pytest

from bracefmt import Config, IndentMismatchError
from bracefmt.shape import Indent, Shape


def test_indent_push_pop() -> None:
    config = Config()
    indent = Indent().block_indent(config).block_indent(config)
    assert indent == Indent(8)
    assert indent.level(config) == 2
    assert indent.block_unindent(config) == Indent(4)


def test_unindent_below_zero_is_an_invariant_violation() -> None:
    with pytest.raises(IndentMismatchError):
        Indent().block_unindent(Config())


def test_to_string() -> None:
    assert Indent(4).to_string(Config()) == "    "
    assert Indent(4).to_string_with_newline(Config()) == "\n    "
    assert Indent(8, 1).to_string(Config(hard_tabs=True)) == "\t\t "


def test_to_string_is_limited_by_max_width() -> None:
    assert Indent(200).to_string(Config(max_width=10)) == " " * 10


def test_shape_widths() -> None:
    config = Config()
    shape = Shape.indented(Indent(4), config)
    assert shape.width == 96
    assert shape.comment(config) == shape
    assert shape.comment(Config(wrap_comments=True)).width == 76
    assert shape.sub_width(97) is None
    assert shape.sub_width(6).width == 90
    assert shape.visual_indent(3).indent == Indent(4, 3)
