from __future__ import annotations

import math
from datetime import datetime

import pytest

from msereader import LocalFileName, ParseError, Point, ValueKind, coerce


def test_end_to_end_document(make_reader, messages):
    r = make_reader(
        "mse_version: 2000000\n"
        "name: Example\n"
        "description:\n"
        "\tLine one\n"
        "\tLine two\n",
        app_version="2.0.0",
    )
    assert r.file_app_version.number == 2000000
    assert r.handle("name", ValueKind.TEXT) == "Example"
    assert r.handle("description", ValueKind.TEXT) == "Line one\nLine two"
    assert r.warnings == []
    assert len(messages) == 0


def test_multiline_text_strips_block_indentation_only(make_reader):
    r = make_reader(
        "block:\n"
        "\ttext:\n"
        "\t\tfirst\n"
        "\t\t\tindented more\n"
        "\t\tlast\n"
        "\tafter: 1\n"
    )
    assert r.enter_block("block")
    assert r.handle("text", ValueKind.TEXT) == "first\n\tindented more\nlast"
    assert r.handle("after", ValueKind.INT) == 1
    assert r.warnings == []


def test_multiline_keeps_interior_blank_lines_but_drops_trailing_ones(make_reader):
    r = make_reader("text:\n\tone\n\n\n\ttwo\n\n\nnext: x\n")
    assert r.handle("text", ValueKind.TEXT) == "one\n\n\ntwo"
    assert r.key == "next"
    assert r.warnings == []


def test_colons_inside_text_blocks_are_plain_text(make_reader):
    r = make_reader("rule:\n\tTap: add one mana\n    spaced line\n")
    assert r.handle("rule", ValueKind.TEXT) == "Tap: add one mana"
    # the under-indented line ends the block and is read as a key again
    assert r.key == "spaced line"


def test_document_ending_after_colon_is_empty_text(make_reader):
    r = make_reader("notes:")
    assert r.handle("notes", ValueKind.TEXT) == ""
    assert r.at_end
    assert r.warnings == []


def test_final_line_without_newline_is_part_of_text(make_reader):
    r = make_reader("notes:\n\tonly line")
    assert r.handle("notes", ValueKind.TEXT) == "only line"


def test_underindented_comment_inside_text_block_warns(make_reader):
    r = make_reader("text:\n\tone\n# stray comment\n\ttwo\n")
    assert r.handle("text", ValueKind.TEXT) == "one"
    messages = [w.message for w in r.warnings]
    assert any("insufficiently indented" in m for m in messages)
    warning = next(w for w in r.warnings if "insufficiently indented" in w.message)
    assert warning.line_number == 3


def test_integer_values(make_reader):
    r = make_reader("a: 42\nb: -7\nc: 4x\n")
    assert r.handle("a", ValueKind.INT) == 42
    assert r.handle("b", ValueKind.INT) == -7
    assert r.handle("c", ValueKind.INT, 99) == 0
    assert [(w.line_number, w.message) for w in r.warnings] == [(3, "Expected integer instead of '4x'")]


def test_negative_unsigned_becomes_absolute_value(make_reader):
    r = make_reader("count: -5\n")
    assert r.handle("count", ValueKind.UINT) == 5
    assert len(r.warnings) == 1
    assert r.warnings[0].message == "Expected non-negative integer instead of -5"


def test_unsigned_garbage_defaults_to_zero():
    result = coerce(ValueKind.UINT, "many")
    assert result.value == 0
    assert result.warning == "Expected non-negative integer instead of 'many'"


def test_float_values():
    assert coerce(ValueKind.FLOAT, "2.5").value == 2.5
    assert coerce(ValueKind.FLOAT, "-1e3").value == -1000.0
    bad = coerce(ValueKind.FLOAT, "two", 1.5)
    assert bad.value == 1.5
    assert bad.warning == "Expected floating point number instead of 'two'"


@pytest.mark.parametrize("token,expected", [
    ("true", True), ("1", True), ("yes", True),
    ("false", False), ("0", False), ("no", False),
])
def test_boolean_tokens(token, expected):
    result = coerce(ValueKind.BOOL, token, not expected)
    assert result.value is expected
    assert result.warning is None


@pytest.mark.parametrize("token", ["True", "YES", "on", "2", ""])
def test_other_boolean_tokens_keep_destination(token):
    result = coerce(ValueKind.BOOL, token, True)
    assert result.value is True
    assert result.warning == f"Expected boolean ('true' or 'false') instead of '{token}'"


def test_tribool(make_reader):
    r = make_reader("a: yes\nb: maybe\n")
    assert r.handle("a", ValueKind.TRIBOOL) is True
    assert r.handle("b", ValueKind.TRIBOOL) is None
    assert len(r.warnings) == 1


def test_datetime_values(make_reader):
    r = make_reader("created: 2008-06-02 14:33:12\nupdated: 2024-01-05T08:00:00\n")
    assert r.handle("created", ValueKind.DATETIME) == datetime(2008, 6, 2, 14, 33, 12)
    assert r.handle("updated", ValueKind.DATETIME) == datetime(2024, 1, 5, 8, 0, 0)


def test_bad_datetime_is_fatal(make_reader):
    r = make_reader("first: 1\ncreated: 2008-06-02 14:33:12 and then some\n")
    r.handle("first", ValueKind.INT)
    with pytest.raises(ParseError) as excinfo:
        r.handle("created", ValueKind.DATETIME)
    assert excinfo.value.message == "Expected a date and time"
    assert excinfo.value.line_number == 2


def test_point_values():
    assert coerce(ValueKind.POINT, "(1.5,-2)").value == Point(1.5, -2.0)
    assert coerce(ValueKind.POINT, "( 3, 4) trailing").value == Point(3.0, 4.0)
    assert coerce(ValueKind.POINT, "(5)", Point(0, 9)).value == Point(5.0, 9.0)


@pytest.mark.parametrize("text", ["1,2", "(x,y)", ""])
def test_bad_point_is_fatal(text):
    with pytest.raises(ParseError, match=r"Expected \(x,y\)"):
        coerce(ValueKind.POINT, text)


def test_filename_values(make_reader):
    r = make_reader("image: images\\card.png\n")
    value = r.handle("image", ValueKind.FILENAME)
    assert value == LocalFileName("images/card.png")
    assert str(value) == "images/card.png"


def test_typed_shortcuts_read_current_key(make_reader):
    r = make_reader("a: 3\nb: 0.25\nc: no\n")
    assert r.enter_block("a")
    assert r.read_int() == 3
    r.exit_block()
    assert r.enter_block("b")
    assert r.read_float() == 0.25
    r.exit_block()
    assert r.enter_block("c")
    assert r.read_bool(True) is False
    r.exit_block()


def test_values_keep_leading_unicode_spaces(make_reader):
    r = make_reader("other: \u3000x\nname: \xa0Example\n")
    assert r.handle("other", ValueKind.TEXT) == "\u3000x"
    assert r.handle("name", ValueKind.TEXT) == "\xa0Example"
    assert r.warnings == []


def test_unicode_space_line_ends_text_block(make_reader):
    r = make_reader("text:\n\tone\n\u3000\n\ttwo\n")
    assert r.handle("text", ValueKind.TEXT) == "one"
    assert r.key == "\u3000"


def test_integers_outside_long_range_are_rejected():
    assert coerce(ValueKind.INT, "9223372036854775807").value == 2**63 - 1
    assert coerce(ValueKind.INT, "-9223372036854775808").warning is None
    big = coerce(ValueKind.INT, "99999999999999999999999", 5)
    assert big.value == 0
    assert big.warning == "Expected integer instead of '99999999999999999999999'"


def test_unsigned_outside_uint_range_is_rejected():
    assert coerce(ValueKind.UINT, "4294967295").value == 2**32 - 1
    big = coerce(ValueKind.UINT, "4294967296")
    assert big.value == 0
    assert big.warning == "Expected non-negative integer instead of '4294967296'"


@pytest.mark.parametrize("text", ["inf", "-Infinity", "+INF"])
def test_float_infinities(text):
    result = coerce(ValueKind.FLOAT, text)
    assert math.isinf(result.value)
    assert result.warning is None


def test_float_nan():
    result = coerce(ValueKind.FLOAT, "nan", 1.0)
    assert math.isnan(result.value)
    assert result.warning is None
    assert coerce(ValueKind.FLOAT, "infinite", 1.0).warning is not None
