from decimal import Decimal
from enum import Enum

import pytest

from confspace.errors import ConfigErrorCode, ConfigurationError
from confspace.values import (
    expand_range,
    expand_ranges,
    extract_param_values,
    format_number,
    parse_value,
    split_list,
    split_values,
)


class Color(Enum):
    RED = 1
    BLUE = 2


def test_expand_ranges_even_steps() -> None:
    assert expand_ranges("[2:2:10]", ";") == "2;4;6;8;10"


def test_expand_ranges_single_point() -> None:
    assert expand_ranges("[0:1:0]", ";") == "0"


def test_expand_ranges_tolerates_whitespace_and_keeps_surroundings() -> None:
    assert expand_ranges("a;[ 1 : 1 : 3 ];b", ";") == "a;1;2;3;b"


def test_expand_range_descending() -> None:
    assert expand_range("10", "-5", "0") == ["10", "5", "0"]


def test_expand_range_fractional_steps_are_exact() -> None:
    assert expand_range("0", "0.1", "0.3") == ["0", "0.1", "0.2", "0.3"]
    assert expand_range("0", "0.25", "1") == ["0", "0.25", "0.5", "0.75", "1"]


def test_expand_range_renders_whole_numbers_without_fraction() -> None:
    assert expand_range("1.0", "1.0", "3.0") == ["1", "2", "3"]


@pytest.mark.parametrize(
    "first,step,last,error_key",
    [
        ("0", "0", "5", "step cannot be zero"),
        ("0", "0", "0", "step cannot be zero"),
        ("0", "3", "10", "should be zero"),
        ("0", "-1", "5", "cannot reach"),
        ("a", "1", "3", "could not parse"),
        ("0", "1", "inf", "finite"),
    ],
)
def test_expand_range_rejects_invalid_definitions(first, step, last, error_key) -> None:
    with pytest.raises(ConfigurationError) as exc:
        expand_range(first, step, last)

    assert exc.value.code is ConfigErrorCode.INVALID_RANGE
    assert error_key in exc.value.ctx["error"]


def test_expand_ranges_reports_offending_token() -> None:
    with pytest.raises(ConfigurationError) as exc:
        expand_ranges("x;[1:0:4]", ";")

    assert exc.value.ctx["range"] == "[1:0:4]"


def test_format_number() -> None:
    assert format_number(Decimal("5.0")) == "5"
    assert format_number(Decimal("-0")) == "0"
    assert format_number(Decimal("2.50")) == "2.5"
    assert format_number(Decimal("1E+2")) == "100"


def test_split_values_expands_and_trims() -> None:
    assert split_values("a; [1:1:3] ;b", ";") == ["a", "1", "2", "3", "b"]


def test_split_values_keeps_duplicates_and_order() -> None:
    assert split_values("b;a;b", ";") == ["b", "a", "b"]


def test_split_values_custom_separator() -> None:
    assert split_values("x,[1:1:2]", ",") == ["x", "1", "2"]


def test_split_values_empty_and_trailing_tokens() -> None:
    assert split_values("", ";") == []
    assert split_values("   ", ";") == []
    assert split_values("a;b;", ";") == ["a", "b"]
    assert split_values("a;;b", ";") == ["a", "", "b"]


def test_split_values_rejects_empty_separator() -> None:
    with pytest.raises(ConfigurationError) as exc:
        split_values("a", "")

    assert exc.value.code is ConfigErrorCode.INVALID_DIRECTIVE


def test_extract_param_values_handles_scalars_and_sequences() -> None:
    params = extract_param_values(
        {"a": ["x", "[1:1:2]"], "b": 3, "c": "", "d": True},
        ";",
    )

    assert params == {"a": ("x", "1", "2"), "b": ("3",), "c": (), "d": ("true",)}
    assert list(params) == ["a", "b", "c", "d"]


@pytest.mark.parametrize(
    "raw,kind,expected",
    [
        (" 42 ", int, 42),
        ("2.5", float, 2.5),
        ("TRUE", bool, True),
        ("false", bool, False),
        ("0.1", Decimal, Decimal("0.1")),
        ("BLUE", Color, Color.BLUE),
        (" text ", str, "text"),
    ],
)
def test_parse_value_success(raw, kind, expected) -> None:
    parsed = parse_value(raw, kind)

    assert parsed.ok
    assert parsed.value == expected


@pytest.mark.parametrize(
    "raw,kind",
    [("4.2", int), ("yes", bool), ("abc", float), ("GREEN", Color), ("x", Decimal), ("x", list)],
)
def test_parse_value_failure_is_tagged(raw, kind) -> None:
    parsed = parse_value(raw, kind)

    assert not parsed.ok
    assert parsed.value is None
    with pytest.raises(ConfigurationError) as exc:
        parsed.unwrap(param="p")
    assert exc.value.code is ConfigErrorCode.INVALID_VALUE
    assert exc.value.ctx["param"] == "p"


def test_split_list_with_and_without_braces() -> None:
    assert split_list("{a, b ,c}") == ["a", "b", "c"]
    assert split_list("a,b") == ["a", "b"]
    assert split_list("{}") == []


def test_split_list_can_keep_empty_items() -> None:
    assert split_list("{A,,B}", keep_empty=True) == ["A", "", "B"]
    assert split_list("{A, }", keep_empty=True) == ["A", ""]
    assert split_list("{ }", keep_empty=True) == []
