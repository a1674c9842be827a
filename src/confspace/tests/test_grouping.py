import pytest

from confspace.enumerator import cartesian
from confspace.errors import ConfigErrorCode, ConfigurationError
from confspace.grouping import group_by, split_by_param


def pairs(rows):
    return [(row["P1"], row["P2"]) for row in rows]


@pytest.fixture
def rows():
    return cartesian({"P1": ("a", "b"), "P2": ("1", "2")})


def test_group_by_outer_first(rows) -> None:
    assert pairs(group_by(rows, ["P1", "P2"])) == [("a", "1"), ("a", "2"), ("b", "1"), ("b", "2")]


def test_group_by_reversed_names(rows) -> None:
    assert pairs(group_by(rows, ["P2", "P1"])) == [("a", "1"), ("b", "1"), ("a", "2"), ("b", "2")]


def test_group_by_is_stable_in_first_seen_order() -> None:
    shuffled = [
        {"P1": "b", "P2": "2"},
        {"P1": "a", "P2": "1"},
        {"P1": "b", "P2": "1"},
        {"P1": "a", "P2": "2"},
    ]

    assert pairs(group_by(shuffled, ["P1"])) == [("b", "2"), ("b", "1"), ("a", "1"), ("a", "2")]
    assert pairs(group_by(shuffled, ["P1", "P2"])) == [("b", "2"), ("b", "1"), ("a", "1"), ("a", "2")]


def test_group_by_is_exhaustive(rows) -> None:
    grouped = group_by(rows, ["P2"])

    assert len(grouped) == len(rows)
    assert all(any(row is original for original in rows) for row in grouped)


def test_group_by_without_names_returns_copy(rows) -> None:
    grouped = group_by(rows, [])

    assert grouped == rows
    assert grouped is not rows


def test_group_by_missing_parameter() -> None:
    confs = [{"P1": "a"}, {"P2": "1"}]

    with pytest.raises(ConfigurationError) as exc:
        group_by(confs, ["P1"])

    assert exc.value.code is ConfigErrorCode.INVALID_GROUPING
    assert exc.value.ctx["param"] == "P1"


def test_split_by_param_groups() -> None:
    confs = [{"k": "x"}, {"k": "y"}, {"k": "x"}]

    assert split_by_param(confs, "k") == [[{"k": "x"}, {"k": "x"}], [{"k": "y"}]]
