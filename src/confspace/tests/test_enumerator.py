from confspace.enumerator import cartesian


def test_cartesian_first_parameter_varies_slowest() -> None:
    rows = cartesian({"P1": ("a", "b"), "P2": ("1", "2")})

    assert rows == [
        {"P1": "a", "P2": "1"},
        {"P1": "a", "P2": "2"},
        {"P1": "b", "P2": "1"},
        {"P1": "b", "P2": "2"},
    ]


def test_cartesian_count_is_product_of_lengths() -> None:
    rows = cartesian({"a": ("1", "2", "3"), "b": ("x", "y"), "c": ("z",), "d": ()})

    assert len(rows) == 6


def test_cartesian_valueless_parameters_get_empty_string() -> None:
    rows = cartesian({"P": ("x", "y"), "E": ()})

    assert rows == [{"P": "x", "E": ""}, {"P": "y", "E": ""}]


def test_cartesian_without_participants_yields_single_row() -> None:
    assert cartesian({"E": ()}) == [{"E": ""}]
    assert cartesian({}) == [{}]


def test_cartesian_rows_are_independent() -> None:
    rows = cartesian({"P": ("x", "y")})
    rows[0]["P"] = "changed"

    assert rows[1]["P"] == "y"
