from __future__ import annotations

from pathlib import Path

import pytest

from confspace import generate_from_file, load_spec
from confspace.constants import DEFAULT_PACKET_NAME

FIXTURES = Path(__file__).parent.parent / "fixtures" / "confspace"

EXAMPLES = {
    "worked_conditions/config.properties": 6,
    "packets_shared/config.yaml": 9,
    "grouped_repetitions/config.json": 8,
    "bound_pairs/config.properties": 6,
}


@pytest.mark.parametrize("example", sorted(EXAMPLES))
def test_examples_generate(example: str) -> None:
    confs = generate_from_file(FIXTURES / example)

    assert len(confs) == EXAMPLES[example]


def test_worked_conditions_file() -> None:
    spec = load_spec(FIXTURES / "worked_conditions" / "config.properties")
    confs = generate_from_file(FIXTURES / "worked_conditions" / "config.properties")

    assert len(spec.conditions) == 2
    assert {conf.packet for conf in confs} == {DEFAULT_PACKET_NAME}
    assert sorted(conf["P2"] for conf in confs if conf["P5"] == "k") == ["1", "2"]
    assert all("P3" not in conf for conf in confs if conf["P5"] == "j")


def test_packets_file_enumerates_each_packet() -> None:
    confs = generate_from_file(FIXTURES / "packets_shared" / "config.yaml")

    assert [conf.packet for conf in confs] == ["solver"] * 6 + ["mesh"] * 3
    assert {conf["seed"] for conf in confs} == {"42"}
    assert [conf["mesh.size"] for conf in confs if conf.packet == "mesh"] == ["10", "20", "30"]
    assert all("mesh.size" not in conf for conf in confs if conf.packet == "solver")


def test_grouped_repetitions_file() -> None:
    confs = generate_from_file(FIXTURES / "grouped_repetitions" / "config.json")

    assert [(conf["P1"], conf["P2"]) for conf in confs] == [
        ("b", "1"),
        ("b", "1"),
        ("a", "1"),
        ("a", "1"),
        ("b", "2"),
        ("b", "2"),
        ("a", "2"),
        ("a", "2"),
    ]
    assert confs[0] is not confs[1]


def test_bound_pairs_file() -> None:
    confs = generate_from_file(FIXTURES / "bound_pairs" / "config.properties")

    assert [(conf["model"], conf["batch"], conf["lr"]) for conf in confs] == [
        ("small", "8", "0.1"),
        ("small", "8", "0.2"),
        ("small", "8", "0.3"),
        ("large", "64", "0.1"),
        ("large", "64", "0.2"),
        ("large", "64", "0.3"),
    ]
    assert confs[0].get_value("lr", float) == pytest.approx(0.1)
    assert confs[0].get_value("batch", int) == 8
