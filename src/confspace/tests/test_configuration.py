from decimal import Decimal

import pytest

from confspace.configuration import Configuration
from confspace.constants import DEFAULT_PACKET_NAME
from confspace.errors import ConfigErrorCode, ConfigurationError, InternalInvariantError


def test_configuration_is_read_only_mapping() -> None:
    conf = Configuration({"a": "1", "b": "x"})

    assert dict(conf) == {"a": "1", "b": "x"}
    assert len(conf) == 2
    assert "a" in conf
    with pytest.raises(TypeError):
        conf["a"] = "2"  # type: ignore[index]


def test_configuration_equality_is_identity() -> None:
    first = Configuration({"a": "1"})
    second = first.copy()

    assert first != second
    assert first == first
    assert first.same_parameters(second)
    assert len({first, second}) == 2


def test_same_parameters_requires_identical_keys() -> None:
    conf = Configuration({"a": "1"})

    assert not conf.same_parameters({"a": "1", "b": "2"})
    assert not conf.same_parameters({"a": "2"})
    assert not conf.same_parameters({"a": " 1 "})
    assert conf.same_parameters({"a": 1})


def test_packet_defaults_and_is_assigned_once() -> None:
    conf = Configuration({"a": "1"})
    assert conf.packet == DEFAULT_PACKET_NAME

    conf.assign_packet("P1")
    assert conf.packet == "P1"

    with pytest.raises(InternalInvariantError):
        conf.assign_packet("P2")


def test_copy_does_not_carry_packet() -> None:
    conf = Configuration({"a": "1"})
    conf.assign_packet("P1")

    assert conf.copy().packet == DEFAULT_PACKET_NAME


def test_get_value_parses_on_demand() -> None:
    conf = Configuration({"n": "3", "ratio": "0.5", "flag": "true", "d": "1.10"})

    assert conf.get_value("n", int) == 3
    assert conf.get_value("ratio", float) == 0.5
    assert conf.get_value("flag", bool) is True
    assert conf.get_value("d", Decimal) == Decimal("1.10")
    assert conf.get_value("missing", int, 7) == 7


def test_get_value_raises_for_bad_values() -> None:
    conf = Configuration({"n": "three"})

    with pytest.raises(ConfigurationError) as exc:
        conf.get_value("n", int)

    assert exc.value.code is ConfigErrorCode.INVALID_VALUE
    assert exc.value.ctx["param"] == "n"


def test_get_list() -> None:
    conf = Configuration({"xs": "{1, 2,3}", "empty": "", "braces": "{}", "bare": "1,2"})

    assert conf.get_list("xs", int) == [1, 2, 3]
    assert conf.get_list("empty", int) == []
    assert conf.get_list("braces") == []
    assert conf.get_list("missing", default=["d"]) == ["d"]
    with pytest.raises(ConfigurationError):
        conf.get_list("bare", int)
