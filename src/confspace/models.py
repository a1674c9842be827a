"""Data structures backing configuration-space generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Sequence

from confspace.constants import ASSIGNMENT, DEFAULT_REPETITIONS, PACKET_SEPARATOR


@dataclass(frozen=True)
class ParamValue:
    """A single ``parameter=value`` assignment."""

    param: str
    value: str

    def holds(self, params: Mapping[str, str]) -> bool:
        return params.get(self.param) == self.value

    def __str__(self) -> str:
        return f"{self.param}{ASSIGNMENT}{self.value}"


@dataclass(frozen=True)
class ValueBinding:
    """Bidirectional ``first <-> second`` implication between two assignments."""

    first: ParamValue
    second: ParamValue

    @property
    def params(self) -> tuple[str, str]:
        return (self.first.param, self.second.param)

    def is_satisfied_by(self, params: Mapping[str, str]) -> bool:
        if self.first.param not in params or self.second.param not in params:
            return False
        return self.first.holds(params) == self.second.holds(params)

    def __str__(self) -> str:
        return f"{self.first}:{self.second}"


class Action(Enum):
    INCLUDE = "INCLUDE"
    DISCARD = "DISCARD"


@dataclass(frozen=True)
class GenerationCondition:
    """Keep (INCLUDE) or drop (DISCARD) ``targets`` while ``control`` holds."""

    action: Action
    targets: frozenset[str]
    control: ParamValue

    @property
    def params(self) -> tuple[str, ...]:
        return (*sorted(self.targets), self.control.param)

    def __str__(self) -> str:
        return ":".join((self.action.value, *sorted(self.targets), str(self.control)))


@dataclass(frozen=True)
class Packet:
    """Independently enumerated family of parameters."""

    name: str
    params: Mapping[str, tuple[str, ...]]
    owned: tuple[str, ...] = ()

    def owns(self, param: str) -> bool:
        return param_in_packet(param, self.name)


def param_in_packet(param: str, packet: str) -> bool:
    return param.startswith(packet + PACKET_SEPARATOR)


@dataclass(frozen=True)
class GenerationSpec:
    """Fully parsed generation request: expanded values plus directives."""

    params: Mapping[str, tuple[str, ...]]
    repetitions: int = DEFAULT_REPETITIONS
    packets: Sequence[str] = ()
    conditions: Sequence[GenerationCondition] = ()
    bindings: Sequence[ValueBinding] = ()
    group_by: Sequence[str] = field(default_factory=tuple)
