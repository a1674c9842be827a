"""Compilation pipeline from a :class:`GenerationSpec` to configurations.

Per packet, in declared packet order: conditional generation, grouping,
binding filter, then repetition and packet tagging. The packets' lists are
concatenated in the same declared order.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from confspace.bindings import bindings_for_params, check_bindings, filter_by_bindings
from confspace.conditions import generate_with_conditions
from confspace.configuration import Configuration
from confspace.constants import BINDINGS_KEY, CONDITIONS_KEY, GROUP_BY_KEY, REPETITIONS_KEY
from confspace.errors import ConfigErrorCode, ConfigurationError
from confspace.grouping import group_by
from confspace.models import GenerationSpec, Packet
from confspace.packets import check_cross_packet_references, check_packet_names, partition

logger = logging.getLogger(__name__)


def repeat_and_tag(
    confs: Sequence[Configuration],
    repetitions: int,
    packet: str,
) -> list[Configuration]:
    """Emit each configuration ``repetitions`` times in a row, tagged with ``packet``.

    The first occurrence is the original object, later ones are copies.
    """

    if repetitions < 0:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_DIRECTIVE,
            ctx={"error": "repetitions cannot be negative", "directive": REPETITIONS_KEY, "value": repetitions},
        )
    repeated: list[Configuration] = []
    for conf in confs:
        for index in range(repetitions):
            repeated.append(conf if index == 0 else conf.copy())
    for conf in repeated:
        conf.assign_packet(packet)
    return repeated


def _require_params(spec: GenerationSpec, names: Iterable[str], *, code: ConfigErrorCode, directive: str) -> None:
    for name in names:
        if name not in spec.params:
            raise ConfigurationError(
                code,
                ctx={"error": "parameter is not defined", "param": name, "directive": directive},
            )


def _validate(spec: GenerationSpec) -> None:
    check_packet_names(spec.packets)
    _require_params(spec, spec.group_by, code=ConfigErrorCode.INVALID_GROUPING, directive=GROUP_BY_KEY)
    for binding in spec.bindings:
        _require_params(spec, binding.params, code=ConfigErrorCode.INVALID_BINDING, directive=BINDINGS_KEY)
    for condition in spec.conditions:
        _require_params(spec, condition.params, code=ConfigErrorCode.INVALID_CONDITION, directive=CONDITIONS_KEY)
    check_bindings(spec.bindings)
    check_cross_packet_references(spec.packets, spec.bindings, spec.conditions)


def compile_packet(packet: Packet, spec: GenerationSpec) -> list[Configuration]:
    rows = generate_with_conditions(packet.params, spec.conditions)
    confs = [Configuration(row) for row in rows]

    names = [name for name in spec.group_by if name in packet.params]
    confs = group_by(confs, names)

    confs = filter_by_bindings(confs, bindings_for_params(spec.bindings, packet.params))

    tagged = repeat_and_tag(confs, spec.repetitions, packet.name)
    logger.debug(
        "Packet %s: %d generated, %d after bindings, %d emitted",
        packet.name,
        len(rows),
        len(confs),
        len(tagged),
    )
    return tagged


def compile_configurations(spec: GenerationSpec) -> list[Configuration]:
    """Generate the ordered list of configurations described by ``spec``."""

    _validate(spec)
    packets = partition(spec.params, spec.packets)

    configurations: list[Configuration] = []
    for packet in packets:
        configurations.extend(compile_packet(packet, spec))

    if not configurations:
        raise ConfigurationError(
            ConfigErrorCode.EMPTY_RESULT,
            ctx={"error": "could not build any configuration", "packets": tuple(p.name for p in packets)},
        )
    logger.info("Generated %d configurations across %d packet(s)", len(configurations), len(packets))
    return configurations
