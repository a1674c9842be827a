"""Partition parameters into independently enumerated packets.

A parameter named ``<packet>.<rest>`` belongs privately to ``<packet>``;
parameters without a declared packet prefix are shared by every packet.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from confspace.constants import BINDINGS_KEY, CONDITIONS_KEY, DEFAULT_PACKET_NAME, PACKETS_KEY
from confspace.errors import ConfigErrorCode, ConfigurationError, InternalInvariantError
from confspace.models import GenerationCondition, Packet, ValueBinding, param_in_packet


def check_packet_names(packets: Sequence[str]) -> None:
    for name in packets:
        if not name:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_PACKET,
                ctx={"error": "packet name cannot be empty", "directive": PACKETS_KEY},
            )
        if name == DEFAULT_PACKET_NAME:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_PACKET,
                ctx={"error": "packet name is reserved", "packet": name, "directive": PACKETS_KEY},
            )

    for index, first in enumerate(packets):
        for second in packets[index + 1 :]:
            if first == second:
                raise ConfigurationError(
                    ConfigErrorCode.INVALID_PACKET,
                    ctx={"error": "packet declared more than once", "packet": first, "directive": PACKETS_KEY},
                )
            if first.startswith(second) or second.startswith(first):
                raise ConfigurationError(
                    ConfigErrorCode.INVALID_PACKET,
                    ctx={
                        "error": "no packet name can prefix another",
                        "packets": (first, second),
                        "directive": PACKETS_KEY,
                    },
                )


def partition(
    params: Mapping[str, tuple[str, ...]],
    packets: Sequence[str] = (),
) -> list[Packet]:
    """Split ``params`` into packets, in declared order.

    With no packets declared everything belongs to the default packet.
    """

    if not packets:
        return [Packet(name=DEFAULT_PACKET_NAME, params=dict(params), owned=tuple(params))]

    check_packet_names(packets)

    claimed: set[str] = set()
    owned: dict[str, list[str]] = {}
    for name in packets:
        members = [param for param in params if param_in_packet(param, name)]
        if not members:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_PACKET,
                ctx={"error": "no parameter belongs to packet", "packet": name, "directive": PACKETS_KEY},
            )
        owned[name] = members
        claimed.update(members)

    shared = [param for param in params if param not in claimed]
    result: list[Packet] = []
    for name in packets:
        packet_params = {param: params[param] for param in owned[name]}
        for param in shared:
            packet_params[param] = params[param]
        result.append(Packet(name=name, params=packet_params, owned=tuple(owned[name])))

    _check_partition(result, packets, params)
    return result


def _check_partition(
    result: Sequence[Packet],
    packets: Sequence[str],
    params: Mapping[str, tuple[str, ...]],
) -> None:
    names = [packet.name for packet in result]
    if names != list(packets):
        raise InternalInvariantError(ctx={"error": "packets not processed in order", "packets": tuple(names)})
    if DEFAULT_PACKET_NAME in names:
        raise InternalInvariantError(ctx={"error": "default packet present next to declared packets"})
    seen: set[str] = set()
    for packet in result:
        overlap = seen.intersection(packet.owned)
        if overlap:
            raise InternalInvariantError(
                ctx={"error": "parameter owned by two packets", "params": tuple(sorted(overlap))}
            )
        seen.update(packet.owned)
    for packet in result:
        missing = set(params) - seen - set(packet.params)
        if missing:
            raise InternalInvariantError(
                ctx={"error": "shared parameter missing from packet", "packet": packet.name}
            )


def packet_of(param: str, packets: Iterable[str]) -> str | None:
    for name in packets:
        if param_in_packet(param, name):
            return name
    return None


def _single_packet(params: Iterable[str], packets: Sequence[str]) -> tuple[str | None, str | None]:
    """Return ``(packet, None)`` when ``params`` use at most one packet, else ``(a, b)``."""

    found: str | None = None
    for param in params:
        owner = packet_of(param, packets)
        if owner is None:
            continue
        if found is not None and owner != found:
            return found, owner
        found = owner
    return found, None


def check_cross_packet_references(
    packets: Sequence[str],
    bindings: Iterable[ValueBinding] = (),
    conditions: Iterable[GenerationCondition] = (),
) -> None:
    """Every binding and condition must stay inside a single packet (or none)."""

    if not packets:
        return

    for binding in bindings:
        first, second = _single_packet(binding.params, packets)
        if second is not None:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_BINDING,
                ctx={
                    "error": "binding spans two packets",
                    "binding": str(binding),
                    "packets": (first, second),
                    "directive": BINDINGS_KEY,
                },
            )

    for condition in conditions:
        first, second = _single_packet(condition.params, packets)
        if second is not None:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_CONDITION,
                ctx={
                    "error": "generation condition spans two packets",
                    "condition": str(condition),
                    "packets": (first, second),
                    "directive": CONDITIONS_KEY,
                },
            )
