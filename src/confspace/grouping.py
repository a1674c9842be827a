"""Deterministic ordering of configurations by parameter values."""

from __future__ import annotations

from typing import Mapping, Sequence, TypeVar

from confspace.errors import ConfigErrorCode, ConfigurationError

T = TypeVar("T", bound=Mapping[str, str])


def split_by_param(confs: Sequence[T], param: str) -> list[list[T]]:
    """Partition ``confs`` by the value of ``param``, groups in first-seen order."""

    groups: dict[str, list[T]] = {}
    for conf in confs:
        if param not in conf:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_GROUPING,
                ctx={"error": "cannot group by a parameter missing from a configuration", "param": param},
            )
        groups.setdefault(conf[param], []).append(conf)
    return list(groups.values())


def group_by(confs: Sequence[T], names: Sequence[str]) -> list[T]:
    """Recursively reorder ``confs`` by ``names``, first name outermost."""

    if not names:
        return list(confs)
    head, rest = names[0], names[1:]
    ordered: list[T] = []
    for group in split_by_param(confs, head):
        ordered.extend(group_by(group, rest))
    return ordered
