"""Pairwise value bindings between parameters."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence, TypeVar

from confspace.constants import BINDINGS_KEY
from confspace.errors import ConfigErrorCode, ConfigurationError
from confspace.models import ValueBinding

T = TypeVar("T", bound=Mapping[str, str])


def check_bindings(bindings: Iterable[ValueBinding]) -> None:
    for binding in bindings:
        if binding.first.param == binding.second.param:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_BINDING,
                ctx={
                    "error": "binding ties a parameter to itself",
                    "param": binding.first.param,
                    "directive": BINDINGS_KEY,
                },
            )


def bindings_for_params(
    bindings: Iterable[ValueBinding],
    params: Mapping[str, object],
) -> list[ValueBinding]:
    """Bindings whose two parameters both belong to ``params``."""

    return [b for b in bindings if all(name in params for name in b.params)]


def filter_by_bindings(confs: Sequence[T], bindings: Sequence[ValueBinding]) -> list[T]:
    """Keep configurations where each binding's sides hold together or not at all.

    A configuration missing either bound parameter is dropped.
    """

    if not bindings:
        return list(confs)
    return [conf for conf in confs if all(b.is_satisfied_by(conf) for b in bindings)]
