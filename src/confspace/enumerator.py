"""Cartesian product of parameter value lists."""

from __future__ import annotations

from itertools import product
from typing import Mapping, Sequence

from confspace.errors import InternalInvariantError


def cartesian(params: Mapping[str, Sequence[str]]) -> list[dict[str, str]]:
    """Enumerate every combination of the values in ``params``.

    Parameters with values take part in the product in mapping order: the
    first one varies slowest, the last one fastest. Parameters with no values
    are present in every row with an empty string. With no participating
    parameters a single row is produced.
    """

    with_values = [name for name, values in params.items() if len(values) > 0]
    without_values = [name for name, values in params.items() if len(values) == 0]

    rows: list[dict[str, str]] = []
    for combo in product(*(params[name] for name in with_values)):
        if len(combo) != len(with_values):
            raise InternalInvariantError(
                ctx={
                    "error": "cartesian row arity mismatch",
                    "expected": len(with_values),
                    "actual": len(combo),
                }
            )
        row = dict(zip(with_values, combo))
        for name in without_values:
            row[name] = ""
        rows.append(row)
    return rows
