"""INCLUDE/DISCARD generation conditions.

Each applicable condition enumerates its own sub-space: the controlling
parameter is fixed to the condition's value and the remaining parameter set is
narrowed by the condition's action. Controlling values not named by any
condition produce no configurations.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from confspace.enumerator import cartesian
from confspace.errors import InternalInvariantError
from confspace.models import Action, GenerationCondition

logger = logging.getLogger(__name__)


def applicable_conditions(
    params: Mapping[str, Sequence[str]],
    conditions: Sequence[GenerationCondition],
) -> list[GenerationCondition]:
    return [cond for cond in conditions if cond.control.param in params]


def _narrow(
    params: Mapping[str, Sequence[str]],
    condition: GenerationCondition,
) -> dict[str, Sequence[str]]:
    remaining = {name: values for name, values in params.items() if name != condition.control.param}
    if condition.action is Action.INCLUDE:
        return {name: values for name, values in remaining.items() if name in condition.targets}
    if condition.action is Action.DISCARD:
        return {name: values for name, values in remaining.items() if name not in condition.targets}
    raise InternalInvariantError(ctx={"error": "unknown condition action", "action": condition.action})


def generate_with_conditions(
    params: Mapping[str, Sequence[str]],
    conditions: Sequence[GenerationCondition] = (),
) -> list[dict[str, str]]:
    """Enumerate ``params`` honoring the conditions whose controlling parameter is present.

    Falls back to a single unfiltered product when no condition applies.
    """

    applicable = applicable_conditions(params, conditions)
    if not applicable:
        return cartesian(params)

    rows: list[dict[str, str]] = []
    for condition in applicable:
        control = condition.control
        if control.value not in params[control.param]:
            logger.debug("Skipping condition %s: value not among %s", condition, list(params[control.param]))
            continue
        narrowed = cartesian(_narrow(params, condition))
        for row in narrowed:
            row[control.param] = control.value
        rows.extend(narrowed)
    return rows
