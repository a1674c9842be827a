"""Pivot run results into 2-D tables keyed by parameter values.

Table definitions use the textual form
``rowSet1P1;rowSet1P2:rowSet2P1|colP1:colP2|result|METHOD[|fileName]``:
``:`` separates parameter groups, ``;`` separates parameters inside a group.
Every row group is crossed with every column group; row and column labels are
the distinct value tuples of each group (``P1=a;P2=b``).
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Mapping, NamedTuple, Sequence

import pandas as pd

from confspace.errors import ConfigErrorCode, ConfigurationError

NO_RESULT = "NO_RESULT"
CONCAT_SEPARATOR = "|"
DEFINITION_SEPARATOR = "|"
GROUP_SEPARATOR = ":"
PARAM_SEPARATOR = ";"
RESULT_COLUMN = "confspace.result"


class Aggregation(Enum):
    MAX = "MAX"
    MIN = "MIN"
    MEAN = "MEAN"
    FIRST = "FIRST"
    LAST = "LAST"
    RANDOM = "RANDOM"
    CONCAT = "CONCAT"


DEFAULT_AGGREGATION = Aggregation.FIRST


@dataclass(frozen=True)
class TableSpec:
    row_groups: tuple[tuple[str, ...], ...]
    column_groups: tuple[tuple[str, ...], ...]
    result: str
    method: Aggregation = DEFAULT_AGGREGATION
    file_name: str = ""

    @property
    def params(self) -> set[str]:
        return {name for group in (*self.row_groups, *self.column_groups) for name in group}


class JobResult(NamedTuple):
    """A finished run: the configuration it ran with and the results it reported."""

    configuration: Mapping[str, str]
    results: Mapping[str, Any]


def _parse_groups(raw: str, *, definition: str, side: str) -> tuple[tuple[str, ...], ...]:
    groups: list[tuple[str, ...]] = []
    for chunk in raw.strip().split(GROUP_SEPARATOR):
        names = tuple(name.strip() for name in chunk.split(PARAM_SEPARATOR))
        if not chunk.strip() or any(not name for name in names):
            raise ConfigurationError(
                ConfigErrorCode.INVALID_TABLE,
                ctx={"error": f"empty {side} parameter", "table": definition},
            )
        groups.append(names)
    return tuple(groups)


def default_file_name(spec_rows: Sequence[Sequence[str]], spec_cols: Sequence[Sequence[str]], result: str) -> str:
    rows = "!".join("-".join(group) for group in spec_rows)
    cols = "!".join("-".join(group) for group in spec_cols)
    return f"RESULTS_TABLE_{result}_USING_{rows}_AGAINST_{cols}"


def parse_table_spec(definition: str) -> TableSpec:
    tokens = definition.strip().split(DEFINITION_SEPARATOR)
    if not 4 <= len(tokens) <= 5:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_TABLE,
            ctx={
                "error": f"expected 4 or 5 fields split by '{DEFINITION_SEPARATOR}', got {len(tokens)}",
                "table": definition,
            },
        )
    rows = _parse_groups(tokens[0], definition=definition, side="row")
    cols = _parse_groups(tokens[1], definition=definition, side="column")

    result = tokens[2].strip()
    if not result:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_TABLE,
            ctx={"error": "result name cannot be empty", "table": definition},
        )

    method = DEFAULT_AGGREGATION
    method_name = tokens[3].strip()
    if method_name:
        try:
            method = Aggregation(method_name)
        except ValueError as exc:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_TABLE,
                ctx={"error": f"unknown aggregation '{method_name}'", "table": definition},
                cause=exc,
            )

    file_name = tokens[4].strip() if len(tokens) == 5 else ""
    return TableSpec(
        row_groups=rows,
        column_groups=cols,
        result=result,
        method=method,
        file_name=file_name or default_file_name(rows, cols, result),
    )


def parse_table_specs(definitions: Iterable[str]) -> list[TableSpec]:
    return [parse_table_spec(definition) for definition in definitions if definition.strip()]


def check_table_params(spec: TableSpec, params: Iterable[str]) -> None:
    missing = sorted(spec.params - set(params))
    if missing:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_TABLE,
            ctx={"error": "table uses undefined parameters", "missing": missing, "table": spec.file_name},
        )


def _as_numbers(values: Sequence[Any], method: Aggregation) -> list[float]:
    try:
        return [float(value) for value in values]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_TABLE,
            ctx={"error": f"{method.value} needs numeric results", "values": list(values)},
            cause=exc,
        )


def aggregate(values: Sequence[Any], method: Aggregation, *, rng: random.Random | None = None) -> str:
    """Collapse the results that fell into one cell."""

    if not values:
        return NO_RESULT
    if method is Aggregation.MAX:
        return str(max(_as_numbers(values, method)))
    if method is Aggregation.MIN:
        return str(min(_as_numbers(values, method)))
    if method is Aggregation.MEAN:
        numbers = _as_numbers(values, method)
        return str(sum(numbers) / len(numbers))
    if method is Aggregation.FIRST:
        return str(values[0])
    if method is Aggregation.LAST:
        return str(values[-1])
    if method is Aggregation.RANDOM:
        return str((rng or random.Random()).choice(list(values)))
    return CONCAT_SEPARATOR.join(str(value) for value in values)


def _label(names: Sequence[str], by_name: Mapping[str, Any]) -> str:
    return PARAM_SEPARATOR.join(f"{name}={by_name[name]}" for name in names)


def _labels(frame: pd.DataFrame, groups: Sequence[Sequence[str]]) -> list[str]:
    labels: dict[str, None] = {}
    for group in groups:
        columns = list(group)
        if any(column not in frame.columns for column in columns):
            continue
        distinct = frame.dropna(subset=columns)[columns].drop_duplicates()
        for record in distinct.to_dict("records"):
            labels.setdefault(_label(group, record), None)
    return list(labels)


def jobs_frame(jobs: Iterable[JobResult], result: str) -> pd.DataFrame:
    records: list[dict[str, Any]] = []
    results: list[Any] = []
    for job in jobs:
        records.append(dict(job.configuration))
        results.append(job.results.get(result))
    frame = pd.DataFrame.from_records(records)
    # object dtype keeps integer results from being widened to float by missing ones
    frame[RESULT_COLUMN] = pd.Series(results, index=frame.index, dtype=object)
    return frame


def build_results_table(
    jobs: Iterable[JobResult],
    spec: TableSpec,
    *,
    rng: random.Random | None = None,
) -> pd.DataFrame:
    """Pivot ``jobs`` into a table of ``spec.result`` aggregated per cell.

    Cells with no matching job result hold :data:`NO_RESULT`.
    """

    frame = jobs_frame(jobs, spec.result)
    if frame.empty:
        return pd.DataFrame(dtype=object)

    row_labels = _labels(frame, spec.row_groups)
    col_labels = _labels(frame, spec.column_groups)
    table = pd.DataFrame(NO_RESULT, index=row_labels, columns=col_labels, dtype=object)

    for row_group in spec.row_groups:
        for col_group in spec.column_groups:
            keys = list(dict.fromkeys((*row_group, *col_group)))
            if any(key not in frame.columns for key in keys):
                continue
            subset = frame.dropna(subset=keys)
            if subset.empty:
                continue
            for key_values, cell in subset.groupby(keys, sort=False):
                if not isinstance(key_values, tuple):
                    key_values = (key_values,)
                by_name = dict(zip(keys, key_values))
                values = cell[RESULT_COLUMN].dropna().tolist()
                table.at[_label(row_group, by_name), _label(col_group, by_name)] = aggregate(
                    values, spec.method, rng=rng
                )
    return table


def save_results_table(table: pd.DataFrame, spec: TableSpec, directory: Path | str) -> Path:
    out = Path(directory) / f"{spec.file_name}.csv"
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        table.to_csv(out)
    except OSError as exc:
        raise ConfigurationError(
            ConfigErrorCode.IO_ERROR,
            ctx={"path": str(out), "error": "could not save results table"},
            cause=exc,
        )
    return out
