"""Raw value parsing: range expansion, value splitting and typed reads.

A raw value such as ``"a;[0:5:20];b"`` expands to
``["a", "0", "5", "10", "15", "20", "b"]``. Range arithmetic uses
:class:`decimal.Decimal` so fractional steps stay exact.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Iterable, Mapping, NamedTuple, Sequence

from confspace.errors import ConfigErrorCode, ConfigurationError

_RANGE_PATTERN = re.compile(
    r"\[\s*([^\[\]:;]+?)\s*:\s*([^\[\]:;]+?)\s*:\s*([^\[\]:;]+?)\s*\]"
)

_TRUE = {"true"}
_FALSE = {"false"}


def _to_decimal(text: str, *, range_def: str) -> Decimal:
    try:
        number = Decimal(text.strip())
    except InvalidOperation as exc:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_RANGE,
            ctx={"error": "could not parse number in range", "range": range_def, "value": text},
            cause=exc,
        )
    if not number.is_finite():
        raise ConfigurationError(
            ConfigErrorCode.INVALID_RANGE,
            ctx={"error": "range bounds must be finite", "range": range_def, "value": text},
        )
    return number


def format_number(number: Decimal) -> str:
    """Render whole numbers without a fractional part (``5.0`` -> ``"5"``)."""

    if number == number.to_integral_value():
        return str(int(number))
    return format(number.normalize(), "f")


def expand_range(first: str, step: str, last: str, *, range_def: str = "") -> list[str]:
    """Expand ``[first:step:last]`` into its inclusive arithmetic sequence."""

    range_def = range_def or f"[{first}:{step}:{last}]"
    start = _to_decimal(first, range_def=range_def)
    increment = _to_decimal(step, range_def=range_def)
    stop = _to_decimal(last, range_def=range_def)

    if increment == 0:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_RANGE,
            ctx={"error": "range step cannot be zero", "range": range_def},
        )

    span = stop - start
    try:
        remainder = span % increment
        steps = span / increment
    except InvalidOperation as exc:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_RANGE,
            ctx={"error": "range too large to expand", "range": range_def},
            cause=exc,
        )
    if remainder != 0:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_RANGE,
            ctx={
                "error": f"({format_number(stop)}-{format_number(start)})%{format_number(increment)} should be zero",
                "range": range_def,
            },
        )
    if steps < 0:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_RANGE,
            ctx={
                "error": f"cannot reach {format_number(stop)} from {format_number(start)} "
                f"in steps of {format_number(increment)}",
                "range": range_def,
            },
        )

    return [format_number(start + index * increment) for index in range(int(steps) + 1)]


def expand_ranges(raw: str, separator: str) -> str:
    """Replace every range token in ``raw`` with its separator-joined expansion."""

    def _replace(match: re.Match[str]) -> str:
        first, step, last = match.groups()
        return separator.join(expand_range(first, step, last, range_def=match.group(0)))

    return _RANGE_PATTERN.sub(_replace, raw)


def split_values(raw: str, separator: str) -> list[str]:
    """Expand ranges in ``raw`` and split it into its ordered list of values.

    Tokens are whitespace-trimmed, duplicates and order are kept. Trailing
    empty tokens are dropped and an empty raw value yields no values at all.
    """

    if not separator:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_DIRECTIVE,
            ctx={"error": "values separator cannot be empty"},
        )
    expanded = expand_ranges(raw, separator)
    if not expanded.strip():
        return []
    tokens = [token.strip() for token in expanded.split(separator)]
    while tokens and tokens[-1] == "":
        tokens.pop()
    return tokens


def _raw_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def extract_param_values(
    raw_params: Mapping[str, Any],
    separator: str,
) -> dict[str, tuple[str, ...]]:
    """Expand every raw parameter into its tuple of values.

    Scalars are treated as separator-joined text. Sequences (as produced by
    YAML or JSON specs) are expanded item by item, keeping their order.
    """

    params: dict[str, tuple[str, ...]] = {}
    for name, raw in raw_params.items():
        if isinstance(raw, (list, tuple)):
            values: list[str] = []
            for item in raw:
                values.extend(split_values(_raw_text(item), separator))
            params[name] = tuple(values)
        else:
            params[name] = tuple(split_values(_raw_text(raw), separator))
    return params


class ParsedValue(NamedTuple):
    """Tagged outcome of reading a raw string as a typed value."""

    value: Any
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self, *, param: str | None = None) -> Any:
        if self.error is not None:
            ctx: dict[str, Any] = {"error": self.error}
            if param is not None:
                ctx["param"] = param
            raise ConfigurationError(ConfigErrorCode.INVALID_VALUE, ctx=ctx)
        return self.value


def parse_value(raw: str, kind: type = str) -> ParsedValue:
    """Parse ``raw`` as ``kind`` without raising.

    Supported kinds: ``str``, ``int``, ``float``, ``bool`` (``true``/``false``,
    case-insensitive), :class:`~decimal.Decimal` and :class:`~enum.Enum`
    subclasses (looked up by member name).
    """

    text = raw.strip()
    if kind is str:
        return ParsedValue(text)
    if kind is bool:
        lowered = text.lower()
        if lowered in _TRUE:
            return ParsedValue(True)
        if lowered in _FALSE:
            return ParsedValue(False)
        return ParsedValue(None, f"could not parse {text!r} to bool")
    if kind in (int, float):
        try:
            return ParsedValue(kind(text))
        except ValueError:
            return ParsedValue(None, f"could not parse {text!r} to {kind.__name__}")
    if kind is Decimal:
        try:
            return ParsedValue(Decimal(text))
        except InvalidOperation:
            return ParsedValue(None, f"could not parse {text!r} to Decimal")
    if isinstance(kind, type) and issubclass(kind, Enum):
        try:
            return ParsedValue(kind[text])
        except KeyError:
            return ParsedValue(None, f"{text!r} is not a member of {kind.__name__}")
    return ParsedValue(None, f"cannot parse values of type {getattr(kind, '__name__', kind)!r}")


def split_list(
    raw: str,
    *,
    separator: str = ",",
    braces: Sequence[str] = ("{", "}"),
    keep_empty: bool = False,
) -> list[str]:
    """Split a ``{a,b,c}`` (or bare ``a,b,c``) list into trimmed items.

    Empty items are dropped unless ``keep_empty``; a blank list is always ``[]``.
    """

    text = raw.strip()
    opening, closing = braces
    if text.startswith(opening) and text.endswith(closing):
        text = text[len(opening) : len(text) - len(closing)]
    if not text.strip():
        return []
    items = [item.strip() for item in text.split(separator)]
    return items if keep_empty else [item for item in items if item]


def parse_values(items: Iterable[str], kind: type) -> list[ParsedValue]:
    return [parse_value(item, kind) for item in items]
