"""Spec loader: raw parameter files and directive parsing.

A raw spec is a flat mapping of parameter names to raw values. Keys under the
reserved ``confspace.`` namespace are directives; they are parsed into a
:class:`GenerationSpec` and removed from the parameter set.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from confspace.compiler import compile_configurations
from confspace.configuration import Configuration
from confspace.constants import (
    ASSIGNMENT,
    BINDING_SEPARATOR,
    BINDINGS_KEY,
    CONDITION_SEPARATOR,
    CONDITIONS_KEY,
    DEFAULT_REPETITIONS,
    DEFAULT_SEPARATOR,
    DIRECTIVE_KEYS,
    DIRECTIVE_PREFIX,
    GROUP_BY_KEY,
    LIST_CLOSING,
    LIST_OPENING,
    LIST_SEPARATOR,
    PACKETS_KEY,
    REPETITIONS_KEY,
    SEPARATOR_KEY,
)
from confspace.errors import ConfigErrorCode, ConfigurationError
from confspace.models import Action, GenerationCondition, GenerationSpec, ParamValue, ValueBinding
from confspace.values import extract_param_values, parse_value, split_list

PROPERTIES_SUFFIXES = {".properties", ".conf"}
YAML_SUFFIXES = {".yaml", ".yml"}


# --- .properties reading and writing -------------------------------------------

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_ESCAPED = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)
_CONTROL_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_CONTROL_CODES = {char: code for code, char in _CONTROL_ESCAPES.items()}
_SPECIAL = "=:#!"


def _ends_escaped(text: str) -> bool:
    return (len(text) - len(text.rstrip("\\"))) % 2 == 1


def _strip_trailing(line: str) -> str:
    stripped = line.rstrip()
    if len(stripped) < len(line) and _ends_escaped(stripped):
        return line[: len(stripped) + 1]
    return stripped


def _logical_lines(text: str) -> Iterable[str]:
    pending = ""
    for physical in _LINE_BREAK.split(text):
        line = _strip_trailing(physical.lstrip())
        if not pending and (not line or line[0] in "#!"):
            continue
        if _ends_escaped(line):
            pending += line[:-1]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending


def _unescape(text: str) -> str:
    def _replace(match: re.Match[str]) -> str:
        code = match.group(1)
        if len(code) == 5:
            return chr(int(code[1:], 16))
        return _CONTROL_ESCAPES.get(code, code)

    return _ESCAPED.sub(_replace, text)


def _split_entry(line: str) -> tuple[str, str]:
    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in "=:" or char.isspace():
            break
        index += 1
    key, rest = line[:index], line[index:].lstrip()
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip()
    return _unescape(key), _unescape(rest)


def read_properties(text: str) -> dict[str, str]:
    """Parse ``.properties`` text into an ordered ``{key: raw value}`` mapping.

    Supports ``#``/``!`` comments, ``=``, ``:`` or whitespace separators,
    backslash escapes and line continuations. Later duplicates override
    earlier ones.
    """

    entries: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        if key:
            entries[key] = value
    return entries


def escape_property(text: str, *, key: bool = False) -> str:
    """Escape ``text`` so :func:`read_properties` reads it back unchanged.

    Keys escape all whitespace; values only leading and trailing whitespace.
    """

    last = len(text) - 1
    out: list[str] = []
    for index, char in enumerate(text):
        if char == "\\":
            out.append("\\\\")
        elif char in _CONTROL_CODES:
            out.append("\\" + _CONTROL_CODES[char])
        elif char.isspace() and (key or index in (0, last)):
            out.append("\\" + char)
        elif char in _SPECIAL:
            out.append("\\" + char)
        else:
            out.append(char)
    return "".join(out)


def dump_properties(entries: Mapping[str, str], *, comment: str | None = None) -> str:
    lines = [] if comment is None else [f"# {comment}"]
    lines.extend(f"{escape_property(name, key=True)}={escape_property(value)}" for name, value in entries.items())
    return "\n".join(lines) + "\n"


def _load_mapping(data: Any, *, path: Path) -> dict[str, Any]:
    if isinstance(data, Mapping):
        return {str(key): value for key, value in data.items()}
    raise ConfigurationError(
        ConfigErrorCode.INVALID_DIRECTIVE,
        ctx={"path": str(path), "error": "top-level must be mapping"},
    )


def load_raw_spec(path: Path | str) -> dict[str, Any]:
    """Read a raw spec file (``.properties``, ``.yaml``/``.yml`` or ``.json``)."""

    spec_path = Path(path)
    try:
        raw = spec_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            ConfigErrorCode.IO_ERROR,
            ctx={"path": str(spec_path), "error": "could not read spec file"},
            cause=exc,
        )

    suffix = spec_path.suffix.lower()
    if suffix in PROPERTIES_SUFFIXES:
        return read_properties(raw)
    if suffix in YAML_SUFFIXES:
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_DIRECTIVE,
                ctx={"path": str(spec_path), "error": "invalid YAML"},
                cause=exc,
            )
        return _load_mapping(data or {}, path=spec_path)
    if suffix == ".json":
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_DIRECTIVE,
                ctx={"path": str(spec_path), "error": "invalid JSON"},
                cause=exc,
            )
        return _load_mapping(data, path=spec_path)
    raise ConfigurationError(
        ConfigErrorCode.INVALID_DIRECTIVE,
        ctx={"path": str(spec_path), "error": "unsupported spec format", "suffix": suffix},
    )


# --- directive parsing ----------------------------------------------------------

def _directive_list(raw: Any, *, keep_empty: bool = False) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        items = ["" if item is None else str(item).strip() for item in raw]
        return items if keep_empty else [item for item in items if item]
    return split_list(
        str(raw),
        separator=LIST_SEPARATOR,
        braces=(LIST_OPENING, LIST_CLOSING),
        keep_empty=keep_empty,
    )


def _assignment(text: str, *, entry: str, code: ConfigErrorCode, directive: str) -> ParamValue:
    parts = text.strip().split(ASSIGNMENT)
    if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
        raise ConfigurationError(
            code,
            ctx={
                "error": f"'{text}' should be two strings split by '{ASSIGNMENT}'",
                "entry": entry,
                "directive": directive,
            },
        )
    return ParamValue(parts[0].strip(), parts[1].strip())


def parse_bindings(entries: Iterable[str]) -> list[ValueBinding]:
    """Parse ``param=value:param=value`` entries."""

    bindings: list[ValueBinding] = []
    for entry in entries:
        sides = entry.split(BINDING_SEPARATOR)
        if len(sides) != 2:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_BINDING,
                ctx={
                    "error": f"binding should be two assignments split by '{BINDING_SEPARATOR}'",
                    "entry": entry,
                    "directive": BINDINGS_KEY,
                },
            )
        first, second = (
            _assignment(side, entry=entry, code=ConfigErrorCode.INVALID_BINDING, directive=BINDINGS_KEY)
            for side in sides
        )
        bindings.append(ValueBinding(first, second))
    return bindings


def parse_conditions(entries: Iterable[str]) -> list[GenerationCondition]:
    """Parse ``ACTION:param[:param...]:param=value`` entries."""

    conditions: list[GenerationCondition] = []
    for entry in entries:
        parts = [part.strip() for part in entry.split(CONDITION_SEPARATOR)]
        if len(parts) < 3:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_CONDITION,
                ctx={
                    "error": f"condition needs at least three strings split by '{CONDITION_SEPARATOR}'",
                    "entry": entry,
                    "directive": CONDITIONS_KEY,
                },
            )
        try:
            action = Action(parts[0])
        except ValueError as exc:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_CONDITION,
                ctx={
                    "error": "condition must start with INCLUDE or DISCARD",
                    "entry": entry,
                    "directive": CONDITIONS_KEY,
                },
                cause=exc,
            )
        targets = frozenset(part for part in parts[1:-1] if part)
        if not targets:
            raise ConfigurationError(
                ConfigErrorCode.INVALID_CONDITION,
                ctx={"error": "condition names no target parameter", "entry": entry, "directive": CONDITIONS_KEY},
            )
        control = _assignment(parts[-1], entry=entry, code=ConfigErrorCode.INVALID_CONDITION, directive=CONDITIONS_KEY)
        conditions.append(GenerationCondition(action=action, targets=targets, control=control))
    return conditions


def _parse_repetitions(raw: Any) -> int:
    if raw is None:
        return DEFAULT_REPETITIONS
    if isinstance(raw, bool):
        raw = str(raw)
    repetitions = raw if isinstance(raw, int) else parse_value(str(raw), int).value
    if repetitions is None:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_DIRECTIVE,
            ctx={"error": "repetitions must be an integer", "directive": REPETITIONS_KEY, "value": raw},
        )
    if repetitions < 0:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_DIRECTIVE,
            ctx={"error": "repetitions cannot be negative", "directive": REPETITIONS_KEY, "value": repetitions},
        )
    return repetitions


def parse_spec_mapping(raw: Mapping[str, Any]) -> GenerationSpec:
    """Split ``raw`` into directives and parameters and build a :class:`GenerationSpec`."""

    directives: dict[str, Any] = {}
    params: dict[str, Any] = {}
    for key, value in raw.items():
        if key.startswith(DIRECTIVE_PREFIX):
            if key not in DIRECTIVE_KEYS:
                raise ConfigurationError(
                    ConfigErrorCode.INVALID_DIRECTIVE,
                    ctx={"error": "unknown directive", "directive": key},
                )
            directives[key] = value
        else:
            params[key] = value

    separator = directives.get(SEPARATOR_KEY, DEFAULT_SEPARATOR)
    separator = "" if separator is None else str(separator)
    if not separator:
        raise ConfigurationError(
            ConfigErrorCode.INVALID_DIRECTIVE,
            ctx={"error": "values separator cannot be empty", "directive": SEPARATOR_KEY},
        )

    return GenerationSpec(
        params=extract_param_values(params, separator),
        repetitions=_parse_repetitions(directives.get(REPETITIONS_KEY)),
        packets=tuple(_directive_list(directives.get(PACKETS_KEY), keep_empty=True)),
        conditions=tuple(parse_conditions(_directive_list(directives.get(CONDITIONS_KEY)))),
        bindings=tuple(parse_bindings(_directive_list(directives.get(BINDINGS_KEY)))),
        group_by=tuple(_directive_list(directives.get(GROUP_BY_KEY))),
    )


def load_spec(path: Path | str) -> GenerationSpec:
    """Load a spec file into a :class:`GenerationSpec`."""

    return parse_spec_mapping(load_raw_spec(path))


def generate(raw: Mapping[str, Any]) -> list[Configuration]:
    """Generate configurations straight from a raw ``{name: value}`` mapping."""

    return compile_configurations(parse_spec_mapping(raw))


def generate_from_file(path: Path | str) -> list[Configuration]:
    return compile_configurations(load_spec(path))
