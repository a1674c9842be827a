"""The :class:`Configuration` produced by the generator."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterator

from confspace.constants import DEFAULT_PACKET_NAME, LIST_CLOSING, LIST_OPENING, LIST_SEPARATOR
from confspace.errors import ConfigErrorCode, ConfigurationError, InternalInvariantError
from confspace.values import parse_value

_MISSING = object()


class Configuration(Mapping):
    """One concrete assignment of string values to parameter names.

    Parameter values are fixed at construction. The owning packet is tagged
    afterwards, exactly once, by the generator. Equality is identity: two
    repetitions of the same assignment are distinct configurations; compare
    contents with :meth:`same_parameters`.
    """

    __slots__ = ("_params", "_packet")

    def __init__(self, params: Mapping[str, str] | None = None) -> None:
        self._params: dict[str, str] = {str(k): str(v) for k, v in (params or {}).items()}
        self._packet: str | None = None

    # Mapping protocol -------------------------------------------------------
    def __getitem__(self, name: str) -> str:
        return self._params[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    __eq__ = object.__eq__
    __hash__ = object.__hash__

    def __repr__(self) -> str:
        return f"Configuration(packet={self.packet!r}, params={self._params!r})"

    # Packet tagging ----------------------------------------------------------
    @property
    def packet(self) -> str:
        return self._packet if self._packet is not None else DEFAULT_PACKET_NAME

    def assign_packet(self, name: str) -> None:
        if self._packet is not None:
            raise InternalInvariantError(
                ctx={
                    "error": "packet already assigned",
                    "packet": self._packet,
                    "requested": name,
                }
            )
        self._packet = name

    # Helpers ------------------------------------------------------------------
    def as_dict(self) -> dict[str, str]:
        return dict(self._params)

    def copy(self) -> "Configuration":
        """Independent configuration with the same parameters and no packet tag."""

        return Configuration(self._params)

    def same_parameters(self, other: Mapping[str, Any]) -> bool:
        if set(self._params) != set(other):
            return False
        return all(self._params[name] == str(other[name]) for name in self._params)

    # Typed access --------------------------------------------------------------
    def get_value(self, name: str, kind: type = str, default: Any = None) -> Any:
        """Read ``name`` parsed as ``kind``; ``default`` when it is not defined."""

        raw = self._params.get(name, _MISSING)
        if raw is _MISSING:
            return default
        return parse_value(raw, kind).unwrap(param=name)

    def get_list(self, name: str, kind: type = str, default: list[Any] | None = None) -> list[Any] | None:
        """Read a ``{a,b,c}`` list parameter with every item parsed as ``kind``."""

        raw = self._params.get(name, _MISSING)
        if raw is _MISSING:
            return default
        text = raw.strip()
        if not text:
            return []
        if not (text.startswith(LIST_OPENING) and text.endswith(LIST_CLOSING)):
            raise ConfigurationError(
                ConfigErrorCode.INVALID_VALUE,
                ctx={
                    "error": f"list parameter must be wrapped in '{LIST_OPENING}...{LIST_CLOSING}'",
                    "param": name,
                },
            )
        inner = text[len(LIST_OPENING) : len(text) - len(LIST_CLOSING)].strip()
        if not inner:
            return []
        return [parse_value(item, kind).unwrap(param=name) for item in inner.split(LIST_SEPARATOR)]
