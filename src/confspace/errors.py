"""Error types raised while generating configuration spaces.

User-correctable input problems are reported as :class:`ConfigurationError`.
Bookkeeping violations that indicate a bug are :class:`InternalInvariantError`
and are intentionally not a subclass of the former.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Mapping


class ConfigErrorCode(Enum):
    INVALID_VALUE = auto()
    INVALID_RANGE = auto()
    INVALID_PACKET = auto()
    INVALID_BINDING = auto()
    INVALID_CONDITION = auto()
    INVALID_GROUPING = auto()
    INVALID_DIRECTIVE = auto()
    INVALID_TABLE = auto()
    EMPTY_RESULT = auto()
    IO_ERROR = auto()


def _render(name: str, ctx: Mapping[str, Any] | None) -> str:
    if not ctx:
        return name
    parts = ", ".join(f"{k}={v!r}" for k, v in ctx.items())
    return f"{name}: {parts}"


@dataclass(eq=False)
class ConfigurationError(Exception):
    """Structured, recoverable error caused by the user-supplied spec."""

    code: ConfigErrorCode
    ctx: Mapping[str, Any] | None = None
    cause: Exception | None = None

    def __post_init__(self) -> None:
        if self.ctx is None:
            self.ctx = {}
        if self.cause is not None:
            self.__cause__ = self.cause
        super().__init__(self.code.name)

    @property
    def message(self) -> str:
        return str((self.ctx or {}).get("error", self.code.name))

    def __str__(self) -> str:
        return _render(self.code.name, self.ctx)


@dataclass(eq=False)
class InternalInvariantError(Exception):
    """Raised when generator bookkeeping is inconsistent (a bug, not bad input)."""

    ctx: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.ctx is None:
            self.ctx = {}
        super().__init__("INTERNAL_INVARIANT")

    def __str__(self) -> str:
        return _render("INTERNAL_INVARIANT", self.ctx)
