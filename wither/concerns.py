"""Read and write concern specifications for models."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pymongo.errors import ConfigurationError
from pymongo.read_concern import ReadConcern
from pymongo.write_concern import WriteConcern

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_U64_MAX = 2**64 - 1
_WRITE_CONCERN_KEYS = frozenset({"w", "w_timeout", "journal"})


class ConcernSpecError(ValueError):
    """A read or write concern specification is malformed."""


class ReadConcernLevel(str, enum.Enum):
    """The named read concern levels."""

    LOCAL = "local"
    MAJORITY = "majority"
    LINEARIZABLE = "linearizable"
    AVAILABLE = "available"


@dataclass(frozen=True)
class Acknowledgment:
    """A write acknowledgment: a node count, ``"majority"`` or a custom tag."""

    value: int | str

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, str)):
            raise ConcernSpecError(
                f"acknowledgment must be a node count or a tag, got {self.value!r}"
            )
        if isinstance(self.value, int) and not _I32_MIN <= self.value <= _I32_MAX:
            raise ConcernSpecError(f"node count {self.value} is out of range")


def _parse_acknowledgment(spec: Any) -> Acknowledgment:
    if isinstance(spec, Acknowledgment):
        return spec
    if isinstance(spec, str):
        if spec == "majority":
            return Acknowledgment("majority")
        raise ConcernSpecError(f"unknown acknowledgment {spec!r}")
    if isinstance(spec, Mapping) and len(spec) == 1:
        ((kind, value),) = spec.items()
        if kind == "nodes" and isinstance(value, int) and not isinstance(value, bool):
            return Acknowledgment(value)
        if kind == "custom" and isinstance(value, str):
            return Acknowledgment(value)
    raise ConcernSpecError(f"malformed acknowledgment specification {spec!r}")


@dataclass(frozen=True)
class WriteConcernSpec:
    """A write concern description; ``w_timeout`` is in whole seconds."""

    w: Acknowledgment | None = None
    w_timeout: int | None = None
    journal: bool | None = None

    def __post_init__(self) -> None:
        if self.w is not None and not isinstance(self.w, Acknowledgment):
            object.__setattr__(self, "w", _parse_acknowledgment(self.w))
        if self.w_timeout is not None:
            if isinstance(self.w_timeout, bool) or not isinstance(self.w_timeout, int):
                raise ConcernSpecError("w_timeout must be a whole number of seconds")
            if not 0 <= self.w_timeout <= _U64_MAX:
                raise ConcernSpecError(f"w_timeout {self.w_timeout} is out of range")
        if self.journal is not None and not isinstance(self.journal, bool):
            raise ConcernSpecError("journal must be a boolean")

    def to_write_concern(self) -> WriteConcern:
        """Build the driver's write concern from this description."""
        w = None if self.w is None else self.w.value
        wtimeout = None if self.w_timeout is None else self.w_timeout * 1000
        try:
            return WriteConcern(w=w, wtimeout=wtimeout, j=self.journal)
        except (ConfigurationError, TypeError, ValueError) as exc:
            raise ConcernSpecError(str(exc)) from exc


def read_concern_from_spec(spec: Any) -> ReadConcern | None:
    """Turn a level name, a level, ``{"custom": ...}`` or a read concern into a read concern."""
    if spec is None:
        return None
    if isinstance(spec, ReadConcern):
        return spec
    if isinstance(spec, str):
        try:
            level = ReadConcernLevel(spec)
        except ValueError:
            raise ConcernSpecError(f"unknown read concern {spec!r}") from None
        return ReadConcern(level.value)
    if isinstance(spec, Mapping) and len(spec) == 1:
        ((kind, value),) = spec.items()
        if kind == "custom" and isinstance(value, str):
            return ReadConcern(value)
    raise ConcernSpecError(f"malformed read concern specification {spec!r}")


def write_concern_from_spec(spec: Any) -> WriteConcern | None:
    """Turn a mapping, a ``WriteConcernSpec`` or a write concern into a write concern."""
    if spec is None:
        return None
    if isinstance(spec, WriteConcern):
        return spec
    if isinstance(spec, WriteConcernSpec):
        return spec.to_write_concern()
    if isinstance(spec, Mapping):
        unknown = set(spec) - _WRITE_CONCERN_KEYS
        if unknown:
            raise ConcernSpecError(f"unknown write concern fields: {sorted(unknown)}")
        return WriteConcernSpec(**spec).to_write_concern()
    raise ConcernSpecError(f"malformed write concern specification {spec!r}")