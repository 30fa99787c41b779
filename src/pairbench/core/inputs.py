"""
Workload Inputs
===============
Validated value objects for workload inputs.

Request decoding happens in two steps: the boundary (HTTP, CLI) parses raw
values, then constructs one of these objects. Construction enforces the
constraints and raises InvalidInputError, so no workload ever sees a
negative size or a malformed identifier list.
"""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Iterable
from typing import Any, Optional, Tuple

from .exceptions import InvalidInputError


def _require_int(field: str, value: Any) -> int:
    # bool is a subclass of int; JSON true/false is not a valid size or id
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(field=field, reason="must be an integer", value=value)
    return value


def _require_non_negative(field: str, value: Any) -> int:
    value = _require_int(field, value)
    if value < 0:
        raise InvalidInputError(field=field, reason="must be >= 0", value=value)
    return value


@dataclass(frozen=True)
class IdentifierInput:
    """A sequence of record identifiers. May be empty; may contain unknown ids."""

    ids: Tuple[int, ...]

    def __post_init__(self):
        if not isinstance(self.ids, tuple):
            raise InvalidInputError(field="ids", reason="must be a tuple of integers", value=self.ids)
        for position, item in enumerate(self.ids):
            _require_int(f"ids[{position}]", item)

    @classmethod
    def from_raw(cls, raw: Any, max_length: Optional[int] = None) -> "IdentifierInput":
        """
        Build from a decoded JSON value (expected: a list of integers).

        Raises:
            InvalidInputError: If ``raw`` is not a list of integers or is too long.
        """
        if raw is None:
            raise InvalidInputError(field="ids", reason="identifier list is required")
        if isinstance(raw, (str, bytes, dict)) or not isinstance(raw, Iterable):
            raise InvalidInputError(field="ids", reason="must be a JSON array of integers", value=raw)
        ids = tuple(raw)
        if max_length is not None and len(ids) > max_length:
            raise InvalidInputError(
                field="ids",
                reason=f"too many identifiers (max {max_length})",
                context={"length": len(ids)},
            )
        return cls(ids)

    @classmethod
    def parse_csv(cls, text: str, max_length: Optional[int] = None) -> "IdentifierInput":
        """Build from a comma-separated string such as ``"1,2,3"``."""
        parts = [p.strip() for p in text.split(",") if p.strip()]
        try:
            values = [int(p) for p in parts]
        except ValueError:
            raise InvalidInputError(field="ids", reason="must be comma-separated integers", value=text)
        return cls.from_raw(values, max_length=max_length)

    def __len__(self) -> int:
        return len(self.ids)


@dataclass(frozen=True)
class SizeInput:
    """A workload magnitude."""

    size: int

    def __post_init__(self):
        _require_non_negative("size", self.size)


@dataclass(frozen=True)
class LookupInput:
    """Lookup parameters: candidate range ``[0, size)``, the target and how often to look it up."""

    size: int
    target: int
    repeats: int

    def __post_init__(self):
        _require_non_negative("size", self.size)
        _require_int("target", self.target)
        _require_non_negative("repeats", self.repeats)


__all__ = ["IdentifierInput", "SizeInput", "LookupInput"]
