"""Field paths and validation errors attached to them."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Any


class ErrorType(enum.Enum):
    """The kind of problem a field error reports."""

    INVALID = "Invalid value"
    REQUIRED = "Required value"
    FORBIDDEN = "Forbidden"
    NOT_FOUND = "Not found"
    INTERNAL = "Internal error"


# Error types whose message never carries the offending value.
_VALUELESS = {ErrorType.REQUIRED, ErrorType.FORBIDDEN, ErrorType.INTERNAL}


class Path:
    """An immutable path to a field, such as ``spec.containers[0].name``."""

    __slots__ = ("_segments",)

    def __init__(self, *names: str) -> None:
        self._segments: tuple[tuple[bool, str], ...] = tuple(
            (False, name) for name in names
        )

    @classmethod
    def _from_segments(cls, segments: tuple[tuple[bool, str], ...]) -> Path:
        path = cls()
        path._segments = segments
        return path

    def child(self, *args: str) -> Path:
        """Return a path extended by one or more field names."""
        if not args:
            raise TypeError("child() requires at least one field name")
        return self._from_segments(
            self._segments + tuple((False, name) for name in args)
        )

    def index(self, i: int) -> Path:
        """Return a path extended by a list index."""
        return self._from_segments(self._segments + ((True, str(i)),))

    def key(self, k: str) -> Path:
        """Return a path extended by a map key."""
        return self._from_segments(self._segments + ((True, k),))

    def __str__(self) -> str:
        parts: list[str] = []
        for position, (is_index, text) in enumerate(self._segments):
            if is_index:
                parts.append(f"[{text}]")
            else:
                if position > 0:
                    parts.append(".")
                parts.append(text)
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Path({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._segments == other._segments

    def __hash__(self) -> int:
        return hash(self._segments)


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return json.dumps(value)
    return repr(value)


@dataclass
class FieldError:
    """A validation problem found at a particular field."""

    type: ErrorType
    field: str
    bad_value: Any = None
    detail: str = ""

    def body(self) -> str:
        """The message without the field name."""
        if self.type in _VALUELESS:
            text = self.type.value
        else:
            text = f"{self.type.value}: {_format_value(self.bad_value)}"
        if self.detail:
            text += f": {self.detail}"
        return text

    def __str__(self) -> str:
        return f"{self.field}: {self.body()}"


def _field_name(path: Path | None) -> str:
    return "" if path is None else str(path)


def invalid(path: Path | None, value: Any, detail: str) -> FieldError:
    """An error for a field whose value is not acceptable."""
    return FieldError(ErrorType.INVALID, _field_name(path), value, detail)


def required(path: Path | None, detail: str) -> FieldError:
    """An error for a field that must be set but is missing."""
    return FieldError(ErrorType.REQUIRED, _field_name(path), "", detail)


def forbidden(path: Path | None, detail: str) -> FieldError:
    """An error for a field that may not be used."""
    return FieldError(ErrorType.FORBIDDEN, _field_name(path), "", detail)