"""Argument wrappers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Named:
    """An argument carrying an explicit parameter name alongside its value."""

    name: str
    value: Any


def unwrap(value: Any) -> Any:
    """Return the carried value of a Named argument, or the value itself."""
    if isinstance(value, Named):
        return value.value
    return value
