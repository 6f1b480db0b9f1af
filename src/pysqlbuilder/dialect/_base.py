"""Abstract base class for SQL dialects."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from io import StringIO
from typing import Any


class DialectName(enum.StrEnum):
    MYSQL = "mysql"
    POSTGRES = "postgres"
    SQLITE = "sqlite"
    MSSQL = "mssql"
    ORACLE = "oracle"


class MarkerStyle(enum.Enum):
    """How the Nth placeholder is written."""

    REPEATED = "repeated"
    """The same marker for every placeholder: ``?``."""

    INDEXED = "indexed"
    """Prefix plus 1-based index: ``$1``."""

    NAMED = "named"
    """Prefix plus parameter name: ``:p1``, ``@p1``."""


class Dialect(ABC):
    """Abstract base class defining the per-dialect rendering rules.

    Dialects hold no mutable state; a single instance may be shared by any
    number of concurrent renderers.
    """

    name: DialectName
    marker_style: MarkerStyle

    # --- Placeholders ---

    @abstractmethod
    def marker(self, param_index: int, name: str | None = None) -> str: ...

    def write_param_placeholder(
        self, w: StringIO, param_index: int, name: str | None = None
    ) -> None:
        w.write(self.marker(param_index, name))

    @abstractmethod
    def bind_arg(self, param_index: int, value: Any, name: str | None = None) -> Any:
        """Return the argument emitted for the placeholder at ``param_index``."""

    # --- Clauses ---

    @abstractmethod
    def write_limit(
        self, w: StringIO, limit: int, offset: int, has_order: bool
    ) -> None: ...

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dialect):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
