"""SQLite dialect implementation."""

from __future__ import annotations

from io import StringIO
from typing import Any

from pysqlbuilder._args import unwrap
from pysqlbuilder.dialect._base import Dialect, DialectName, MarkerStyle


class SQLiteDialect(Dialect):
    """SQLite dialect: repeated ``?`` markers and ``LIMIT n OFFSET m``."""

    name = DialectName.SQLITE
    marker_style = MarkerStyle.REPEATED

    # --- Placeholders ---

    def marker(self, param_index: int, name: str | None = None) -> str:
        return "?"

    def bind_arg(self, param_index: int, value: Any, name: str | None = None) -> Any:
        return unwrap(value)

    # --- Clauses ---

    def write_limit(
        self, w: StringIO, limit: int, offset: int, has_order: bool
    ) -> None:
        w.write(f" LIMIT {limit}")
        if offset:
            w.write(f" OFFSET {offset}")
