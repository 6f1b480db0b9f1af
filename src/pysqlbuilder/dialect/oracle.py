"""Oracle dialect implementation."""

from __future__ import annotations

from io import StringIO
from typing import Any

from pysqlbuilder._args import Named, unwrap
from pysqlbuilder.dialect._base import Dialect, DialectName, MarkerStyle


class OracleDialect(Dialect):
    """Oracle dialect: ``:p1, :p2, ...`` named markers, 12c row limiting."""

    name = DialectName.ORACLE
    marker_style = MarkerStyle.NAMED

    # --- Placeholders ---

    def marker(self, param_index: int, name: str | None = None) -> str:
        return f":{name or f'p{param_index}'}"

    def bind_arg(self, param_index: int, value: Any, name: str | None = None) -> Any:
        return Named(name or f"p{param_index}", unwrap(value))

    # --- Clauses ---

    def write_limit(
        self, w: StringIO, limit: int, offset: int, has_order: bool
    ) -> None:
        w.write(f" OFFSET {offset} ROWS FETCH NEXT {limit} ROWS ONLY")
