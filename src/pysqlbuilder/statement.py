"""Immutable statement builder.

Every fluent call returns a new Statement; the receiver is never changed,
so a partially built statement can be shared and extended freely.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, ClassVar

from pysqlbuilder._errors import (
    ERR_MSG_STATEMENT_MALFORMED,
    ConditionMalformedError,
)
from pysqlbuilder.cond import And, Cond, Eq, Expr, Or
from pysqlbuilder.dialect import MSSQL, MYSQL, ORACLE, POSTGRES, SQLITE, Dialect

if TYPE_CHECKING:
    from pysqlbuilder import Result


class Operation(enum.StrEnum):
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class JoinType(enum.StrEnum):
    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    FULL = "FULL"
    CROSS = "CROSS"


def _as_cond(cond: Cond | str) -> Cond:
    if isinstance(cond, str):
        return Expr(cond)
    if not isinstance(cond, Cond):
        raise ConditionMalformedError(
            ERR_MSG_STATEMENT_MALFORMED,
            f"expected a condition or SQL text, got {type(cond).__name__}",
        )
    return cond


def _merge_assignments(eqs: tuple[Eq, ...]) -> tuple[tuple[str, Any], ...]:
    merged: dict[str, Any] = {}
    for eq in eqs:
        if type(eq) is not Eq:
            raise ConditionMalformedError(
                ERR_MSG_STATEMENT_MALFORMED,
                f"column values must be given as Eq, got {type(eq).__name__}",
            )
        merged.update(eq.pairs)
    return tuple(merged.items())


@dataclass(frozen=True)
class Join:
    join_type: JoinType
    table: str | Statement
    on: Cond | None = None
    alias: str = ""


@dataclass(frozen=True)
class Statement:
    """A select/insert/update/delete statement and its clauses."""

    dialect: Dialect | None = None
    operation: Operation | None = None
    table: str | Statement = ""
    alias: str = ""
    columns: tuple[str, ...] = ()
    assignments: tuple[tuple[str, Any], ...] = ()
    joins: tuple[Join, ...] = ()
    where_cond: Cond | None = None
    groups: tuple[str, ...] = ()
    having_cond: Cond | None = None
    orders: tuple[str, ...] = ()
    pagination: tuple[int, int] | None = None

    kind: ClassVar[str] = "statement"

    # ---- Operations ----

    def select(self, *columns: str) -> Statement:
        return replace(self, operation=Operation.SELECT, columns=columns)

    def insert(self, *eqs: Eq) -> Statement:
        """INSERT the merged column values of ``eqs``; pick the table with ``into``."""
        return replace(self, operation=Operation.INSERT, assignments=_merge_assignments(eqs))

    def update(self, *eqs: Eq) -> Statement:
        """UPDATE ... SET the merged column values of ``eqs``; pick the table with ``from_``."""
        return replace(self, operation=Operation.UPDATE, assignments=_merge_assignments(eqs))

    def delete(self, cond: Cond | str | None = None) -> Statement:
        stmt = replace(self, operation=Operation.DELETE)
        if cond is not None:
            stmt = stmt.where(cond)
        return stmt

    # ---- Tables ----

    def from_(self, table: str | Statement, alias: str = "") -> Statement:
        return replace(self, table=table, alias=alias)

    def into(self, table: str) -> Statement:
        return replace(self, table=table)

    def join(
        self,
        join_type: JoinType | str,
        table: str | Statement,
        on: Cond | str | None = None,
        alias: str = "",
    ) -> Statement:
        join_type = JoinType(join_type.upper())
        on_cond = _as_cond(on) if on is not None else None
        if join_type is not JoinType.CROSS and on_cond is None:
            raise ConditionMalformedError(
                ERR_MSG_STATEMENT_MALFORMED,
                f"{join_type} JOIN requires an ON condition",
            )
        return replace(self, joins=self.joins + (Join(join_type, table, on_cond, alias),))

    def inner_join(self, table: str | Statement, on: Cond | str, alias: str = "") -> Statement:
        return self.join(JoinType.INNER, table, on, alias)

    def left_join(self, table: str | Statement, on: Cond | str, alias: str = "") -> Statement:
        return self.join(JoinType.LEFT, table, on, alias)

    def right_join(self, table: str | Statement, on: Cond | str, alias: str = "") -> Statement:
        return self.join(JoinType.RIGHT, table, on, alias)

    def full_join(self, table: str | Statement, on: Cond | str, alias: str = "") -> Statement:
        return self.join(JoinType.FULL, table, on, alias)

    def cross_join(self, table: str | Statement, alias: str = "") -> Statement:
        return self.join(JoinType.CROSS, table, None, alias)

    # ---- Conditions ----

    def where(self, cond: Cond | str) -> Statement:
        """Set the WHERE condition, AND-ing it onto any existing one."""
        return self.and_(cond)

    def and_(self, cond: Cond | str) -> Statement:
        cond = _as_cond(cond)
        if self.where_cond is not None:
            cond = And(self.where_cond, cond)
        return replace(self, where_cond=cond)

    def or_(self, cond: Cond | str) -> Statement:
        cond = _as_cond(cond)
        if self.where_cond is not None:
            cond = Or(self.where_cond, cond)
        return replace(self, where_cond=cond)

    # ---- Grouping, ordering, paging ----

    def group_by(self, *keys: str) -> Statement:
        return replace(self, groups=self.groups + keys)

    def having(self, cond: Cond | str) -> Statement:
        cond = _as_cond(cond)
        if self.having_cond is not None:
            cond = And(self.having_cond, cond)
        return replace(self, having_cond=cond)

    def order_by(self, *orders: str) -> Statement:
        return replace(self, orders=self.orders + orders)

    def limit(self, limit: int, offset: int = 0) -> Statement:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise ConditionMalformedError(
                ERR_MSG_STATEMENT_MALFORMED, f"invalid limit: {limit!r}"
            )
        if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
            raise ConditionMalformedError(
                ERR_MSG_STATEMENT_MALFORMED, f"invalid offset: {offset!r}"
            )
        return replace(self, pagination=(limit, offset))

    # ---- Rendering ----

    def to_sql(self, *, max_depth: int | None = None) -> Result:
        """Render with the bound dialect (MySQL when unbound)."""
        from pysqlbuilder import to_sql

        return to_sql(self, max_depth=max_depth)

    def to_bound_sql(self) -> str:
        """Render with every argument inlined as a literal."""
        from pysqlbuilder import to_bound_sql

        return to_bound_sql(self)


# ---- Entry points ----


def select(*columns: str) -> Statement:
    return Statement().select(*columns)


def insert(*eqs: Eq) -> Statement:
    return Statement().insert(*eqs)


def update(*eqs: Eq) -> Statement:
    return Statement().update(*eqs)


def delete(cond: Cond | str | None = None) -> Statement:
    return Statement().delete(cond)


def mysql() -> Statement:
    return Statement(dialect=MYSQL)


def postgres() -> Statement:
    return Statement(dialect=POSTGRES)


def sqlite() -> Statement:
    return Statement(dialect=SQLITE)


def mssql() -> Statement:
    return Statement(dialect=MSSQL)


def oracle() -> Statement:
    return Statement(dialect=ORACLE)
