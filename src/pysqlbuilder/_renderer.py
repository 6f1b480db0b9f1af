"""Renderer: walks conditions and statements, writing SQL and collecting arguments."""

from __future__ import annotations

from io import StringIO
from typing import Any

from pysqlbuilder._args import Named
from pysqlbuilder._bound import format_literal
from pysqlbuilder._constants import DEFAULT_MAX_RECURSION_DEPTH
from pysqlbuilder._errors import (
    ERR_MSG_CONDITION_MALFORMED,
    ERR_MSG_NOT_SUPPORT_TYPE,
    ERR_MSG_STATEMENT_MALFORMED,
    ConditionMalformedError,
    InconsistentDialectError,
    MaxDepthExceededError,
    NoColumnToInsertError,
    NoColumnToUpdateError,
    NoTableNameError,
    NotSupportTypeError,
)
from pysqlbuilder._placeholder import scan_placeholders
from pysqlbuilder._utils import quote_string_literal
from pysqlbuilder.cond import (
    And,
    Between,
    Cond,
    Expr,
    In,
    IsNull,
    Like,
    Not,
    NotIn,
    Or,
    _Combinator,
    _Compare,
)
from pysqlbuilder.dialect import Dialect
from pysqlbuilder.statement import Join, Operation, Statement


class Renderer:
    """Renders one condition or statement for a dialect.

    Placeholders are numbered with a single running 1-based index across
    the whole output, nested sub-statements included. With ``bind_literals``
    every argument is written inline as literal text instead of a marker
    and no arguments are collected.
    """

    def __init__(
        self,
        dialect: Dialect,
        *,
        bind_literals: bool = False,
        max_depth: int = DEFAULT_MAX_RECURSION_DEPTH,
    ) -> None:
        self._w = StringIO()
        self._dialect = dialect
        self._bind_literals = bind_literals
        self._max_depth = max_depth
        self._depth = 0
        self._args: list[Any] = []
        self._param_count = 0
        self._named: dict[str, Any] = {}

    @property
    def result(self) -> str:
        return self._w.getvalue()

    @property
    def args(self) -> list[Any]:
        return self._args

    def render(self, value: Cond | Statement) -> None:
        self._visit_child(value)

    def _check_limits(self) -> None:
        if self._depth > self._max_depth:
            raise MaxDepthExceededError(
                "maximum nesting depth exceeded",
                f"depth {self._depth} exceeds limit {self._max_depth}",
            )

    def _visit_child(self, node: Cond | Statement) -> None:
        """Visit a child node, incrementing depth."""
        self._depth += 1
        try:
            self._check_limits()
            self.visit(node)
        finally:
            self._depth -= 1

    def visit(self, node: Cond | Statement) -> None:
        if not isinstance(node, (Cond, Statement)):
            raise NotSupportTypeError(
                ERR_MSG_NOT_SUPPORT_TYPE,
                f"cannot render value of type {type(node).__name__}",
            )
        getattr(self, f"visit_{node.kind}")(node)

    # ---- Placeholders ----

    def _param(self, value: Any) -> str:
        """Record an argument and return the marker standing in for it.

        In literal mode the argument's literal text is returned instead.
        """
        self._param_count += 1
        if self._bind_literals:
            return format_literal(value)
        name = value.name if isinstance(value, Named) else None
        arg = self._dialect.bind_arg(self._param_count, value, name)
        if isinstance(arg, Named):
            self._check_named(arg)
        self._args.append(arg)
        return self._dialect.marker(self._param_count, name)

    def _check_named(self, arg: Named) -> None:
        # one name may repeat only when it carries the same value
        if arg.name in self._named and self._named[arg.name] != arg.value:
            raise ConditionMalformedError(
                ERR_MSG_CONDITION_MALFORMED,
                f"parameter name {arg.name!r} is bound to two different values",
            )
        self._named[arg.name] = arg.value

    def _write_value(self, value: Any, parenthesize: bool = True) -> None:
        if isinstance(value, Statement):
            self._w.write("(")
            self._visit_child(value)
            self._w.write(")")
        elif isinstance(value, Expr):
            if parenthesize:
                self._w.write("(")
            self.visit_expr(value)
            if parenthesize:
                self._w.write(")")
        else:
            self._w.write(self._param(value))

    # ---- Comparisons ----

    def _visit_compare(self, node: _Compare) -> None:
        for i, (column, value) in enumerate(node.pairs):
            if i > 0:
                self._w.write(" AND ")
            if value is None:
                self._write_null_compare(node, column)
            elif isinstance(value, tuple):
                self._write_sequence_compare(node, column, value)
            else:
                self._w.write(f"{column}{node.op}")
                self._write_value(value)

    def _write_null_compare(self, node: _Compare, column: str) -> None:
        if node.kind == "eq":
            self._w.write(f"{column} IS NULL")
        elif node.kind == "neq":
            self._w.write(f"{column} IS NOT NULL")
        else:
            raise ConditionMalformedError(
                ERR_MSG_CONDITION_MALFORMED,
                f"cannot compare {column!r} with NULL using {node.op}",
            )

    def _write_sequence_compare(self, node: _Compare, column: str, values: tuple) -> None:
        if node.kind == "eq":
            self.visit_in(In(column, *values))
        elif node.kind == "neq":
            self.visit_not_in(NotIn(column, *values))
        else:
            raise ConditionMalformedError(
                ERR_MSG_CONDITION_MALFORMED,
                f"cannot compare {column!r} with a sequence using {node.op}",
            )

    def visit_eq(self, node: _Compare) -> None:
        self._visit_compare(node)

    def visit_neq(self, node: _Compare) -> None:
        self._visit_compare(node)

    def visit_gt(self, node: _Compare) -> None:
        self._visit_compare(node)

    def visit_gte(self, node: _Compare) -> None:
        self._visit_compare(node)

    def visit_lt(self, node: _Compare) -> None:
        self._visit_compare(node)

    def visit_lte(self, node: _Compare) -> None:
        self._visit_compare(node)

    # ---- Pattern, range, membership, null ----

    def _visit_like(self, node: Like, op: str) -> None:
        self._w.write(f"{node.column} {op} ")
        self._write_value(node.pattern)
        if node.escape is not None:
            self._w.write(f" ESCAPE {quote_string_literal(node.escape)}")

    def visit_like(self, node: Like) -> None:
        self._visit_like(node, "LIKE")

    def visit_not_like(self, node: Like) -> None:
        self._visit_like(node, "NOT LIKE")

    def visit_between(self, node: Between) -> None:
        self._w.write(f"{node.column} BETWEEN ")
        self._write_value(node.lower)
        self._w.write(" AND ")
        self._write_value(node.upper)

    def _visit_in(self, node: In, op: str) -> None:
        self._w.write(f"{node.column} {op} (")
        sub = node.subquery
        if isinstance(sub, Statement):
            self._visit_child(sub)
        elif isinstance(sub, Expr):
            self.visit_expr(sub)
        else:
            self._w.write(",".join(self._param(v) for v in node.values))
        self._w.write(")")

    def visit_in(self, node: In) -> None:
        self._visit_in(node, "IN")

    def visit_not_in(self, node: In) -> None:
        self._visit_in(node, "NOT IN")

    def visit_is_null(self, node: IsNull) -> None:
        self._w.write(" AND ".join(f"{c} IS NULL" for c in node.columns))

    def visit_is_not_null(self, node: IsNull) -> None:
        self._w.write(" AND ".join(f"{c} IS NOT NULL" for c in node.columns))

    # ---- Combinators ----

    def _visit_combinator(self, node: _Combinator) -> None:
        children = node.effective()
        for i, child in enumerate(children):
            if i > 0:
                self._w.write(node.joiner)
            # a lone child takes the parent's place and is wrapped by it, if at all
            group = child.group()
            wrap = len(children) > 1 and group is not None and group != node.own_group
            if wrap:
                self._w.write("(")
            self._visit_child(child)
            if wrap:
                self._w.write(")")

    def visit_and(self, node: And) -> None:
        self._visit_combinator(node)

    def visit_or(self, node: Or) -> None:
        self._visit_combinator(node)

    def visit_not(self, node: Not) -> None:
        if node.cond.is_empty:
            return
        self._w.write("NOT ")
        if node.cond.group() is not None:
            self._w.write("(")
            self._visit_child(node.cond)
            self._w.write(")")
        else:
            self._visit_child(node.cond)

    def visit_expr(self, node: Expr) -> None:
        args = iter(node.args)
        sql, _ = scan_placeholders(node.sql, lambda _index: self._param(next(args)))
        self._w.write(sql)

    # ---- Statements ----

    def visit_statement(self, stmt: Statement) -> None:
        if stmt.dialect is not None and stmt.dialect != self._dialect:
            raise InconsistentDialectError(
                ERR_MSG_STATEMENT_MALFORMED,
                f"statement bound to {stmt.dialect.name} rendered as {self._dialect.name}",
            )
        if stmt.operation is None:
            raise ConditionMalformedError(
                ERR_MSG_STATEMENT_MALFORMED,
                "statement has no select/insert/update/delete operation",
            )
        if not stmt.table:
            raise NoTableNameError("no table indicated", f"{stmt.operation} without a table")
        if stmt.operation is not Operation.SELECT:
            self._check_select_only_clauses(stmt)
        getattr(self, f"_write_{stmt.operation.lower()}")(stmt)

    @staticmethod
    def _check_select_only_clauses(stmt: Statement) -> None:
        for clause, present in (
            ("JOIN", stmt.joins),
            ("GROUP BY", stmt.groups),
            ("HAVING", stmt.having_cond is not None),
            ("ORDER BY", stmt.orders),
            ("LIMIT", stmt.pagination is not None),
        ):
            if present:
                raise ConditionMalformedError(
                    ERR_MSG_STATEMENT_MALFORMED,
                    f"{clause} is only supported in SELECT, not {stmt.operation}",
                )

    def _write_condition_clause(self, keyword: str, cond: Cond) -> None:
        if cond.is_empty:
            raise ConditionMalformedError(
                ERR_MSG_CONDITION_MALFORMED,
                f"empty condition used as {keyword.strip()} clause",
            )
        self._w.write(keyword)
        self._visit_child(cond)

    def _write_table(self, table: str | Statement, alias: str) -> None:
        if isinstance(table, Statement):
            if not alias:
                raise ConditionMalformedError(
                    ERR_MSG_STATEMENT_MALFORMED, "sub-statement table requires an alias"
                )
            self._w.write("(")
            self._visit_child(table)
            self._w.write(f") {alias}")
        else:
            self._w.write(table)
            if alias:
                self._w.write(f" {alias}")

    def _write_join(self, join: Join) -> None:
        self._w.write(f" {join.join_type} JOIN ")
        self._write_table(join.table, join.alias)
        if join.on is not None:
            self._write_condition_clause(" ON ", join.on)

    def _write_select(self, stmt: Statement) -> None:
        self._w.write("SELECT ")
        self._w.write(",".join(stmt.columns) if stmt.columns else "*")
        self._w.write(" FROM ")
        self._write_table(stmt.table, stmt.alias)
        for join in stmt.joins:
            self._write_join(join)
        if stmt.where_cond is not None:
            self._write_condition_clause(" WHERE ", stmt.where_cond)
        if stmt.groups:
            self._w.write(f" GROUP BY {','.join(stmt.groups)}")
        if stmt.having_cond is not None:
            self._write_condition_clause(" HAVING ", stmt.having_cond)
        if stmt.orders:
            self._w.write(f" ORDER BY {','.join(stmt.orders)}")
        if stmt.pagination is not None:
            limit, offset = stmt.pagination
            self._dialect.write_limit(self._w, limit, offset, bool(stmt.orders))

    def _write_insert(self, stmt: Statement) -> None:
        if not stmt.assignments:
            raise NoColumnToInsertError("no column(s) to insert", f"INSERT INTO {stmt.table}")
        columns = ",".join(column for column, _ in stmt.assignments)
        self._w.write(f"INSERT INTO {stmt.table} ({columns}) VALUES (")
        for i, (column, value) in enumerate(stmt.assignments):
            if i > 0:
                self._w.write(",")
            if value is None:
                self._w.write("null")
            elif isinstance(value, tuple):
                raise ConditionMalformedError(
                    ERR_MSG_STATEMENT_MALFORMED,
                    f"cannot insert a sequence into {column!r}",
                )
            else:
                self._write_value(value, parenthesize=False)
        self._w.write(")")

    def _write_update(self, stmt: Statement) -> None:
        if not stmt.assignments:
            raise NoColumnToUpdateError("no column(s) to update", f"UPDATE {stmt.table}")
        self._w.write(f"UPDATE {stmt.table} SET ")
        for i, (column, value) in enumerate(stmt.assignments):
            if i > 0:
                self._w.write(",")
            if value is None:
                self._w.write(f"{column}=null")
            elif isinstance(value, tuple):
                raise ConditionMalformedError(
                    ERR_MSG_STATEMENT_MALFORMED,
                    f"cannot assign a sequence to {column!r}",
                )
            else:
                self._w.write(f"{column}=")
                self._write_value(value)
        if stmt.where_cond is not None:
            self._write_condition_clause(" WHERE ", stmt.where_cond)

    def _write_delete(self, stmt: Statement) -> None:
        self._w.write(f"DELETE FROM {stmt.table}")
        if stmt.where_cond is not None:
            self._write_condition_clause(" WHERE ", stmt.where_cond)
