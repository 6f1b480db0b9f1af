"""pysqlbuilder - Compose conditions and statements, render dialect-specific SQL."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pysqlbuilder")
except PackageNotFoundError:  # running from a source checkout
    __version__ = "0.0.0.dev0"

import logging
from dataclasses import dataclass, field
from typing import Any

from pysqlbuilder._args import Named
from pysqlbuilder._bound import convert_to_bound_sql, format_literal
from pysqlbuilder._constants import DEFAULT_MAX_RECURSION_DEPTH
from pysqlbuilder._errors import (
    ERR_MSG_NOT_SUPPORT_TYPE,
    BuilderError,
    ConditionMalformedError,
    MalformedSQLError,
    NeedMoreArgumentsError,
    NotSupportTypeError,
    UnsupportedDialectError,
)
from pysqlbuilder._filter import parse_filter
from pysqlbuilder._placeholder import convert_placeholder
from pysqlbuilder._renderer import Renderer
from pysqlbuilder.cond import (
    And,
    Between,
    Cond,
    Eq,
    Expr,
    Gt,
    Gte,
    In,
    IsNotNull,
    IsNull,
    Like,
    Lt,
    Lte,
    Neq,
    Not,
    NotIn,
    NotLike,
    Or,
)
from pysqlbuilder.dialect import Dialect, get_dialect, resolve_dialect
from pysqlbuilder.statement import (
    JoinType,
    Statement,
    delete,
    insert,
    mssql,
    mysql,
    oracle,
    postgres,
    select,
    sqlite,
    update,
)

__all__ = [
    "to_sql",
    "to_bound_sql",
    "convert_placeholder",
    "convert_to_bound_sql",
    "format_literal",
    "parse_filter",
    "Result",
    # conditions
    "Cond",
    "Eq",
    "Neq",
    "Gt",
    "Gte",
    "Lt",
    "Lte",
    "Like",
    "NotLike",
    "Between",
    "In",
    "NotIn",
    "IsNull",
    "IsNotNull",
    "And",
    "Or",
    "Not",
    "Expr",
    "Named",
    # statements
    "Statement",
    "JoinType",
    "select",
    "insert",
    "update",
    "delete",
    "mysql",
    "postgres",
    "sqlite",
    "mssql",
    "oracle",
    # dialects
    "Dialect",
    "get_dialect",
    # errors
    "BuilderError",
    "ConditionMalformedError",
    "MalformedSQLError",
    "NeedMoreArgumentsError",
    "NotSupportTypeError",
    "UnsupportedDialectError",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Result:
    """Rendered SQL text and its arguments in placeholder order."""

    sql: str
    args: list[Any] = field(default_factory=list)


def _render_dialect(value: Cond | Statement, dialect: Dialect | str | None) -> Dialect:
    if not isinstance(value, (Cond, Statement)):
        raise NotSupportTypeError(
            ERR_MSG_NOT_SUPPORT_TYPE,
            f"expected a condition or statement, got {type(value).__name__}",
        )
    if dialect is None and isinstance(value, Statement) and value.dialect is not None:
        return value.dialect
    return resolve_dialect(dialect)


def to_sql(
    value: Cond | Statement,
    *,
    dialect: Dialect | str | None = None,
    max_depth: int | None = None,
) -> Result:
    """Render a condition or statement to SQL text plus arguments.

    Args:
        value: The condition or statement to render.
        dialect: Dialect or dialect name. Defaults to the statement's bound
            dialect, or MySQL (plain ``?`` markers).
        max_depth: Maximum nesting depth. Defaults to 100.

    Returns:
        Result with one argument per placeholder, in text order.

    Raises:
        NotSupportTypeError: If ``value`` is not a condition or statement.
        ConditionMalformedError: If the value has an invalid shape.
        UnsupportedDialectError: If the dialect name is unknown.
    """
    target = _render_dialect(value, dialect)
    renderer = Renderer(
        target,
        max_depth=max_depth if max_depth is not None else DEFAULT_MAX_RECURSION_DEPTH,
    )
    renderer.render(value)
    logger.debug(
        "rendered %s for %s with %d args",
        type(value).__name__, target.name, len(renderer.args),
    )
    return Result(sql=renderer.result, args=renderer.args)


def to_bound_sql(
    value: str | Cond | Statement,
    *args: Any,
    dialect: Dialect | str | None = None,
) -> str:
    """Render SQL with every argument inlined as literal text.

    Bound SQL is meant for logging and debugging, not for execution.

    Args:
        value: Raw SQL text with ``?`` markers, or a condition/statement.
        *args: Arguments for raw SQL text, one per marker.
        dialect: Dialect whose clause rules are used for a condition or
            statement. Each argument is written inline where its
            placeholder would be.

    Returns:
        The bound SQL text.

    Raises:
        NotSupportTypeError: If ``value`` is not SQL text, a condition or a
            statement, or if arguments are passed with a condition/statement.
        NeedMoreArgumentsError: If the marker and argument counts differ.
    """
    if isinstance(value, str):
        return convert_to_bound_sql(value, args)
    target = _render_dialect(value, dialect)
    if args:
        raise NotSupportTypeError(
            ERR_MSG_NOT_SUPPORT_TYPE,
            "arguments are only accepted together with raw SQL text",
        )
    renderer = Renderer(target, bind_literals=True)
    renderer.render(value)
    logger.debug("bound %s for %s", type(value).__name__, target.name)
    return renderer.result
