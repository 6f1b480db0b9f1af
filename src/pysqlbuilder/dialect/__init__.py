"""SQL dialect table: placeholder and clause rules per database family."""

from types import MappingProxyType

from pysqlbuilder._errors import ERR_MSG_UNSUPPORTED_DIALECT, UnsupportedDialectError
from pysqlbuilder.dialect._base import Dialect, DialectName, MarkerStyle
from pysqlbuilder.dialect.mssql import MsSQLDialect
from pysqlbuilder.dialect.mysql import MySQLDialect
from pysqlbuilder.dialect.oracle import OracleDialect
from pysqlbuilder.dialect.postgres import PostgresDialect
from pysqlbuilder.dialect.sqlite import SQLiteDialect

__all__ = [
    "Dialect",
    "DialectName",
    "MarkerStyle",
    "MsSQLDialect",
    "MySQLDialect",
    "OracleDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "MYSQL",
    "POSTGRES",
    "SQLITE",
    "MSSQL",
    "ORACLE",
    "get_dialect",
    "resolve_dialect",
]

MYSQL: Dialect = MySQLDialect()
POSTGRES: Dialect = PostgresDialect()
SQLITE: Dialect = SQLiteDialect()
MSSQL: Dialect = MsSQLDialect()
ORACLE: Dialect = OracleDialect()

_REGISTRY = MappingProxyType({
    DialectName.MYSQL: MYSQL,
    DialectName.POSTGRES: POSTGRES,
    DialectName.SQLITE: SQLITE,
    DialectName.MSSQL: MSSQL,
    DialectName.ORACLE: ORACLE,
})


def get_dialect(name: str) -> Dialect:
    """Get a dialect instance by name.

    Args:
        name: Dialect name (e.g., "mysql", "postgres", "sqlite", "mssql", "oracle").

    Returns:
        The shared Dialect instance.

    Raises:
        UnsupportedDialectError: If the dialect name is unknown.
    """
    dialect = _REGISTRY.get(name)
    if dialect is None:
        raise UnsupportedDialectError(
            ERR_MSG_UNSUPPORTED_DIALECT,
            f"unknown dialect: {name!r}. "
            f"Available: {', '.join(sorted(_REGISTRY))}",
        )
    return dialect


def resolve_dialect(dialect: Dialect | str | None, default: Dialect = MYSQL) -> Dialect:
    """Accept a Dialect, a dialect name, or None (meaning ``default``)."""
    if dialect is None:
        return default
    if isinstance(dialect, Dialect):
        return dialect
    if isinstance(dialect, str):
        return get_dialect(dialect)
    raise UnsupportedDialectError(
        ERR_MSG_UNSUPPORTED_DIALECT,
        f"expected Dialect or dialect name, got {type(dialect).__name__}",
    )
