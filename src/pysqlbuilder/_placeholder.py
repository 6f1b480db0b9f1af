"""Placeholder scanning and marker conversion for raw SQL text."""

from __future__ import annotations

import logging
from collections.abc import Callable
from io import StringIO

from pysqlbuilder._constants import BARE_MARKER, ESCAPE_CHAR, QUOTE_CHARS
from pysqlbuilder._errors import (
    ERR_MSG_MALFORMED_SQL,
    ERR_MSG_UNSUPPORTED_DIALECT,
    MalformedSQLError,
    UnsupportedDialectError,
)
from pysqlbuilder.dialect._base import Dialect

logger = logging.getLogger(__name__)

ReplaceFunc = Callable[[int], str]
"""Returns the text replacing the bare marker with the given 1-based index."""


def scan_placeholders(sql: str, replace: ReplaceFunc | None = None) -> tuple[str, int]:
    """Rewrite every bare ``?`` outside quoted literals.

    A backslash directly before the active quote character does not close
    the literal. A literal is only closed by the character that opened it.

    Args:
        sql: Raw SQL text.
        replace: Called with the 1-based index of each bare marker. When
            omitted the text is only scanned.

    Returns:
        The rewritten text and the number of bare markers found.

    Raises:
        MalformedSQLError: If the text ends inside a quoted literal.
    """
    w = StringIO()
    quote: str | None = None
    count = 0
    start = 0
    i = 0
    n = len(sql)
    while i < n:
        ch = sql[i]
        if quote is None:
            if ch in QUOTE_CHARS:
                quote = ch
            elif ch == BARE_MARKER:
                count += 1
                if replace is not None:
                    w.write(sql[start:i])
                    w.write(replace(count))
                    start = i + 1
        elif ch == ESCAPE_CHAR and i + 1 < n and sql[i + 1] == quote:
            i += 2
            continue
        elif ch == quote:
            quote = None
        i += 1

    if quote is not None:
        raise MalformedSQLError(
            ERR_MSG_MALFORMED_SQL,
            f"literal opened with {quote} is not closed in: {sql!r}",
        )
    if replace is None or count == 0:
        return sql, count
    w.write(sql[start:])
    return w.getvalue(), count


def count_placeholders(sql: str) -> int:
    """Count bare ``?`` markers outside quoted literals."""
    return scan_placeholders(sql)[1]


def convert_placeholder(sql: str, marker: str | Dialect) -> str:
    """Convert bare ``?`` markers into another placeholder scheme.

    Args:
        sql: SQL text using ``?`` markers.
        marker: A prefix followed by the 1-based index (``"$"`` gives
            ``$1``, ``"@p"`` gives ``@p1``), or a Dialect whose marker
            scheme is used.

    Returns:
        The converted SQL. Text without bare markers is returned unchanged.

    Raises:
        MalformedSQLError: If the text ends inside a quoted literal.
        UnsupportedDialectError: If the prefix is empty.
    """
    if isinstance(marker, Dialect):
        replace: ReplaceFunc = marker.marker
    elif isinstance(marker, str) and marker:
        prefix = marker

        def replace(index: int) -> str:
            return f"{prefix}{index}"
    else:
        raise UnsupportedDialectError(
            ERR_MSG_UNSUPPORTED_DIALECT,
            f"invalid placeholder marker: {marker!r}",
        )

    converted, count = scan_placeholders(sql, replace)
    logger.debug("converted %d placeholders using %r", count, marker)
    return converted
