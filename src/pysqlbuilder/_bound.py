"""Bound-SQL formatting: inline arguments as literal text.

Bound SQL is for logging and inspection only. Strings are quoted with
internal quotes doubled, which keeps a value from terminating its
literal; it does not escape LIKE wildcards.
"""

from __future__ import annotations

import datetime
import logging
import math
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from pysqlbuilder._args import unwrap
from pysqlbuilder._errors import ERR_MSG_NEED_MORE_ARGUMENTS, NeedMoreArgumentsError
from pysqlbuilder._placeholder import scan_placeholders
from pysqlbuilder._utils import quote_string_literal

logger = logging.getLogger(__name__)


def format_literal(value: Any) -> str:
    """Format one argument as SQL literal text.

    Named arguments are formatted by their carried value.
    """
    value = unwrap(value)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        if math.isfinite(value):
            return repr(float(value))
        return quote_string_literal(repr(float(value)))
    if isinstance(value, Decimal):
        if value.is_finite():
            return str(value)
        return quote_string_literal(str(value))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return quote_string_literal(bytes(value).decode("utf-8", errors="backslashreplace"))
    if isinstance(value, datetime.datetime):
        return quote_string_literal(value.isoformat(sep=" "))
    if isinstance(value, (datetime.date, datetime.time)):
        return quote_string_literal(value.isoformat())
    return quote_string_literal(str(value))


def convert_to_bound_sql(sql: str, args: Sequence[Any]) -> str:
    """Replace each bare ``?`` in ``sql`` with the literal text of its argument.

    Args:
        sql: SQL text using ``?`` markers.
        args: One argument per marker, in order.

    Returns:
        The SQL with every marker replaced.

    Raises:
        NeedMoreArgumentsError: If the marker and argument counts differ.
        MalformedSQLError: If the text ends inside a quoted literal.
    """
    args = list(args)

    def replace(index: int) -> str:
        if index > len(args):
            raise NeedMoreArgumentsError(
                ERR_MSG_NEED_MORE_ARGUMENTS,
                f"placeholder {index} has no argument; {len(args)} given",
            )
        return format_literal(args[index - 1])

    bound, count = scan_placeholders(sql, replace)
    if count != len(args):
        raise NeedMoreArgumentsError(
            ERR_MSG_NEED_MORE_ARGUMENTS,
            f"{count} placeholders but {len(args)} arguments",
        )
    logger.debug("bound %d arguments into SQL", count)
    return bound
