"""Escaping helpers shared by the literal formatter and filter parser."""

from __future__ import annotations

from pysqlbuilder._constants import LIKE_ESCAPE_CHAR


def escape_string_literal(value: str) -> str:
    """Escape a string for use as a SQL string literal."""
    return value.replace("'", "''")


def quote_string_literal(value: str) -> str:
    return f"'{escape_string_literal(value)}'"


def escape_like_pattern(pattern: str, escape_char: str = LIKE_ESCAPE_CHAR) -> str:
    """Escape LIKE wildcards so ``pattern`` matches literally.

    The result is meant to be bound as an argument, so quotes are left alone.
    """
    result = pattern.replace(escape_char, escape_char * 2)
    result = result.replace("%", f"{escape_char}%")
    result = result.replace("_", f"{escape_char}_")
    return result
