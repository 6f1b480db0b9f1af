"""Placeholder conversion tests."""

import pytest

from pysqlbuilder import MalformedSQLError, UnsupportedDialectError, convert_placeholder
from pysqlbuilder._placeholder import count_placeholders, scan_placeholders
from pysqlbuilder.dialect import MSSQL, MYSQL, ORACLE, POSTGRES, SQLITE

PLACEHOLDER_SQL = (
    "SELECT a, b FROM table_a WHERE b_id=(SELECT id FROM table_b WHERE b=?) "
    "AND id=? AND c=? AND d=? AND e=? AND f=?"
)
CONVERTED_SQL = (
    "SELECT a, b FROM table_a WHERE b_id=(SELECT id FROM table_b WHERE b=$1) "
    "AND id=$2 AND c=$3 AND d=$4 AND e=$5 AND f=$6"
)


class TestConvertPlaceholder:
    def test_dollar_prefix(self):
        assert convert_placeholder(PLACEHOLDER_SQL, "$") == CONVERTED_SQL

    def test_subquery_example(self):
        sql = "SELECT a,b FROM t WHERE b_id=(SELECT id FROM u WHERE b=?) AND id=?"
        assert convert_placeholder(sql, "$") == (
            "SELECT a,b FROM t WHERE b_id=(SELECT id FROM u WHERE b=$1) AND id=$2"
        )

    def test_marker_inside_literal_kept(self):
        sql = "SELECT a, b, 'a?b' FROM table_a WHERE id=?"
        assert convert_placeholder(sql, ":") == "SELECT a, b, 'a?b' FROM table_a WHERE id=:1"

    def test_escaped_quote_keeps_literal_open(self):
        sql = "SELECT a, b, 'a\\'?b' FROM table_a WHERE id=?"
        assert convert_placeholder(sql, "$") == "SELECT a, b, 'a\\'?b' FROM table_a WHERE id=$1"

    def test_escaped_quote_without_marker(self):
        sql = "SELECT a, b, 'a\\'b' FROM table_a WHERE id=?"
        assert convert_placeholder(sql, "$") == "SELECT a, b, 'a\\'b' FROM table_a WHERE id=$1"

    def test_doubled_quote_literal(self):
        sql = "SELECT 'it''s ?' FROM t WHERE id=?"
        assert convert_placeholder(sql, "$") == "SELECT 'it''s ?' FROM t WHERE id=$1"

    def test_double_quoted_identifier(self):
        sql = 'SELECT "col?" FROM t WHERE a=? AND b=?'
        assert convert_placeholder(sql, "$") == 'SELECT "col?" FROM t WHERE a=$1 AND b=$2'

    def test_backtick_identifier(self):
        sql = "SELECT `x?` FROM t WHERE a=?"
        assert convert_placeholder(sql, "@p") == "SELECT `x?` FROM t WHERE a=@p1"

    def test_other_quote_does_not_close_literal(self):
        sql = "SELECT 'say \"?' FROM t WHERE a=?"
        assert convert_placeholder(sql, "$") == "SELECT 'say \"?' FROM t WHERE a=$1"

    def test_no_markers_unchanged(self):
        sql = "SELECT * FROM t WHERE a=1"
        assert convert_placeholder(sql, "$") == sql

    def test_idempotent_on_converted_text(self):
        once = convert_placeholder(PLACEHOLDER_SQL, "$")
        assert convert_placeholder(once, "$") == once

    def test_unterminated_literal(self):
        with pytest.raises(MalformedSQLError):
            convert_placeholder("SELECT 'abc FROM t WHERE a=?", "$")

    def test_escaped_closing_quote_is_unterminated(self):
        with pytest.raises(MalformedSQLError):
            convert_placeholder("SELECT 'abc\\' FROM t", "$")

    def test_empty_prefix_rejected(self):
        with pytest.raises(UnsupportedDialectError):
            convert_placeholder("a=?", "")


class TestConvertWithDialect:
    @pytest.mark.parametrize(
        "dialect,expected",
        [
            pytest.param(MYSQL, "a=? AND b=?", id="mysql"),
            pytest.param(SQLITE, "a=? AND b=?", id="sqlite"),
            pytest.param(POSTGRES, "a=$1 AND b=$2", id="postgres"),
            pytest.param(MSSQL, "a=@p1 AND b=@p2", id="mssql"),
            pytest.param(ORACLE, "a=:p1 AND b=:p2", id="oracle"),
        ],
    )
    def test_dialect_scheme(self, dialect, expected):
        assert convert_placeholder("a=? AND b=?", dialect) == expected


class TestScanPlaceholders:
    def test_count(self):
        assert count_placeholders(PLACEHOLDER_SQL) == 6

    def test_count_ignores_literals(self):
        assert count_placeholders("a='?' AND b=?") == 1

    def test_scan_without_replace_returns_text(self):
        assert scan_placeholders("a=?") == ("a=?", 1)
