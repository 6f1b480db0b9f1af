"""Bound-SQL formatting tests."""

import datetime
from decimal import Decimal

import pytest

from pysqlbuilder import (
    Eq,
    Expr,
    In,
    Like,
    MalformedSQLError,
    Named,
    NeedMoreArgumentsError,
    NotSupportTypeError,
    convert_to_bound_sql,
    format_literal,
    mssql,
    mysql,
    select,
    to_bound_sql,
    to_sql,
)

PLACEHOLDER_SQL = (
    "SELECT a, b FROM table_a WHERE b_id=(SELECT id FROM table_b WHERE b=?) "
    "AND id=? AND c=? AND d=? AND e=? AND f=?"
)
BOUND_SQL = (
    "SELECT a, b FROM table_a WHERE b_id=(SELECT id FROM table_b WHERE b=1) "
    "AND id=2.1 AND c='3' AND d=4 AND e='5' AND f=true"
)


class TestFormatLiteral:
    @pytest.mark.parametrize(
        "value,expected",
        [
            pytest.param(1, "1", id="int"),
            pytest.param(-7, "-7", id="negative"),
            pytest.param(2.1, "2.1", id="float"),
            pytest.param(Decimal("10.50"), "10.50", id="decimal"),
            pytest.param(True, "true", id="true"),
            pytest.param(False, "false", id="false"),
            pytest.param(None, "null", id="null"),
            pytest.param("abc", "'abc'", id="string"),
            pytest.param("O'Brien", "'O''Brien'", id="quote"),
            pytest.param(b"bytes", "'bytes'", id="bytes"),
            pytest.param(b"\xffab", "'\\xffab'", id="non-utf8-bytes"),
            pytest.param(Named("any", "3"), "'3'", id="named"),
            pytest.param(datetime.date(2024, 1, 31), "'2024-01-31'", id="date"),
            pytest.param(
                datetime.datetime(2024, 1, 31, 12, 30, 5),
                "'2024-01-31 12:30:05'",
                id="datetime",
            ),
            pytest.param(float("nan"), "'nan'", id="nan"),
        ],
    )
    def test_format(self, value, expected):
        assert format_literal(value) == expected


class TestConvertToBoundSQL:
    def test_mixed_arguments(self):
        args = [1, 2.1, "3", 4, "5", True]
        assert convert_to_bound_sql(PLACEHOLDER_SQL, args) == BOUND_SQL

    def test_named_argument_uses_value(self):
        args = [1, 2.1, Named("any", "3"), 4, "5", True]
        assert convert_to_bound_sql(PLACEHOLDER_SQL, args) == BOUND_SQL

    def test_fewer_arguments(self):
        with pytest.raises(NeedMoreArgumentsError):
            convert_to_bound_sql(PLACEHOLDER_SQL, [1, 2.1, "3", 4, "5"])

    def test_more_arguments(self):
        with pytest.raises(NeedMoreArgumentsError):
            convert_to_bound_sql("a=?", [1, 2])

    def test_marker_in_bound_value_not_rescanned(self):
        assert convert_to_bound_sql("a=? AND b=?", ["?", 2]) == "a='?' AND b=2"

    def test_literal_marker_untouched(self):
        assert convert_to_bound_sql("a='?' AND b=?", [2]) == "a='?' AND b=2"

    def test_unterminated_literal(self):
        with pytest.raises(MalformedSQLError):
            convert_to_bound_sql("a='x AND b=?", [1])


class TestToBoundSQL:
    def test_raw_text_with_args(self):
        assert to_bound_sql("a=? AND b=?", 1, "x") == "a=1 AND b='x'"

    def test_statement(self):
        stmt = select("id").from_("table").where(In("a", 1, 2))
        assert to_bound_sql(stmt) == "SELECT id FROM table WHERE a IN (1,2)"

    def test_condition(self):
        assert to_bound_sql(Eq(a=1)) == "a=1"

    def test_unsupported_type(self):
        with pytest.raises(NotSupportTypeError):
            to_bound_sql(1)

    def test_args_with_condition_rejected(self):
        with pytest.raises(NotSupportTypeError):
            to_bound_sql(Eq(a=1), 2)

    def test_injection_is_quoted(self):
        stmt = mysql().select("*").from_("table1").where(Eq(name="cat';truncate table table1;"))
        assert stmt.to_bound_sql() == (
            "SELECT * FROM table1 WHERE name='cat'';truncate table table1;'"
        )

    def test_update_with_null(self):
        stmt = mysql().update(Eq({"a": 1, "b": None})).from_("table1")
        assert stmt.to_bound_sql() == "UPDATE table1 SET a=1,b=null"

    def test_bound_matches_formatted_args(self):
        stmt = select("id").from_("t").where(Eq(a="x").and_(In("b", 1, 2.5)))
        result = to_sql(stmt)
        expected = result.sql
        for arg in result.args:
            expected = expected.replace("?", format_literal(arg), 1)
        assert to_bound_sql(stmt) == expected

    def test_postgres_statement_bound(self):
        from pysqlbuilder import postgres

        stmt = postgres().select().from_("t").where(Eq(a=1)).limit(5, 10)
        assert stmt.to_bound_sql() == "SELECT * FROM t WHERE a=1 LIMIT 5 OFFSET 10"

    def test_oracle_named_argument_bound(self):
        from pysqlbuilder import oracle

        stmt = oracle().select().from_("t").where(Eq(a=Named("a", "1")))
        assert stmt.to_bound_sql() == "SELECT * FROM t WHERE a='1'"

    def test_like_with_backslash_escape(self):
        cond = Like("name", "100\\%", escape="\\")
        assert to_sql(cond).sql == "name LIKE ? ESCAPE '\\'"
        assert to_bound_sql(cond) == "name LIKE '100\\%' ESCAPE '\\'"

    def test_backslash_escape_in_statement(self):
        stmt = select("id").from_("t").where(Like("path", "C:\\\\%", escape="\\")).and_(Eq(a=1))
        assert stmt.to_bound_sql() == (
            "SELECT id FROM t WHERE path LIKE 'C:\\\\%' ESCAPE '\\' AND a=1"
        )

    def test_question_mark_in_argument(self):
        assert to_bound_sql(Eq(a="what?").and_(Eq(b=2))) == "a='what?' AND b=2"

    def test_expression_arguments_bound(self):
        stmt = select().from_("t").where(Expr("a BETWEEN ? AND ?", 1, 5))
        assert stmt.to_bound_sql() == "SELECT * FROM t WHERE a BETWEEN 1 AND 5"

    def test_mssql_clause_rules_kept(self):
        stmt = mssql().select().from_("t").where(Eq(a=Named("x", 1))).order_by("id").limit(2)
        assert stmt.to_bound_sql() == (
            "SELECT * FROM t WHERE a=1 ORDER BY id OFFSET 0 ROWS FETCH NEXT 2 ROWS ONLY"
        )
