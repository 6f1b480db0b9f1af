"""CEL filter parsing tests."""

import pytest

from pysqlbuilder import (
    And,
    ConditionMalformedError,
    Eq,
    Gt,
    In,
    Like,
    Lt,
    Neq,
    Not,
    parse_filter,
    to_bound_sql,
    to_sql,
)


class TestComparisons:
    def test_eq_and_neq(self):
        result = to_sql(parse_filter('a == 1 && b != "100"'))
        assert result.sql == "a=? AND b<>?"
        assert result.args == [1, "100"]

    def test_structure(self):
        assert parse_filter('a == 1 && b != "100"') == And(Eq(a=1), Neq(b="100"))

    def test_literal_on_left_is_swapped(self):
        assert parse_filter("18 < age") == Gt(age=18)

    def test_negative_number(self):
        assert parse_filter("price < -5") == Lt(price=-5)

    def test_null(self):
        assert to_sql(parse_filter("a == null")).sql == "a IS NULL"

    def test_not_null(self):
        assert to_sql(parse_filter("a != null")).sql == "a IS NOT NULL"

    def test_bool_and_double(self):
        result = to_sql(parse_filter("flag == true && ratio >= 0.5"))
        assert result.sql == "flag=? AND ratio>=?"
        assert result.args == [True, 0.5]

    def test_dotted_field(self):
        assert to_sql(parse_filter("user.age > 21")).sql == "user.age>?"

    def test_string_escapes(self):
        assert parse_filter(r'name == "O\'Brien"') == Eq(name="O'Brien")


class TestLogical:
    def test_and_binds_tighter_than_or(self):
        result = to_sql(parse_filter("a == 1 || b == 2 && c == 3"))
        assert result.sql == "a=? OR (b=? AND c=?)"
        assert result.args == [1, 2, 3]

    def test_parentheses(self):
        result = to_sql(parse_filter("(a == 1 || b == 2) && c == 3"))
        assert result.sql == "(a=? OR b=?) AND c=?"

    def test_not(self):
        assert parse_filter("!(a == 1)") == Not(Eq(a=1))

    def test_not_in(self):
        assert to_sql(parse_filter("!(x in [1, 2])")).sql == "NOT x IN (?,?)"


class TestMembershipAndPatterns:
    def test_in_list(self):
        assert parse_filter('x in [1, 2, 3]') == In("x", 1, 2, 3)

    def test_starts_with(self):
        result = to_sql(parse_filter('age >= 18 && name.startsWith("A")'), dialect="postgres")
        assert result.sql == "age>=$1 AND name LIKE $2 ESCAPE '!'"
        assert result.args == [18, "A%"]

    def test_ends_with(self):
        assert parse_filter('name.endsWith("son")') == Like("name", "%son", "!")

    def test_contains_escapes_wildcards(self):
        assert parse_filter('name.contains("50%")') == Like("name", "%50!%%", "!")

    def test_bound(self):
        assert to_bound_sql(parse_filter('name.startsWith("O\'B")')) == (
            "name LIKE 'O''B%' ESCAPE '!'"
        )


class TestUnsupported:
    @pytest.mark.parametrize(
        "expr",
        [
            pytest.param("a", id="bare-field"),
            pytest.param("a == b", id="field-vs-field"),
            pytest.param("a + 1 == 2", id="arithmetic"),
            pytest.param("size(a) > 1", id="function"),
            pytest.param('name.matches("x")', id="method"),
            pytest.param("x in []", id="empty-in"),
            pytest.param("x in y", id="in-field"),
            pytest.param("a == 1 ? b == 2 : c == 3", id="ternary"),
            pytest.param('name.startsWith(1)', id="non-string-pattern"),
        ],
    )
    def test_rejected(self, expr):
        with pytest.raises(ConditionMalformedError):
            parse_filter(expr)

    def test_syntax_error_wrapped(self):
        with pytest.raises(ConditionMalformedError) as exc_info:
            parse_filter("a ==")
        assert exc_info.value.wrapped is not None
