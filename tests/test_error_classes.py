"""Error class hierarchy tests."""

import pytest

from pysqlbuilder._errors import (
    BuilderError,
    ConditionMalformedError,
    InconsistentDialectError,
    MalformedSQLError,
    MaxDepthExceededError,
    NeedMoreArgumentsError,
    NoColumnToInsertError,
    NoColumnToUpdateError,
    NoTableNameError,
    NotSupportTypeError,
    UnsupportedDialectError,
)


class TestBuilderErrorBase:
    def test_str_returns_user_message(self):
        err = BuilderError("user msg", "internal detail")
        assert str(err) == "user msg"

    def test_internal_returns_details(self):
        err = BuilderError("user msg", "internal detail")
        assert err.internal() == "internal detail"

    def test_internal_defaults_to_user_message(self):
        err = BuilderError("same message")
        assert err.internal() == "same message"

    def test_wrapped_exception(self):
        cause = ValueError("root cause")
        err = BuilderError("user msg", wrapped=cause)
        assert err.wrapped is cause


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [
            ConditionMalformedError,
            MalformedSQLError,
            NeedMoreArgumentsError,
            NotSupportTypeError,
            UnsupportedDialectError,
        ],
    )
    def test_subclass_of_builder_error(self, cls):
        assert issubclass(cls, BuilderError)

    @pytest.mark.parametrize(
        "cls",
        [
            MaxDepthExceededError,
            NoTableNameError,
            NoColumnToInsertError,
            NoColumnToUpdateError,
            InconsistentDialectError,
        ],
    )
    def test_shape_errors_are_malformed_conditions(self, cls):
        assert issubclass(cls, ConditionMalformedError)
