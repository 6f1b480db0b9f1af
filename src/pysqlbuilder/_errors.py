"""Exception hierarchy for SQL fragment building and rendering."""


class BuilderError(Exception):
    """Base exception for SQL building errors.

    Provides dual messaging: a sanitized user-facing message and
    internal details for logging (CWE-209 prevention).
    """

    def __init__(
        self,
        user_message: str,
        internal_details: str = "",
        wrapped: Exception | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details or user_message
        self.wrapped = wrapped

    def internal(self) -> str:
        return self.internal_details


class ConditionMalformedError(BuilderError):
    """Raised when a condition or statement has an invalid arity or shape."""


class MaxDepthExceededError(ConditionMalformedError):
    """Raised when condition nesting exceeds the recursion limit."""


class NoTableNameError(ConditionMalformedError):
    """Raised when a statement has no table to operate on."""


class NoColumnToInsertError(ConditionMalformedError):
    """Raised when an INSERT has no columns."""


class NoColumnToUpdateError(ConditionMalformedError):
    """Raised when an UPDATE has no assignments."""


class InconsistentDialectError(ConditionMalformedError):
    """Raised when statements bound to different dialects are combined."""


class MalformedSQLError(BuilderError):
    """Raised when SQL text ends inside a quoted literal."""


class NeedMoreArgumentsError(BuilderError):
    """Raised when placeholder and argument counts differ."""


class NotSupportTypeError(BuilderError):
    """Raised when a value is neither SQL text nor a condition/statement."""


class UnsupportedDialectError(BuilderError):
    """Raised when an unknown dialect is requested."""


# Sanitized user-facing error message constants
ERR_MSG_CONDITION_MALFORMED = "malformed condition"
ERR_MSG_STATEMENT_MALFORMED = "malformed statement"
ERR_MSG_MALFORMED_SQL = "unterminated quoted literal in SQL"
ERR_MSG_NEED_MORE_ARGUMENTS = "need more sql arguments"
ERR_MSG_NOT_SUPPORT_TYPE = "not supported SQL type"
ERR_MSG_UNSUPPORTED_DIALECT = "not supported dialect type"
ERR_MSG_UNSUPPORTED_FILTER = "unsupported filter expression"
