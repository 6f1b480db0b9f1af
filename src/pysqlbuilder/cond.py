"""Condition expression tree.

Nodes are immutable. Combinators never modify their operands; they build
a new parent node. Rendering lives in ``pysqlbuilder._renderer``, which
dispatches on each node's ``kind``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from pysqlbuilder._errors import (
    ERR_MSG_CONDITION_MALFORMED,
    ERR_MSG_NEED_MORE_ARGUMENTS,
    ConditionMalformedError,
    NeedMoreArgumentsError,
)
from pysqlbuilder._placeholder import count_placeholders

GROUP_AND = "and"
GROUP_OR = "or"
GROUP_RAW = "raw"


def _malformed(details: str) -> ConditionMalformedError:
    return ConditionMalformedError(ERR_MSG_CONDITION_MALFORMED, details)


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(value)
    return value


def _is_subquery(value: Any) -> bool:
    from pysqlbuilder.statement import Statement

    return isinstance(value, (Statement, Expr))


class Cond:
    """Base class of all condition nodes."""

    kind: ClassVar[str]

    @property
    def is_empty(self) -> bool:
        """True when the node renders to no text at all."""
        return False

    def group(self) -> str | None:
        """Precedence group used to decide parenthesization inside combinators."""
        return None

    def and_(self, *others: Cond) -> Cond:
        return And(self, *others)

    def or_(self, *others: Cond) -> Cond:
        return Or(self, *others)

    def __and__(self, other: Cond) -> Cond:
        if not isinstance(other, Cond):
            return NotImplemented
        return self.and_(other)

    def __or__(self, other: Cond) -> Cond:
        if not isinstance(other, Cond):
            return NotImplemented
        return self.or_(other)

    def __invert__(self) -> Cond:
        return Not(self)


# ---- Comparisons ----


@dataclass(frozen=True, init=False)
class _Compare(Cond):
    """Column/value pairs compared with one operator, joined with AND."""

    pairs: tuple[tuple[str, Any], ...]

    op: ClassVar[str]

    def __init__(self, columns: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        merged: dict[str, Any] = dict(columns or {})
        merged.update(kwargs)
        for column in merged:
            if not isinstance(column, str) or not column:
                raise _malformed(f"{type(self).__name__} column must be a non-empty string, got {column!r}")
        object.__setattr__(
            self, "pairs", tuple((column, _freeze(value)) for column, value in merged.items())
        )

    @property
    def is_empty(self) -> bool:
        return not self.pairs

    def group(self) -> str | None:
        return GROUP_AND if len(self.pairs) > 1 else None


class Eq(_Compare):
    """``col=?``; a None value renders ``col IS NULL``, a sequence renders IN."""

    kind = "eq"
    op = "="


class Neq(_Compare):
    """``col<>?``; a None value renders ``col IS NOT NULL``, a sequence renders NOT IN."""

    kind = "neq"
    op = "<>"


class Gt(_Compare):
    kind = "gt"
    op = ">"


class Gte(_Compare):
    kind = "gte"
    op = ">="


class Lt(_Compare):
    kind = "lt"
    op = "<"


class Lte(_Compare):
    kind = "lte"
    op = "<="


# ---- Pattern and range predicates ----


@dataclass(frozen=True)
class Like(Cond):
    column: str
    pattern: Any
    escape: str | None = None

    kind: ClassVar[str] = "like"

    def __post_init__(self) -> None:
        if not self.column:
            raise _malformed("LIKE requires a column")
        if self.escape is not None and len(self.escape) != 1:
            raise _malformed(f"LIKE escape must be a single character, got {self.escape!r}")


class NotLike(Like):
    kind = "not_like"


@dataclass(frozen=True, init=False)
class Between(Cond):
    """``col BETWEEN lower AND upper``."""

    column: str
    lower: Any
    upper: Any

    kind: ClassVar[str] = "between"

    def __init__(self, column: str, *bounds: Any) -> None:
        if len(bounds) != 2:
            raise _malformed(f"BETWEEN requires exactly 2 bounds, got {len(bounds)}")
        if any(b is None for b in bounds):
            raise _malformed("BETWEEN bounds cannot be NULL")
        object.__setattr__(self, "column", column)
        object.__setattr__(self, "lower", bounds[0])
        object.__setattr__(self, "upper", bounds[1])


@dataclass(frozen=True, init=False)
class In(Cond):
    """``col IN (?,?,...)`` or ``col IN (subquery)``.

    A single list/tuple/set argument is expanded into the value list.
    """

    column: str
    values: tuple[Any, ...]

    kind: ClassVar[str] = "in"

    def __init__(self, column: str, *values: Any) -> None:
        if len(values) == 1 and isinstance(values[0], (list, tuple, set, frozenset)):
            values = tuple(values[0])
        name = type(self).__name__
        if not values:
            raise _malformed(f"{name} on {column!r} requires at least one value")
        if len(values) > 1 and any(_is_subquery(v) for v in values):
            raise _malformed(f"{name} sub-statement must be the only operand")
        object.__setattr__(self, "column", column)
        object.__setattr__(self, "values", tuple(values))

    @property
    def subquery(self) -> Any:
        """The sub-statement or raw expression operand, if any."""
        if len(self.values) == 1 and _is_subquery(self.values[0]):
            return self.values[0]
        return None


class NotIn(In):
    kind = "not_in"


@dataclass(frozen=True, init=False)
class IsNull(Cond):
    columns: tuple[str, ...]

    kind: ClassVar[str] = "is_null"

    def __init__(self, *columns: str) -> None:
        if not columns:
            raise _malformed(f"{type(self).__name__} requires at least one column")
        object.__setattr__(self, "columns", tuple(columns))

    def group(self) -> str | None:
        return GROUP_AND if len(self.columns) > 1 else None


class IsNotNull(IsNull):
    kind = "is_not_null"


# ---- Combinators ----


@dataclass(frozen=True, init=False)
class _Combinator(Cond):
    conds: tuple[Cond, ...]
    # derived from the operands at construction
    _effective: tuple[Cond, ...] = field(repr=False, compare=False)
    _group: str | None = field(repr=False, compare=False)

    joiner: ClassVar[str]
    own_group: ClassVar[str]

    def __init__(self, *conds: Cond) -> None:
        for c in conds:
            if not isinstance(c, Cond):
                raise _malformed(
                    f"{type(self).__name__} operands must be conditions, got {type(c).__name__}"
                )
        effective = tuple(c for c in conds if not c.is_empty)
        if len(effective) == 1:
            group = effective[0].group()
        elif effective:
            group = self.own_group
        else:
            group = None
        object.__setattr__(self, "conds", tuple(conds))
        object.__setattr__(self, "_effective", effective)
        object.__setattr__(self, "_group", group)

    def effective(self) -> tuple[Cond, ...]:
        """Children that render to non-empty text."""
        return self._effective

    @property
    def is_empty(self) -> bool:
        return not self._effective

    def group(self) -> str | None:
        return self._group


class And(_Combinator):
    kind = "and"
    joiner = " AND "
    own_group = GROUP_AND

    def and_(self, *others: Cond) -> Cond:
        return And(*self.conds, *others)


class Or(_Combinator):
    kind = "or"
    joiner = " OR "
    own_group = GROUP_OR

    def or_(self, *others: Cond) -> Cond:
        return Or(*self.conds, *others)


@dataclass(frozen=True)
class Not(Cond):
    cond: Cond
    _empty: bool = field(init=False, repr=False, compare=False)

    kind: ClassVar[str] = "not"

    def __post_init__(self) -> None:
        if not isinstance(self.cond, Cond):
            raise _malformed(f"Not operand must be a condition, got {type(self.cond).__name__}")
        object.__setattr__(self, "_empty", self.cond.is_empty)

    @property
    def is_empty(self) -> bool:
        return self._empty


# ---- Raw SQL ----


@dataclass(frozen=True, init=False)
class Expr(Cond):
    """Raw SQL fragment with its own ``?`` markers and arguments.

    The marker count must equal the number of arguments.
    """

    sql: str
    args: tuple[Any, ...]

    kind: ClassVar[str] = "expr"

    def __init__(self, sql: str, *args: Any) -> None:
        if not isinstance(sql, str):
            raise _malformed(f"Expr requires SQL text, got {type(sql).__name__}")
        count = count_placeholders(sql)
        if count != len(args):
            raise NeedMoreArgumentsError(
                ERR_MSG_NEED_MORE_ARGUMENTS,
                f"expression has {count} placeholders but {len(args)} arguments",
            )
        object.__setattr__(self, "sql", sql)
        object.__setattr__(self, "args", args)

    @property
    def is_empty(self) -> bool:
        return not self.sql

    def group(self) -> str | None:
        return GROUP_RAW


CONDITION_KINDS: frozenset[str] = frozenset({
    Eq.kind, Neq.kind, Gt.kind, Gte.kind, Lt.kind, Lte.kind,
    Like.kind, NotLike.kind, Between.kind, In.kind, NotIn.kind,
    IsNull.kind, IsNotNull.kind, And.kind, Or.kind, Not.kind, Expr.kind,
})
