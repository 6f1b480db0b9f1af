"""CEL filter parsing: a Lark Interpreter that builds condition trees."""

from __future__ import annotations

import logging
from typing import Any

from celpy.celparser import CELParseError, CELParser
from lark import Token, Tree
from lark.visitors import Interpreter

from pysqlbuilder._constants import LIKE_ESCAPE_CHAR
from pysqlbuilder._errors import ERR_MSG_UNSUPPORTED_FILTER, ConditionMalformedError
from pysqlbuilder._utils import escape_like_pattern
from pysqlbuilder.cond import Cond, Eq, Gt, Gte, In, Like, Lt, Lte, Neq, Not

logger = logging.getLogger(__name__)

_parser = CELParser()

_RAW_PREFIXES = ("r'", 'r"', "R'", 'R"')

# Wrapper rules that stop unwrapping even with a single child
_LEAF_RULES = {"ident", "literal", "list_lit", "paren_expr"}

# Relation rule name -> (condition, condition with operands swapped)
_RELATIONS: dict[str, tuple[type[Cond], type[Cond]]] = {
    "relation_eq": (Eq, Eq),
    "relation_ne": (Neq, Neq),
    "relation_lt": (Lt, Gt),
    "relation_le": (Lte, Gte),
    "relation_gt": (Gt, Lt),
    "relation_ge": (Gte, Lte),
}

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    "'": "'",
    '"': '"',
    "0": "\0",
}


def _unsupported(details: str) -> ConditionMalformedError:
    return ConditionMalformedError(ERR_MSG_UNSUPPORTED_FILTER, details)


def _unwrap(node: Tree | Token) -> Tree | Token:
    """Walk through single-child precedence wrappers."""
    while (
        isinstance(node, Tree)
        and node.data not in _LEAF_RULES
        and len(node.children) == 1
    ):
        node = node.children[0]
    return node


def _strip_quotes(s: str) -> str:
    """Strip surrounding quotes from a CEL string literal token."""
    if s.startswith(_RAW_PREFIXES):
        s = s[1:]
    if s.startswith('"""') or s.startswith("'''"):
        return s[3:-3]
    return s[1:-1]


def _process_escapes(s: str) -> str:
    """Process CEL string escape sequences."""
    result = []
    i = 0
    while i < len(s):
        if s[i] == "\\" and i + 1 < len(s):
            nxt = s[i + 1]
            if nxt in _ESCAPES:
                result.append(_ESCAPES[nxt])
                i += 2
                continue
            width = {"x": 2, "u": 4}.get(nxt)
            if width and i + 2 + width <= len(s):
                try:
                    result.append(chr(int(s[i + 2 : i + 2 + width], 16)))
                    i += 2 + width
                    continue
                except ValueError:
                    pass
            result.append(s[i])
            result.append(nxt)
            i += 2
        else:
            result.append(s[i])
            i += 1
    return "".join(result)


def _string_value(token: Token) -> str:
    raw = _strip_quotes(str(token))
    if not str(token).startswith(_RAW_PREFIXES):
        raw = _process_escapes(raw)
    return raw


def _literal_value(token: Token) -> Any:
    text = str(token)
    if token.type == "NULL_LIT":
        return None
    if token.type == "BOOL_LIT":
        return text.lower() == "true"
    if token.type == "INT_LIT":
        return int(text, 0)
    if token.type == "UINT_LIT":
        return int(text.rstrip("uU"), 0)
    if token.type == "FLOAT_LIT":
        return float(text)
    if token.type in ("STRING_LIT", "MLSTRING_LIT"):
        return _string_value(token)
    if token.type == "BYTES_LIT":
        return _string_value(Token("STRING_LIT", text[1:])).encode("utf-8")
    raise _unsupported(f"unknown literal token type: {token.type}")


class FilterBuilder(Interpreter):
    """Converts a CEL Lark parse tree into a condition tree.

    Every visit method returns a Cond.
    """

    def __default__(self, tree: Tree) -> Any:
        raise _unsupported(f"unsupported filter syntax: {tree.data}")

    def _single(self, tree: Tree, what: str) -> Cond:
        if len(tree.children) != 1:
            raise _unsupported(f"{what} is not supported in filters")
        return self.visit(tree.children[0])

    # ---- Precedence wrappers ----

    def expr(self, tree: Tree) -> Cond:
        return self._single(tree, "ternary expression")

    def addition(self, tree: Tree) -> Cond:
        return self._single(tree, "arithmetic")

    def multiplication(self, tree: Tree) -> Cond:
        return self._single(tree, "arithmetic")

    def member(self, tree: Tree) -> Cond:
        return self._single(tree, "member expression")

    def primary(self, tree: Tree) -> Cond:
        return self._single(tree, "primary expression")

    def paren_expr(self, tree: Tree) -> Cond:
        return self.visit(tree.children[0])

    # ---- Logical operators ----

    def conditionalor(self, tree: Tree) -> Cond:
        children = tree.children
        if len(children) == 1:
            return self.visit(children[0])
        return self.visit(children[0]).or_(self.visit(children[1]))

    def conditionaland(self, tree: Tree) -> Cond:
        children = tree.children
        if len(children) == 1:
            return self.visit(children[0])
        return self.visit(children[0]).and_(self.visit(children[1]))

    def unary(self, tree: Tree) -> Cond:
        children = tree.children
        if len(children) == 1:
            return self.visit(children[0])
        op_node, operand = children
        if isinstance(op_node, Tree) and op_node.data == "unary_not":
            return Not(self.visit(operand))
        raise _unsupported("only logical negation is supported as a unary operator")

    # ---- Relations ----

    def relation(self, tree: Tree) -> Cond:
        children = tree.children
        if len(children) == 1:
            return self.visit(children[0])

        # children[0] is the operator prefix node holding the left operand
        op_node, rhs = children
        op_name = op_node.data
        lhs = op_node.children[0]

        if op_name == "relation_in":
            return In(self._column(lhs), *self._list_values(rhs))

        conds = _RELATIONS.get(op_name)
        if conds is None:
            raise _unsupported(f"unknown relation operator: {op_name}")

        lhs_column = self._column_or_none(lhs)
        if lhs_column is not None:
            return conds[0]({lhs_column: self._value(rhs)})
        rhs_column = self._column_or_none(rhs)
        if rhs_column is not None:
            return conds[1]({rhs_column: self._value(lhs)})
        raise _unsupported("a comparison needs a field on one side")

    # ---- Method calls ----

    def member_dot_arg(self, tree: Tree) -> Cond:
        """String method call: name.startsWith("A")."""
        obj = tree.children[0]
        method_name = str(tree.children[1])
        args = tree.children[2].children if len(tree.children) > 2 else []

        templates = {"startsWith": "{}%", "endsWith": "%{}", "contains": "%{}%"}
        template = templates.get(method_name)
        if template is None:
            raise _unsupported(f"unknown method: {method_name}")
        if len(args) != 1:
            raise _unsupported(f"{method_name}() requires exactly 1 argument")
        needle = self._value(args[0])
        if not isinstance(needle, str):
            raise _unsupported(f"{method_name}() requires a string literal argument")
        pattern = template.format(escape_like_pattern(needle))
        return Like(self._column(obj), pattern, LIKE_ESCAPE_CHAR)

    # ---- Operands ----

    def _column_or_none(self, node: Tree | Token) -> str | None:
        node = _unwrap(node)
        if not isinstance(node, Tree):
            return None
        if node.data == "ident":
            return str(node.children[0])
        if node.data == "member_dot":
            parent = self._column_or_none(node.children[0])
            if parent is None:
                return None
            return f"{parent}.{node.children[1]}"
        return None

    def _column(self, node: Tree | Token) -> str:
        column = self._column_or_none(node)
        if column is None:
            raise _unsupported("expected a field name")
        return column

    def _value(self, node: Tree | Token) -> Any:
        node = _unwrap(node)
        if isinstance(node, Tree) and node.data == "unary" and len(node.children) == 2:
            op_node, operand = node.children
            value = self._value(operand)
            if (
                isinstance(op_node, Tree)
                and op_node.data == "unary_neg"
                and isinstance(value, (int, float))
                and not isinstance(value, bool)
            ):
                return -value
            raise _unsupported("only negative numbers are supported as unary values")
        if isinstance(node, Tree) and node.data == "literal" and node.children:
            token = node.children[0]
            if isinstance(token, Token):
                return _literal_value(token)
        raise _unsupported("expected a literal value")

    def _list_values(self, node: Tree | Token) -> list[Any]:
        node = _unwrap(node)
        if not isinstance(node, Tree) or node.data != "list_lit":
            raise _unsupported("'in' requires a list literal")
        if not node.children:
            return []
        exprlist = node.children[0]
        return [self._value(child) for child in exprlist.children]


def parse_filter(cel_expr: str) -> Cond:
    """Parse a CEL filter expression into a condition tree.

    Args:
        cel_expr: e.g. ``age >= 18 && name.startsWith("A")``.

    Returns:
        The condition tree.

    Raises:
        ConditionMalformedError: If the expression is invalid or uses
            syntax without a condition equivalent.
    """
    try:
        tree = _parser.parse(cel_expr)
    except CELParseError as e:
        raise ConditionMalformedError(
            "invalid filter expression", f"cannot parse {cel_expr!r}: {e}", wrapped=e
        ) from e
    cond = FilterBuilder().visit(tree)
    logger.debug("parsed filter %r into %s", cel_expr, type(cond).__name__)
    return cond
