"""Restricted boolean expressions for widget ``showWhen``/``hideWhen``.

Expressions are parsed with :mod:`ast` and only a small whitelist of node
types is evaluated: comparisons, ``and``/``or``/``not``, names, attribute
access on mappings, literals and list/tuple literals. There is no call,
subscript or arithmetic support. The builder UI writes JavaScript-ish
spellings (``===``, ``&&``, ``!``, ``true``), which are normalized first.

Names resolve from the render scope (``store``, ``page``, ``params``);
unknown names and missing attributes evaluate to ``None``.
"""

import ast
import logging
import operator
import re
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from storefront.core.exceptions import ExpressionError
from storefront.schemas.page import WidgetConditions

logger = logging.getLogger(__name__)

_STRING_LITERAL = re.compile(r"""('(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")""")

_JS_SPELLINGS = (
    (re.compile(r"==="), "=="),
    (re.compile(r"!=="), "!="),
    (re.compile(r"&&"), " and "),
    (re.compile(r"\|\|"), " or "),
    (re.compile(r"!(?!=)"), " not "),
    (re.compile(r"\btrue\b"), "True"),
    (re.compile(r"\bfalse\b"), "False"),
    (re.compile(r"\b(?:null|undefined)\b"), "None"),
)

_COMPARATORS = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
    ast.In: lambda a, b: a in b,
    ast.NotIn: lambda a, b: a not in b,
}


def normalize_expression(source: str) -> str:
    """Rewrite JavaScript operator spellings outside of string literals."""
    parts = _STRING_LITERAL.split(source)
    for i in range(0, len(parts), 2):
        chunk = parts[i]
        for pattern, replacement in _JS_SPELLINGS:
            chunk = pattern.sub(replacement, chunk)
        parts[i] = chunk
    return "".join(parts).strip()


class Condition:
    def __init__(self, source: str, tree: ast.Expression):
        self.source = source
        self._tree = tree

    def evaluate(self, scope: Mapping[str, Any]) -> bool:
        try:
            return bool(_eval(self._tree.body, scope))
        except ExpressionError:
            raise
        except (TypeError, ValueError, RecursionError) as exc:
            raise ExpressionError(f"Cannot evaluate '{self.source}': {exc}") from exc

    def __repr__(self) -> str:
        return f"Condition({self.source!r})"


@lru_cache(maxsize=512)
def parse_condition(source: str) -> Condition:
    normalized = normalize_expression(source)
    if not normalized:
        raise ExpressionError("Empty condition expression")
    try:
        tree = ast.parse(normalized, mode="eval")
    except SyntaxError as exc:
        raise ExpressionError(f"Invalid condition '{source}': {exc.msg}") from exc
    except (RecursionError, MemoryError) as exc:
        raise ExpressionError(f"Condition '{source}' is nested too deeply") from exc
    _check_nodes(tree, source)
    return Condition(source, tree)


_ALLOWED_NODES = (
    ast.Expression,
    ast.BoolOp,
    ast.And,
    ast.Or,
    ast.UnaryOp,
    ast.Not,
    ast.USub,
    ast.Compare,
    ast.Name,
    ast.Attribute,
    ast.Constant,
    ast.List,
    ast.Tuple,
    ast.Load,
    *_COMPARATORS,
)


MAX_CONDITION_DEPTH = 32


def _check_nodes(tree: ast.AST, source: str) -> None:
    # Evaluation recurses once per level; keep it far below the interpreter limit.
    stack = [(tree, 1)]
    while stack:
        node, depth = stack.pop()
        if depth > MAX_CONDITION_DEPTH:
            raise ExpressionError(f"Condition '{source}' is nested too deeply")
        stack.extend((child, depth + 1) for child in ast.iter_child_nodes(node))
        if not isinstance(node, _ALLOWED_NODES):
            raise ExpressionError(f"Unsupported syntax in condition '{source}': {type(node).__name__}")
        if isinstance(node, ast.Attribute) and node.attr.startswith("_"):
            raise ExpressionError(f"Private attribute access in condition '{source}'")


def _eval(node: ast.AST, scope: Mapping[str, Any]) -> Any:
    if isinstance(node, ast.Constant):
        return node.value
    if isinstance(node, ast.Name):
        return scope.get(node.id)
    if isinstance(node, ast.Attribute):
        base = _eval(node.value, scope)
        return base.get(node.attr) if isinstance(base, Mapping) else None
    if isinstance(node, (ast.List, ast.Tuple)):
        return [_eval(e, scope) for e in node.elts]
    if isinstance(node, ast.UnaryOp):
        value = _eval(node.operand, scope)
        return (not value) if isinstance(node.op, ast.Not) else -value
    if isinstance(node, ast.BoolOp):
        if isinstance(node.op, ast.And):
            return all(_eval(v, scope) for v in node.values)
        return any(_eval(v, scope) for v in node.values)
    if isinstance(node, ast.Compare):
        left = _eval(node.left, scope)
        for op, comparator in zip(node.ops, node.comparators, strict=True):
            right = _eval(comparator, scope)
            if not _COMPARATORS[type(op)](left, right):
                return False
            left = right
        return True
    raise ExpressionError(f"Unsupported node {type(node).__name__}")


def evaluate_widget_conditions(conditions: WidgetConditions | None, scope: Mapping[str, Any]) -> bool:
    """Visible iff showWhen is absent or true, and hideWhen is absent or false.

    A condition that fails to parse or evaluate is logged and ignored, so a
    broken expression never hides a widget.
    """
    if conditions is None:
        return True
    if conditions.show_when and not _safe_evaluate(conditions.show_when, scope, default=True):
        return False
    if conditions.hide_when and _safe_evaluate(conditions.hide_when, scope, default=False):
        return False
    return True


def _safe_evaluate(source: str, scope: Mapping[str, Any], *, default: bool) -> bool:
    try:
        return parse_condition(source).evaluate(scope)
    except ExpressionError as exc:
        logger.warning("Ignoring widget condition: %s", exc.detail)
        return default
