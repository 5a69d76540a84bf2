"""
Operator implementations for expression evaluation.

Type contracts:
- Comparisons (= <> < > <= >=): numeric with numeric, string with string,
  bool with bool. A string facing a number is converted to a number;
  a string facing a bool must read "true"/"false".
- Arithmetic (+ - * / %): numeric only, except string + string (concatenation).
- Logical (AND OR NOT): bool or NULL only.

NULL handling (three-valued logic):
- Any NULL operand of a comparison or arithmetic operator yields NULL.
- AND/OR follow Kleene logic (pandas.NA semantics).

Values are plain Python scalars or pd.NA.
"""

from __future__ import annotations

import math
import operator
from typing import Any, Callable

import pandas as pd

from ...types import ReasonCode, ValueType
from ..errors import OperandTypeError

NULL = pd.NA

_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "=": operator.eq,
    "<>": operator.ne,
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
}


def is_null(value: Any) -> bool:
    """Check if a value is NULL (None, NaN or pd.NA)."""
    return ValueType.from_value(value) == ValueType.MISSING


def _to_number(text: str, op: str) -> int | float:
    stripped = text.strip()
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        return float(stripped)
    except ValueError:
        raise OperandTypeError(
            f"Operator '{op}' cannot convert string {text!r} to a number"
        ) from None


def _to_bool(text: str, op: str) -> bool:
    lowered = text.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    raise OperandTypeError(f"Operator '{op}' cannot convert string {text!r} to a boolean")


def coerce_pair(left: Any, right: Any, op: str) -> tuple[Any, Any]:
    """
    Bring two non-NULL operands to a common type for comparison.

    Returns:
        (left, right) converted so Python comparison is meaningful

    Raises:
        OperandTypeError: If the operand types cannot be reconciled
    """
    lt = ValueType.from_value(left)
    rt = ValueType.from_value(right)

    if lt == rt or (lt.is_numeric and rt.is_numeric):
        return left, right

    if lt == ValueType.STRING and rt.is_numeric:
        return _to_number(left, op), right
    if rt == ValueType.STRING and lt.is_numeric:
        return left, _to_number(right, op)

    if lt == ValueType.STRING and rt == ValueType.BOOL:
        return _to_bool(left, op), right
    if rt == ValueType.STRING and lt == ValueType.BOOL:
        return left, _to_bool(right, op)

    raise OperandTypeError(
        f"Operator '{op}' cannot compare {lt.name} with {rt.name}"
    )


def compare(op: str, left: Any, right: Any, case_sensitive: bool = False) -> Any:
    """
    Evaluate a comparison. Returns True, False or NULL.

    Strings compare case-insensitively unless case_sensitive is set.
    """
    fn = _COMPARATORS.get(op)
    if fn is None:
        raise OperandTypeError(f"Unknown comparison operator '{op}'", reason=ReasonCode.INTERNAL_ERROR)

    if is_null(left) or is_null(right):
        return NULL

    left, right = coerce_pair(left, right, op)
    if isinstance(left, str) and isinstance(right, str) and not case_sensitive:
        left, right = left.casefold(), right.casefold()
    return bool(fn(left, right))


def _require_numeric(value: Any, op: str, side: str) -> Any:
    vt = ValueType.from_value(value)
    if vt.is_numeric:
        return value
    if vt == ValueType.STRING:
        return _to_number(value, op)
    raise OperandTypeError(f"Operator '{op}' requires numeric {side}, got {vt.name}")


def _remainder(left: int | float, right: int | float) -> int | float:
    """Truncated remainder: the result takes the sign of the dividend."""
    if isinstance(left, int) and isinstance(right, int):
        r = abs(left) % abs(right)
        return -r if left < 0 else r
    return math.fmod(left, right)


def arithmetic(op: str, left: Any, right: Any) -> Any:
    """
    Evaluate + - * / %. Returns a number, a string (concatenation) or NULL.

    Division always yields a float. Division or remainder by zero raises.
    """
    if is_null(left) or is_null(right):
        return NULL

    if op == "+" and isinstance(left, str) and isinstance(right, str):
        return left + right

    left = _require_numeric(left, op, "LHS")
    right = _require_numeric(right, op, "RHS")

    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if op in ("/", "%"):
        if right == 0:
            raise OperandTypeError(
                f"Operator '{op}' divides by zero", reason=ReasonCode.DIVISION_BY_ZERO
            )
        if op == "/":
            return left / right
        return _remainder(left, right)

    raise OperandTypeError(f"Unknown arithmetic operator '{op}'", reason=ReasonCode.INTERNAL_ERROR)


def negate(op: str, value: Any) -> Any:
    """Evaluate unary - / +."""
    if is_null(value):
        return NULL
    value = _require_numeric(value, op, "operand")
    return -value if op == "-" else value


def _require_logical(value: Any, op: str) -> Any:
    if is_null(value):
        return NULL
    if ValueType.from_value(value) == ValueType.BOOL:
        return bool(value)
    raise OperandTypeError(
        f"Operator '{op}' requires a boolean operand, got {ValueType.from_value(value).name}"
    )


def logical_not(value: Any) -> Any:
    """NOT TRUE = FALSE, NOT FALSE = TRUE, NOT NULL = NULL."""
    value = _require_logical(value, "NOT")
    if value is NULL:
        return NULL
    return not value


def logical_and(left: Any, right: Any) -> Any:
    """Kleene AND: FALSE dominates NULL."""
    return _require_logical(left, "AND") & _require_logical(right, "AND")


def logical_or(left: Any, right: Any) -> Any:
    """Kleene OR: TRUE dominates NULL."""
    return _require_logical(left, "OR") | _require_logical(right, "OR")


def null_check(value: Any, negated: bool) -> bool:
    """IS NULL / IS NOT NULL. Never NULL."""
    return is_null(value) != negated


__all__ = [
    "NULL",
    "is_null",
    "coerce_pair",
    "compare",
    "arithmetic",
    "negate",
    "logical_not",
    "logical_and",
    "logical_or",
    "null_check",
]
