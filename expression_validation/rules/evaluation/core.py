"""
Expression Evaluator.

Evaluates AST expression trees against an EvaluationContext.

Key Features:
- Identifiers are bound before evaluation, so a reference to a member that
  is not an eligible binding always fails, even inside a branch that
  short-circuiting would skip
- Three-valued logic with pd.NA as NULL
- Result stored in the context's computed boolean column

Usage:
    result = evaluate("(Age % 2) <> 0", bindings)
    # result is True/False, or EvaluationError is raised
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from ...config.config import get_config
from ...types import MemberBinding, ReasonCode, ValueType
from ...utils.logger import get_logger
from ..dsl_nodes import (
    Expr,
    MemberRef,
    Literal,
    UnaryExpr,
    BinaryExpr,
    NullCheck,
    NotExpr,
    AndExpr,
    OrExpr,
    collect_member_refs,
)
from ..dsl_parser import parse_expression
from ..errors import EvaluationError, OperandTypeError
from .context import EvaluationContext
from .operators import (
    NULL,
    arithmetic,
    compare,
    is_null,
    logical_and,
    logical_not,
    logical_or,
    negate,
    null_check,
)

logger = get_logger()


class ExprEvaluator:
    """
    Evaluates expression trees against a single-row context.

    Stateless apart from the source text kept for error messages; create
    one per evaluation.
    """

    def __init__(self, source: str = ""):
        self.source = source

    def bind(self, expr: Expr, context: EvaluationContext) -> None:
        """
        Resolve every member reference against the context.

        Raises:
            UnknownIdentifierError: For any name outside the bindings
        """
        for name in collect_member_refs(expr):
            try:
                context.resolve(name)
            except EvaluationError as e:
                raise e.attach_expression(self.source)

    def evaluate(self, expr: Expr, context: EvaluationContext) -> Any:
        """
        Evaluate an expression node.

        Returns:
            bool, int, float, str, or NULL (pd.NA)
        """
        try:
            return self._eval(expr, context)
        except EvaluationError as e:
            raise e.attach_expression(self.source)

    def _eval(self, expr: Expr, context: EvaluationContext) -> Any:
        if isinstance(expr, Literal):
            return NULL if expr.is_null else expr.value
        elif isinstance(expr, MemberRef):
            return context.get(expr.name)
        elif isinstance(expr, UnaryExpr):
            return negate(expr.op, self._eval(expr.operand, context))
        elif isinstance(expr, BinaryExpr):
            left = self._eval(expr.left, context)
            right = self._eval(expr.right, context)
            if expr.is_comparison:
                return compare(expr.op, left, right, context.case_sensitive)
            return arithmetic(expr.op, left, right)
        elif isinstance(expr, NullCheck):
            return null_check(self._eval(expr.operand, context), expr.negated)
        elif isinstance(expr, NotExpr):
            return logical_not(self._eval(expr.child, context))
        elif isinstance(expr, AndExpr):
            left = self._eval(expr.left, context)
            if left is False:
                return False  # Short-circuit: FALSE AND x = FALSE
            return logical_and(left, self._eval(expr.right, context))
        elif isinstance(expr, OrExpr):
            left = self._eval(expr.left, context)
            if left is True:
                return True  # Short-circuit: TRUE OR x = TRUE
            return logical_or(left, self._eval(expr.right, context))
        else:
            raise EvaluationError(
                f"Unknown expression type: {type(expr).__name__}",
                ReasonCode.INTERNAL_ERROR,
            )


def evaluate(
    expression: str,
    bindings: Iterable[MemberBinding],
    case_sensitive: Optional[bool] = None,
) -> bool:
    """
    Evaluate a normalized expression against member bindings.

    Builds a one-row context from the bindings, parses the expression,
    computes the result into the context's boolean column and reads it
    back. An unknown (NULL) result reads as False.

    Args:
        expression: Normalized expression text
        bindings: Eligible member bindings
        case_sensitive: String comparison mode; None uses configuration

    Returns:
        True if the invariant holds, False otherwise

    Raises:
        EvaluationError: Syntax error, unknown identifier or type mismatch
    """
    if case_sensitive is None:
        case_sensitive = get_config().evaluation.case_sensitive

    expr = parse_expression(expression)
    evaluator = ExprEvaluator(expression)

    try:
        context = EvaluationContext.from_bindings(
            bindings,
            case_sensitive=case_sensitive,
            referenced=collect_member_refs(expr),
        )
    except EvaluationError as e:
        raise e.attach_expression(expression)

    evaluator.bind(expr, context)
    value = evaluator.evaluate(expr, context)

    if not is_null(value) and ValueType.from_value(value) != ValueType.BOOL:
        raise OperandTypeError(
            f"Expression must evaluate to a boolean, got {ValueType.from_value(value).name}",
            expression,
            ReasonCode.NON_BOOLEAN_RESULT,
        )

    context.store_result(value)
    logger.debug("Evaluated %r -> %s with %r", expression, value, context)
    return context.result


__all__ = ["ExprEvaluator", "evaluate"]
