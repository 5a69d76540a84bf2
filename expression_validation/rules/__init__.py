"""
Expression rules: normalization, parsing and evaluation.

Design principles:
- Normalize authored syntax (!=, ==, !, &&, ||, null) to the canonical
  predicate grammar before parsing
- Parse with a dedicated recursive-descent parser, never eval()
- Evaluate over a one-row typed relation with three-valued NULL logic
- Every failure is an EvaluationError with a ReasonCode
"""

from .constants import (
    IS_NOT_NULL,
    IS_NULL,
    IS_POSITIVE,
    IS_NEGATIVE,
    IS_ZERO,
    IS_POSITIVE_OR_ZERO,
    IS_NEGATIVE_OR_ZERO,
    IS_ODD,
    IS_EVEN,
    Templates,
)
from .errors import (
    EvaluationError,
    ExpressionSyntaxError,
    UnknownIdentifierError,
    OperandTypeError,
)
from .normalizer import normalize
from .dsl_parser import parse_expression
from .evaluation import EvaluationContext, ExprEvaluator, evaluate

__all__ = [
    # Templates
    "IS_NOT_NULL",
    "IS_NULL",
    "IS_POSITIVE",
    "IS_NEGATIVE",
    "IS_ZERO",
    "IS_POSITIVE_OR_ZERO",
    "IS_NEGATIVE_OR_ZERO",
    "IS_ODD",
    "IS_EVEN",
    "Templates",
    # Errors
    "EvaluationError",
    "ExpressionSyntaxError",
    "UnknownIdentifierError",
    "OperandTypeError",
    # Pipeline
    "normalize",
    "parse_expression",
    "EvaluationContext",
    "ExprEvaluator",
    "evaluate",
]
