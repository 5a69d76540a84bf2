"""
Expression validation.

Validates that an object's current member values satisfy a declared
boolean expression such as "PropertyA > PropertyB" or "{0} <> NULL".

Usage:
    from expression_validation import validate, Templates

    outcome = validate(Templates.IsPositive, order, member_name="Quantity")
    outcome.success   # True / False
    outcome.message   # "The field Quantity is invalid." on failure
"""

from .types import (
    ReasonCode,
    ValueType,
    MemberDescriptor,
    MemberBinding,
    ValidationOutcome,
    SUCCESS,
)
from .rules import (
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
    EvaluationError,
    ExpressionSyntaxError,
    UnknownIdentifierError,
    OperandTypeError,
    normalize,
    parse_expression,
    evaluate,
)
from .binding import describe_members, eligible_bindings, is_eligible
from .validator import ExpressionRule, validate

__version__ = "0.1.0"

__all__ = [
    # Types
    "ReasonCode",
    "ValueType",
    "MemberDescriptor",
    "MemberBinding",
    "ValidationOutcome",
    "SUCCESS",
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
    "evaluate",
    "describe_members",
    "eligible_bindings",
    "is_eligible",
    "validate",
    "ExpressionRule",
]
