"""
Evaluation errors.

Every failure to turn an expression into a boolean is an EvaluationError.
These are configuration defects in the authored expression, never
validation failures, so they propagate to the caller instead of being
folded into a ValidationOutcome.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..types import ReasonCode


class EvaluationError(Exception):
    """Error evaluating an expression with an actionable message."""

    def __init__(
        self,
        message: str,
        reason: ReasonCode = ReasonCode.INTERNAL_ERROR,
        expression: Optional[str] = None,
    ):
        self.reason = reason
        self.expression = expression
        self.detail = message
        full_msg = message
        if expression is not None:
            full_msg += f" (expression: {expression!r})"
        super().__init__(full_msg)

    def attach_expression(self, expression: str) -> "EvaluationError":
        """Record the expression text on an error raised without it."""
        if self.expression is None:
            self.expression = expression
            self.args = (f"{self.detail} (expression: {expression!r})",)
        return self

    def to_dict(self) -> dict:
        """Convert to dict for logging/serialization."""
        return {
            "reason": self.reason.name,
            "message": self.detail,
            "expression": self.expression,
        }


class ExpressionSyntaxError(EvaluationError):
    """The normalized expression violates the predicate grammar."""

    def __init__(
        self,
        message: str,
        position: int,
        expression: Optional[str] = None,
        reason: ReasonCode = ReasonCode.INVALID_SYNTAX,
    ):
        self.position = position
        super().__init__(f"{message} at position {position}", reason, expression)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["position"] = self.position
        return data


class UnknownIdentifierError(EvaluationError):
    """An identifier is not among the eligible member bindings."""

    def __init__(
        self,
        name: str,
        allowed: Optional[Iterable[str]] = None,
        expression: Optional[str] = None,
        reason: ReasonCode = ReasonCode.UNKNOWN_IDENTIFIER,
    ):
        self.name = name
        self.allowed = sorted(allowed) if allowed is not None else None
        if reason == ReasonCode.AMBIGUOUS_IDENTIFIER:
            message = f"Ambiguous identifier '{name}'"
        else:
            message = f"Unknown identifier '{name}'"
        if self.allowed:
            message += f". Allowed: {', '.join(self.allowed)}"
        elif self.allowed is not None:
            message += ". No eligible members"
        super().__init__(message, reason, expression)


class OperandTypeError(EvaluationError):
    """Operands cannot be coerced for an operator."""

    def __init__(
        self,
        message: str,
        expression: Optional[str] = None,
        reason: ReasonCode = ReasonCode.TYPE_MISMATCH,
    ):
        super().__init__(message, reason, expression)
