"""
Validation orchestrator.

Ties the pipeline together for one candidate instance:

    eligible_bindings -> normalize -> evaluate -> ValidationOutcome

A False result is a validation failure and comes back as an outcome.
An EvaluationError is a defect in the authored expression; it is logged
and re-raised, never turned into a failure.

Usage:
    from expression_validation import validate, ExpressionRule, Templates

    outcome = validate(Templates.IsOdd, person, member_name="Age")
    if not outcome:
        print(outcome.message)

    rule = ExpressionRule("PropertyA > PropertyB")
    rule.validate(candidate)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .binding.members import eligible_bindings
from .config.config import get_config
from .rules.errors import EvaluationError
from .rules.evaluation import evaluate
from .rules.normalizer import normalize
from .types import SUCCESS, MemberDescriptor, ValidationOutcome
from .utils.logger import get_logger

logger = get_logger()


def _is_blank(expression_source: Optional[str]) -> bool:
    return expression_source is None or not expression_source.strip()


def format_message(
    candidate_instance: Any,
    member_name: Optional[str] = None,
    error_message: Optional[str] = None,
) -> str:
    """
    Build the failure message for a candidate.

    {0} in the template is replaced with the member name, or with the
    candidate's type name for whole-object rules.
    """
    template = error_message if error_message is not None else get_config().evaluation.default_message
    return template.format(member_name if member_name is not None else type(candidate_instance).__name__)


def validate(
    expression_source: Optional[str],
    candidate_instance: Any,
    member_name: Optional[str] = None,
    error_message: Optional[str] = None,
    members: Optional[Iterable[MemberDescriptor]] = None,
) -> ValidationOutcome:
    """
    Validate a candidate instance against an expression.

    Args:
        expression_source: Authored expression; blank means no constraint
        candidate_instance: Object whose members are checked
        member_name: Member under validation; substituted for {0}
        error_message: Failure message template (default from config)
        members: Explicit member descriptors instead of reflection

    Returns:
        ValidationOutcome (success, or failure with message and member names)

    Raises:
        EvaluationError: Expression cannot be normalized, parsed or evaluated
    """
    if _is_blank(expression_source):
        return SUCCESS

    bindings = eligible_bindings(candidate_instance, members)

    try:
        normalized = normalize(expression_source, member_name)
        result = evaluate(normalized, bindings)
    except EvaluationError as e:
        logger.error(
            "Evaluation failed for %s: %s [%s]",
            type(candidate_instance).__name__,
            e,
            e.reason.name,
        )
        raise

    logger.outcome(normalized, result, member_name, type=type(candidate_instance).__name__)

    if result:
        return SUCCESS
    return ValidationOutcome.failed(
        format_message(candidate_instance, member_name, error_message),
        (member_name,) if member_name is not None else (),
    )


@dataclass(frozen=True)
class ExpressionRule:
    """
    Declared expression with its optional failure message.

    Two rules are equal when their expression text is equal; the message
    does not take part in equality or hashing.
    """

    expression: Optional[str]
    error_message: Optional[str] = field(default=None, compare=False)

    @property
    def is_default(self) -> bool:
        """True for a rule declared without an expression."""
        return self.expression is None

    def validate(self, candidate_instance: Any, member_name: Optional[str] = None) -> ValidationOutcome:
        """Validate a candidate against this rule."""
        return validate(
            self.expression,
            candidate_instance,
            member_name=member_name,
            error_message=self.error_message,
        )


__all__ = ["format_message", "validate", "ExpressionRule"]
