"""
Expression Normalizer - language-style operators to predicate grammar.

Pure function that rewrites an authored expression such as

    PropertyA != null && !(PropertyB == 0)

into the canonical grammar understood by the parser:

    PropertyA IS NOT NULL AND NOT (PropertyB = 0)

Rules run in a fixed order and work on substrings, not tokens. Later
rules assume earlier ones already ran (e.g. "!=" is rewritten before the
bare "!" rule would see it).
"""

from __future__ import annotations

import re
from typing import Optional

from ..types import ReasonCode
from .constants import MEMBER_PLACEHOLDER, NULL_TRANSLATIONS, OPERATOR_TRANSLATIONS
from .errors import EvaluationError

_SPACE_RUN = re.compile(r" {2,}")


def collapse_spaces(expression: str) -> str:
    """Collapse every run of spaces to a single space."""
    while "  " in expression:
        expression = expression.replace("  ", " ")
    return expression


def replace_ignore_case(text: str, old: str, new: str) -> str:
    """
    Replace every case-insensitive occurrence of old with new.

    Scanning resumes after each inserted replacement, so replacement text
    is never matched again.
    """
    pattern = re.compile(re.escape(old), flags=re.IGNORECASE)
    return pattern.sub(lambda _: new, text)


def normalize(expression: str, member_name: Optional[str] = None) -> str:
    """
    Normalize an authored expression into the canonical predicate grammar.

    Order:
    1. Collapse repeated spaces
    2-6. != -> <>, == -> =, ! -> NOT, && -> AND, || -> OR
    7-9. = NULL -> IS NULL, <> NULL -> IS NOT NULL, null -> NULL
    10. {0} -> member_name

    Spacing introduced by rules 4-8 is tidied before the member name is
    substituted, so the result is stable under repeated normalization.

    Args:
        expression: Authored expression text
        member_name: Member substituted for {0}

    Returns:
        Normalized expression

    Raises:
        EvaluationError: If {0} is used and no member name is given
    """
    if not isinstance(expression, str):
        raise TypeError(f"Expression must be a string, got {type(expression).__name__}")

    normalized = collapse_spaces(expression)

    for old, new in OPERATOR_TRANSLATIONS:
        normalized = normalized.replace(old, new)

    for old, new in NULL_TRANSLATIONS:
        normalized = replace_ignore_case(normalized, old, new)

    normalized = _SPACE_RUN.sub(" ", normalized).strip()

    if MEMBER_PLACEHOLDER in normalized:
        if member_name is None:
            raise EvaluationError(
                f"Placeholder {MEMBER_PLACEHOLDER} requires a member name",
                ReasonCode.UNBOUND_PLACEHOLDER,
                expression,
            )
        normalized = normalized.replace(MEMBER_PLACEHOLDER, member_name)

    return normalized
