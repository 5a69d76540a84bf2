"""
Expression constants.

This module defines all constant values used by the expression engine:
- Named templates (full expressions parameterized by {0})
- Keyword and operator sets of the canonical predicate grammar
- Normalizer translation table
"""

from __future__ import annotations

# =============================================================================
# Named Templates
# =============================================================================
# Each template is a complete expression; {0} is the member being validated.

IS_NOT_NULL = "{0} <> NULL"
IS_NULL = "{0} = NULL"
IS_POSITIVE = "{0} > 0"
IS_NEGATIVE = "{0} < 0"
IS_ZERO = "{0} = 0"
IS_POSITIVE_OR_ZERO = "{0} >= 0"
IS_NEGATIVE_OR_ZERO = "{0} <= 0"
IS_ODD = "({0} % 2) <> 0"
IS_EVEN = "({0} % 2) = 0"


class Templates:
    """Named convenience templates, grouped for attribute-style access."""

    IsNotNull = IS_NOT_NULL
    IsNull = IS_NULL
    IsPositive = IS_POSITIVE
    IsNegative = IS_NEGATIVE
    IsZero = IS_ZERO
    IsPositiveOrZero = IS_POSITIVE_OR_ZERO
    IsNegativeOrZero = IS_NEGATIVE_OR_ZERO
    IsOdd = IS_ODD
    IsEven = IS_EVEN

    @classmethod
    def all(cls) -> dict[str, str]:
        """Return template name -> expression, in declaration order."""
        return {
            name: value
            for name, value in vars(cls).items()
            if name[:1].isupper() and isinstance(value, str)
        }


# =============================================================================
# Placeholder
# =============================================================================

MEMBER_PLACEHOLDER = "{0}"

# =============================================================================
# Normalizer Translation Table
# =============================================================================
# Applied in order after whitespace collapsing. Order is load-bearing:
# "!=" must be rewritten before the bare "!" rule.

OPERATOR_TRANSLATIONS = (
    ("!=", "<>"),
    ("==", "="),
    ("!", " NOT "),
    ("&&", " AND "),
    ("||", " OR "),
)

# Case-insensitive NULL rewrites, applied after OPERATOR_TRANSLATIONS.
NULL_TRANSLATIONS = (
    ("= NULL", " IS NULL "),
    ("<> NULL", " IS NOT NULL "),
    ("null", "NULL"),
)

# =============================================================================
# Canonical Grammar
# =============================================================================

KEYWORDS = frozenset({
    "AND",
    "OR",
    "NOT",
    "IS",
    "NULL",
    "TRUE",
    "FALSE",
    "MOD",
})

COMPARISON_OPERATORS = frozenset({
    "=",            # Equal
    "<>",           # Not equal
    "<",            # Less than
    ">",            # Greater than
    "<=",           # Less than or equal
    ">=",           # Greater than or equal
})

ADDITIVE_OPERATORS = frozenset({"+", "-"})

MULTIPLICATIVE_OPERATORS = frozenset({"*", "/", "%"})

ARITHMETIC_OPERATORS = ADDITIVE_OPERATORS | MULTIPLICATIVE_OPERATORS

# Two-character operators are matched before their one-character prefixes.
SYMBOL_OPERATORS = ("<>", "<=", ">=", "=", "<", ">", "+", "-", "*", "/", "%", "(", ")")

# Name of the synthetic computed column in the evaluation context
RESULT_COLUMN = "_is_valid"


__all__ = [
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
    "MEMBER_PLACEHOLDER",
    "OPERATOR_TRANSLATIONS",
    "NULL_TRANSLATIONS",
    "KEYWORDS",
    "COMPARISON_OPERATORS",
    "ADDITIVE_OPERATORS",
    "MULTIPLICATIVE_OPERATORS",
    "ARITHMETIC_OPERATORS",
    "SYMBOL_OPERATORS",
    "RESULT_COLUMN",
]
