"""
DSL AST Node Types for the predicate grammar.

This module defines the node types produced by the parser:
- MemberRef: Reference to a bound member (a column of the context row)
- Literal: Number, string, boolean or NULL literal
- UnaryExpr: Arithmetic negation
- BinaryExpr: Arithmetic (+ - * / %) and comparison (= <> < > <= >=)
- NullCheck: IS NULL / IS NOT NULL
- NotExpr: Logical NOT
- AndExpr / OrExpr: Logical AND / OR
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .constants import ARITHMETIC_OPERATORS, COMPARISON_OPERATORS


# =============================================================================
# Value Nodes
# =============================================================================

@dataclass(frozen=True)
class MemberRef:
    """
    A reference to a member of the candidate instance.

    Attributes:
        name: Identifier as written in the expression
        position: Offset in the normalized expression (for error messages)

    Examples:
        MemberRef("PropertyA")
        MemberRef("Unit Price")   # written as [Unit Price]
    """
    name: str
    position: int = 0

    def __post_init__(self):
        if not self.name:
            raise ValueError("MemberRef: name is required")

    def __repr__(self) -> str:
        return f"Ref({self.name!r})"


@dataclass(frozen=True)
class Literal:
    """
    A literal value. None is the NULL literal.

    Examples:
        Literal(0)
        Literal(2.5)
        Literal("abc")
        Literal(True)
        Literal(None)     # NULL
    """
    value: int | float | bool | str | None

    @property
    def is_null(self) -> bool:
        return self.value is None

    def __repr__(self) -> str:
        if self.value is None:
            return "NULL"
        return f"Lit({self.value!r})"


# =============================================================================
# Operator Nodes
# =============================================================================

@dataclass(frozen=True)
class UnaryExpr:
    """
    Arithmetic negation or identity.

    Attributes:
        op: "-" or "+"
        operand: Expression to negate
    """
    op: str
    operand: "Expr"

    def __post_init__(self):
        if self.op not in ("-", "+"):
            raise ValueError(f"UnaryExpr: unknown operator '{self.op}'")

    def __repr__(self) -> str:
        return f"({self.op}{self.operand!r})"


@dataclass(frozen=True)
class BinaryExpr:
    """
    Arithmetic or comparison between two operands.

    Semantics:
        - Any NULL operand yields NULL
        - INT op FLOAT -> FLOAT, "/" always -> FLOAT
        - Comparison yields a boolean (or NULL)

    Examples:
        # (Age % 2) <> 0
        BinaryExpr(
            left=BinaryExpr(MemberRef("Age"), "%", Literal(2)),
            op="<>",
            right=Literal(0),
        )
    """
    left: "Expr"
    op: str
    right: "Expr"

    def __post_init__(self):
        if self.op not in ARITHMETIC_OPERATORS and self.op not in COMPARISON_OPERATORS:
            raise ValueError(
                f"BinaryExpr: unknown operator '{self.op}'. "
                f"Valid operators: {sorted(ARITHMETIC_OPERATORS | COMPARISON_OPERATORS)}"
            )

    @property
    def is_comparison(self) -> bool:
        return self.op in COMPARISON_OPERATORS

    def __repr__(self) -> str:
        return f"({self.left!r} {self.op} {self.right!r})"


@dataclass(frozen=True)
class NullCheck:
    """
    IS NULL / IS NOT NULL. Always yields TRUE or FALSE, never NULL.

    Attributes:
        operand: Expression to test
        negated: True for IS NOT NULL
    """
    operand: "Expr"
    negated: bool = False

    def __repr__(self) -> str:
        suffix = "IS NOT NULL" if self.negated else "IS NULL"
        return f"({self.operand!r} {suffix})"


# =============================================================================
# Boolean Nodes
# =============================================================================

@dataclass(frozen=True)
class NotExpr:
    """NOT expression: NOT TRUE = FALSE, NOT NULL = NULL."""
    child: "Expr"

    def __repr__(self) -> str:
        return f"Not({self.child!r})"


@dataclass(frozen=True)
class AndExpr:
    """
    AND expression (Kleene logic).

    FALSE wins over NULL: FALSE AND NULL = FALSE, TRUE AND NULL = NULL.
    """
    left: "Expr"
    right: "Expr"

    def __repr__(self) -> str:
        return f"And({self.left!r}, {self.right!r})"


@dataclass(frozen=True)
class OrExpr:
    """
    OR expression (Kleene logic).

    TRUE wins over NULL: TRUE OR NULL = TRUE, FALSE OR NULL = NULL.
    """
    left: "Expr"
    right: "Expr"

    def __repr__(self) -> str:
        return f"Or({self.left!r}, {self.right!r})"


Expr = Union[MemberRef, Literal, UnaryExpr, BinaryExpr, NullCheck, NotExpr, AndExpr, OrExpr]


def collect_member_refs(expr: Expr) -> list[str]:
    """
    Return member names referenced by an expression, in first-use order.

    Useful for reporting which members an expression depends on.
    """
    seen: dict[str, None] = {}

    def _walk(node: Any) -> None:
        if isinstance(node, MemberRef):
            seen.setdefault(node.name, None)
        elif isinstance(node, (UnaryExpr, NullCheck)):
            _walk(node.operand)
        elif isinstance(node, NotExpr):
            _walk(node.child)
        elif isinstance(node, (BinaryExpr, AndExpr, OrExpr)):
            _walk(node.left)
            _walk(node.right)

    _walk(expr)
    return list(seen)


__all__ = [
    "MemberRef",
    "Literal",
    "UnaryExpr",
    "BinaryExpr",
    "NullCheck",
    "NotExpr",
    "AndExpr",
    "OrExpr",
    "Expr",
    "collect_member_refs",
]
