"""
DSL Parser: normalized expression text to AST.

Recursive-descent parser for the canonical predicate grammar.

Grammar (lowest to highest precedence):

    or_expr        := and_expr ("OR" and_expr)*
    and_expr       := not_expr ("AND" not_expr)*
    not_expr       := "NOT" not_expr | comparison
    comparison     := additive [cmp_op additive | "IS" ["NOT"] "NULL"]
    additive       := modulo (("+" | "-") modulo)*
    modulo         := multiplicative (("%" | "MOD") multiplicative)*
    multiplicative := unary (("*" | "/") unary)*
    unary          := ("-" | "+") unary | primary
    primary        := NUMBER | STRING | "TRUE" | "FALSE" | "NULL"
                    | IDENT | "(" or_expr ")"

Usage:
    expr = parse_expression("(Age % 2) <> 0 AND Name IS NOT NULL")
"""

from __future__ import annotations

from .constants import COMPARISON_OPERATORS
from .dsl_lexer import Token, TokenType, tokenize
from .dsl_nodes import (
    Expr, MemberRef, Literal, UnaryExpr, BinaryExpr, NullCheck,
    NotExpr, AndExpr, OrExpr,
)
from .errors import ExpressionSyntaxError
from ..types import ReasonCode


class Parser:
    """
    Recursive-descent parser over a token list.

    One instance parses one expression; use parse_expression() instead of
    constructing parsers directly.
    """

    def __init__(self, source: str):
        self.source = source
        self.tokens = tokenize(source)
        self.index = 0

    # -------------------------------------------------------------------------
    # Token helpers
    # -------------------------------------------------------------------------

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        if token.type != TokenType.END:
            self.index += 1
        return token

    def _error(self, message: str, token: Token | None = None) -> ExpressionSyntaxError:
        token = token or self.current
        if token.type == TokenType.END:
            return ExpressionSyntaxError(
                f"{message}, reached end of expression",
                token.position,
                self.source,
                ReasonCode.UNEXPECTED_END,
            )
        return ExpressionSyntaxError(
            f"{message}, found {token.text!r}", token.position, self.source
        )

    def _expect_keyword(self, word: str) -> Token:
        if not self.current.is_keyword(word):
            raise self._error(f"Expected {word}")
        return self._advance()

    # -------------------------------------------------------------------------
    # Grammar rules
    # -------------------------------------------------------------------------

    def parse(self) -> Expr:
        if self.current.type == TokenType.END:
            raise self._error("Empty expression")
        expr = self._parse_or()
        if self.current.type != TokenType.END:
            raise self._error("Unexpected token")
        return expr

    def _parse_or(self) -> Expr:
        left = self._parse_and()
        while self.current.is_keyword("OR"):
            self._advance()
            left = OrExpr(left, self._parse_and())
        return left

    def _parse_and(self) -> Expr:
        left = self._parse_not()
        while self.current.is_keyword("AND"):
            self._advance()
            left = AndExpr(left, self._parse_not())
        return left

    def _parse_not(self) -> Expr:
        if self.current.is_keyword("NOT"):
            self._advance()
            return NotExpr(self._parse_not())
        return self._parse_comparison()

    def _parse_comparison(self) -> Expr:
        left = self._parse_additive()

        token = self.current
        if token.type == TokenType.OPERATOR and token.text in COMPARISON_OPERATORS:
            self._advance()
            return BinaryExpr(left, token.text, self._parse_additive())

        if token.is_keyword("IS"):
            self._advance()
            negated = False
            if self.current.is_keyword("NOT"):
                self._advance()
                negated = True
            self._expect_keyword("NULL")
            return NullCheck(left, negated)

        return left

    def _parse_additive(self) -> Expr:
        left = self._parse_modulo()
        while self.current.is_operator("+", "-"):
            op = self._advance().text
            left = BinaryExpr(left, op, self._parse_modulo())
        return left

    def _parse_modulo(self) -> Expr:
        left = self._parse_multiplicative()
        while self.current.is_operator("%") or self.current.is_keyword("MOD"):
            self._advance()
            left = BinaryExpr(left, "%", self._parse_multiplicative())
        return left

    def _parse_multiplicative(self) -> Expr:
        left = self._parse_unary()
        while self.current.is_operator("*", "/"):
            op = self._advance().text
            left = BinaryExpr(left, op, self._parse_unary())
        return left

    def _parse_unary(self) -> Expr:
        if self.current.is_operator("-", "+"):
            op = self._advance().text
            return UnaryExpr(op, self._parse_unary())
        return self._parse_primary()

    def _parse_primary(self) -> Expr:
        token = self.current

        if token.type == TokenType.NUMBER:
            self._advance()
            return Literal(_parse_number(token))

        if token.type == TokenType.STRING:
            self._advance()
            return Literal(token.text)

        if token.type == TokenType.IDENT:
            self._advance()
            return MemberRef(token.text, token.position)

        if token.type == TokenType.KEYWORD:
            if token.text in ("TRUE", "FALSE"):
                self._advance()
                return Literal(token.text == "TRUE")
            if token.text == "NULL":
                self._advance()
                return Literal(None)

        if token.type == TokenType.LPAREN:
            self._advance()
            inner = self._parse_or()
            if self.current.type != TokenType.RPAREN:
                raise self._error("Expected ')'")
            self._advance()
            return inner

        raise self._error("Expected an operand")


def _parse_number(token: Token) -> int | float:
    text = token.text
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text)


def parse_expression(source: str) -> Expr:
    """
    Parse a normalized expression into an AST.

    Args:
        source: Normalized expression text

    Returns:
        Root expression node

    Raises:
        ExpressionSyntaxError: If the text violates the grammar
    """
    return Parser(source).parse()


__all__ = ["Parser", "parse_expression"]
