"""
DSL Lexer: normalized expression text to tokens.

Token kinds:
- NUMBER: 42, 3.5, .5, 1e3
- STRING: 'text' ('' escapes a quote)
- IDENT: PropertyA, _x1, [Name With Spaces]
- KEYWORD: AND OR NOT IS NULL TRUE FALSE MOD (case-insensitive)
- OPERATOR: = <> < > <= >= + - * / %
- LPAREN / RPAREN
- END: sentinel after the last token
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .constants import KEYWORDS, SYMBOL_OPERATORS
from .errors import ExpressionSyntaxError
from ..types import ReasonCode


class TokenType(Enum):
    NUMBER = auto()
    STRING = auto()
    IDENT = auto()
    KEYWORD = auto()
    OPERATOR = auto()
    LPAREN = auto()
    RPAREN = auto()
    END = auto()


@dataclass(frozen=True)
class Token:
    """
    A lexical token.

    Attributes:
        type: Token kind
        text: Canonical text (keywords uppercased, brackets and quotes removed)
        position: Offset of the first character in the source
    """
    type: TokenType
    text: str
    position: int

    def is_keyword(self, word: str) -> bool:
        return self.type == TokenType.KEYWORD and self.text == word

    def is_operator(self, *symbols: str) -> bool:
        return self.type == TokenType.OPERATOR and self.text in symbols

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.text!r}, @{self.position})"


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_ident_part(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _read_number(source: str, start: int) -> int:
    """Return the end offset of the numeric literal starting at start."""
    i = start
    n = len(source)
    while i < n and source[i].isdigit():
        i += 1
    if i < n and source[i] == ".":
        i += 1
        while i < n and source[i].isdigit():
            i += 1
    if i < n and source[i] in "eE":
        j = i + 1
        if j < n and source[j] in "+-":
            j += 1
        if j < n and source[j].isdigit():
            i = j
            while i < n and source[i].isdigit():
                i += 1
    return i


def tokenize(source: str) -> list[Token]:
    """
    Split a normalized expression into tokens.

    Args:
        source: Normalized expression text

    Returns:
        List of tokens, always terminated by an END token

    Raises:
        ExpressionSyntaxError: On an unterminated literal or unknown character
    """
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        ch = source[i]

        if ch.isspace():
            i += 1
            continue

        # Numeric literal (a leading "." counts when a digit follows)
        if ch.isdigit() or (ch == "." and i + 1 < n and source[i + 1].isdigit()):
            end = _read_number(source, i)
            tokens.append(Token(TokenType.NUMBER, source[i:end], i))
            i = end
            continue

        # String literal
        if ch == "'":
            j = i + 1
            chars: list[str] = []
            while True:
                if j >= n:
                    raise ExpressionSyntaxError(
                        "Unterminated string literal", i, source, ReasonCode.UNEXPECTED_END
                    )
                if source[j] == "'":
                    if j + 1 < n and source[j + 1] == "'":
                        chars.append("'")
                        j += 2
                        continue
                    break
                chars.append(source[j])
                j += 1
            tokens.append(Token(TokenType.STRING, "".join(chars), i))
            i = j + 1
            continue

        # Bracketed identifier
        if ch == "[":
            end = source.find("]", i + 1)
            if end < 0:
                raise ExpressionSyntaxError(
                    "Unterminated bracketed identifier", i, source, ReasonCode.UNEXPECTED_END
                )
            name = source[i + 1:end]
            if not name.strip():
                raise ExpressionSyntaxError("Empty bracketed identifier", i, source)
            tokens.append(Token(TokenType.IDENT, name, i))
            i = end + 1
            continue

        # Identifier or keyword
        if _is_ident_start(ch):
            j = i + 1
            while j < n and _is_ident_part(source[j]):
                j += 1
            word = source[i:j]
            if word.upper() in KEYWORDS:
                tokens.append(Token(TokenType.KEYWORD, word.upper(), i))
            else:
                tokens.append(Token(TokenType.IDENT, word, i))
            i = j
            continue

        # Symbols (longest match first)
        for symbol in SYMBOL_OPERATORS:
            if source.startswith(symbol, i):
                if symbol == "(":
                    tokens.append(Token(TokenType.LPAREN, symbol, i))
                elif symbol == ")":
                    tokens.append(Token(TokenType.RPAREN, symbol, i))
                else:
                    tokens.append(Token(TokenType.OPERATOR, symbol, i))
                i += len(symbol)
                break
        else:
            raise ExpressionSyntaxError(f"Unexpected character {ch!r}", i, source)

    tokens.append(Token(TokenType.END, "", n))
    return tokens


__all__ = ["TokenType", "Token", "tokenize"]
