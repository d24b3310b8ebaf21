"""Token alphabet of the ledger language."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction

from hortela.domain.values import parse_decimal


class TokenKind(str, Enum):
    IDENTIFIER = "identifier"
    NUMBER = "number"
    CURRENCY = "currency"
    MOVEMENT = "movement"
    SEPARATOR = "separator"
    STRING = "string"
    COMMENT = "comment"


@dataclass(frozen=True, slots=True)
class Token:
    """
    A lexed token.

    ``value`` is the decoded payload: the exact Fraction for numbers, the
    unquoted text for strings, the text after ``//`` for comments and the
    lexeme itself for everything else. ``text`` is always the raw lexeme.
    """

    kind: TokenKind
    value: str | Fraction
    text: str

    @classmethod
    def identifier(cls, name: str) -> Token:
        return cls(TokenKind.IDENTIFIER, name, name)

    @classmethod
    def number(cls, literal: str) -> Token:
        return cls(TokenKind.NUMBER, parse_decimal(literal), literal)

    @classmethod
    def currency(cls, code: str) -> Token:
        return cls(TokenKind.CURRENCY, code, code)

    @classmethod
    def movement(cls, symbol: str) -> Token:
        return cls(TokenKind.MOVEMENT, symbol, symbol)

    @classmethod
    def separator(cls, symbol: str) -> Token:
        return cls(TokenKind.SEPARATOR, symbol, symbol)

    @classmethod
    def string(cls, content: str) -> Token:
        return cls(TokenKind.STRING, content, f'"{content}"')

    @classmethod
    def comment(cls, content: str) -> Token:
        return cls(TokenKind.COMMENT, content, f"//{content}")

    def is_separator(self, symbol: str) -> bool:
        return self.kind is TokenKind.SEPARATOR and self.value == symbol

    @property
    def is_integer_literal(self) -> bool:
        """True for a NUMBER token written without a decimal point."""
        return self.kind is TokenKind.NUMBER and "." not in self.text

    def describe(self) -> str:
        """Short human description used in diagnostics (``found ...``)."""
        if self.kind is TokenKind.STRING:
            return f"string {self.text}"
        return f"{self.kind.value} {self.text!r}"
