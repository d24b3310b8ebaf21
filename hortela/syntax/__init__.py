"""Language front-end: lexer, parser and their diagnostics."""

from hortela.syntax.diagnostics import LexError, ParseError
from hortela.syntax.lexer import LexResult, lex
from hortela.syntax.parser import ParseResult, parse
from hortela.syntax.tokens import Token, TokenKind

__all__ = [
    "LexError",
    "LexResult",
    "ParseError",
    "ParseResult",
    "Token",
    "TokenKind",
    "lex",
    "parse",
]
