"""
Lexer -- source text to spanned tokens.

Responsibility:
    Turns UTF-8 ledger source into ``Spanned[Token]`` values in source
    order. Whitespace is dropped; ``//`` comments become COMMENT tokens
    (the parser ignores them).

Invariants enforced:
    - Spans are byte offsets into ``source.encode("utf-8")``, disjoint and
      strictly increasing.
    - Numbers become ``Fraction`` straight from their decimal lexeme; no
      float is ever involved.
    - Lexing never raises. An unrecognized run of bytes is reported once as
      a LexError and skipped up to the next offset where whitespace, a
      comment or any token rule matches.

Token rules, tried in order at each offset:
    CURRENCY    3-5 uppercase letters not followed by another uppercase letter
    MOVEMENT    ``<`` (debit) or ``>`` (credit)
    STRING      ``"..."`` (no escapes, may not contain ``"``)
    SEPARATOR   ``:`` or ``-``
    NUMBER      digits with an optional ``.digits`` fraction
    IDENTIFIER  a lowercase letter followed by lowercase letters or ``_``
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from hortela.domain.span import Span, Spanned
from hortela.logging_config import get_logger
from hortela.syntax.diagnostics import LexError
from hortela.syntax.tokens import Token, TokenKind

logger = get_logger("syntax.lexer")

_WHITESPACE = re.compile(rb"\s+")
_COMMENT = re.compile(rb"//([^\n]*)")

_TOKEN_RULES: tuple[tuple[TokenKind, re.Pattern[bytes]], ...] = (
    (TokenKind.CURRENCY, re.compile(rb"[A-Z]{3,5}(?![A-Z])")),
    (TokenKind.MOVEMENT, re.compile(rb"[<>]")),
    (TokenKind.STRING, re.compile(rb'"([^"]*)"')),
    (TokenKind.SEPARATOR, re.compile(rb"[:\-]")),
    (TokenKind.NUMBER, re.compile(rb"[0-9]+(?:\.[0-9]+)?")),
    (TokenKind.IDENTIFIER, re.compile(rb"[a-z][a-z_]*")),
)


@dataclass(frozen=True, slots=True)
class LexResult:
    """Best-effort token stream plus every lexical error encountered."""

    tokens: tuple[Spanned[Token], ...]
    errors: tuple[LexError, ...]

    @property
    def ok(self) -> bool:
        return not self.errors


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _build_token(kind: TokenKind, match: re.Match[bytes]) -> Token:
    if kind is TokenKind.NUMBER:
        return Token.number(_decode(match.group(0)))
    if kind is TokenKind.STRING:
        return Token.string(_decode(match.group(1)))
    return Token(kind, _decode(match.group(0)), _decode(match.group(0)))


def _match_token(data: bytes, pos: int) -> tuple[Token, int] | None:
    for kind, pattern in _TOKEN_RULES:
        match = pattern.match(data, pos)
        if match is not None:
            return _build_token(kind, match), match.end()
    return None


def _can_resume(data: bytes, pos: int) -> bool:
    if _WHITESPACE.match(data, pos) or _COMMENT.match(data, pos):
        return True
    return any(pattern.match(data, pos) for _, pattern in _TOKEN_RULES)


def _recover(data: bytes, start: int) -> LexError:
    end = start + 1
    while end < len(data) and not _can_resume(data, end):
        end += 1
    found = _decode(data[start:end])
    if data[start:start + 1] == b'"':
        message = "unterminated string"
        expected = 'closing `"`'
    else:
        message = f"unrecognized input {found!r}"
        expected = "a date, number, currency, account, movement or string"
    return LexError(span=Span(start, end), message=message, found=found, expected=expected)


def lex(source: str) -> LexResult:
    """
    Tokenize ``source``.

    Never raises for malformed input: the result always carries the tokens
    that could be read, and ``errors`` lists every skipped region.
    """
    data = source.encode("utf-8")
    tokens: list[Spanned[Token]] = []
    errors: list[LexError] = []
    pos = 0

    while pos < len(data):
        match = _WHITESPACE.match(data, pos)
        if match is not None:
            pos = match.end()
            continue

        match = _COMMENT.match(data, pos)
        if match is not None:
            tokens.append(Spanned(Token.comment(_decode(match.group(1))), Span(pos, match.end())))
            pos = match.end()
            continue

        matched = _match_token(data, pos)
        if matched is not None:
            token, end = matched
            tokens.append(Spanned(token, Span(pos, end)))
            pos = end
            continue

        error = _recover(data, pos)
        logger.debug(
            "lex_error",
            extra={"span_start": error.span.start, "span_end": error.span.end, "found": error.found},
        )
        errors.append(error)
        pos = error.span.end

    logger.debug(
        "lexing_completed",
        extra={"token_count": len(tokens), "error_count": len(errors), "byte_count": len(data)},
    )
    return LexResult(tokens=tuple(tokens), errors=tuple(errors))
