"""
Lexical and syntax diagnostics.

Both are plain records: the lexer and parser accumulate them and keep
going, and the caller decides what a non-empty list means. They share the
field names of ``hortela.validation.trace.Trace`` (message, span, expected,
found) so one renderer can display all three.
"""

from __future__ import annotations

from dataclasses import dataclass

from hortela.domain.span import Span


@dataclass(frozen=True, slots=True)
class LexError:
    """A run of input that no token rule matched; it was skipped."""

    span: Span
    message: str
    found: str | None = None
    expected: str | None = None
    details: str | None = None

    code = "LEX_ERROR"


@dataclass(frozen=True, slots=True)
class ParseError:
    """A statement that did not match the grammar; it was skipped."""

    span: Span
    message: str
    found: str | None = None
    expected: str | None = None
    details: str | None = None

    code = "PARSE_ERROR"
