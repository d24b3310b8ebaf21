"""
Plain-text diagnostic renderer.

Turns a lex error, parse error or validation trace into a compiler-style
report pointing at the offending source line::

    error: Transaction does not balance, expected `0`, found -1
     --> ledger.hta:3:1
      |
    3 | 2020-01-01 transaction "x"
      | ^^^^^^^^^^^^^^^^^^^^^^^^^^
      = Inside a transaction, all debits and credits must balance in the end.

Spans are byte offsets into the UTF-8 encoding of ``source``; lines and
columns are reported 1-based, columns counted in characters. Only the first
line of a multi-line span is shown, with a trailing ``...`` marker.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from hortela.domain.span import Span


class Diagnostic(Protocol):
    message: str
    span: Span | None
    details: str | None
    found: str | None
    expected: str | None


@dataclass(frozen=True, slots=True)
class SourceLocation:
    line: int
    column: int
    line_text: str
    underline_width: int
    continues: bool


def locate(source: str, span: Span) -> SourceLocation:
    """Map a byte span onto its first source line."""
    data = source.encode("utf-8")
    start = min(span.start, len(data))
    end = min(max(span.end, start), len(data))

    line_start = data.rfind(b"\n", 0, start) + 1
    line_end = data.find(b"\n", start)
    if line_end == -1:
        line_end = len(data)

    def width(raw: bytes) -> int:
        return len(raw.decode("utf-8", errors="replace"))

    return SourceLocation(
        line=data.count(b"\n", 0, start) + 1,
        column=width(data[line_start:start]) + 1,
        line_text=data[line_start:line_end].decode("utf-8", errors="replace"),
        underline_width=max(1, width(data[start:min(end, line_end)])),
        continues=end > line_end,
    )


def _headline(message: str, expected: str | None, found: str | None) -> str:
    parts = [message]
    if expected is not None:
        parts.append(f"expected `{expected}`")
    if found is not None:
        parts.append(f"found {found}")
    return "error: " + ", ".join(parts)


def render_diagnostic(
    source: str,
    *,
    message: str,
    span: Span | None = None,
    details: str | None = None,
    found: str | None = None,
    expected: str | None = None,
    source_name: str = "<string>",
) -> str:
    """Render one diagnostic against ``source``."""
    lines = [_headline(message, expected, found)]

    if span is not None:
        where = locate(source, span)
        gutter = " " * len(str(where.line))
        marker = "^" * where.underline_width + (" ..." if where.continues else "")
        lines.extend([
            f"{gutter}--> {source_name}:{where.line}:{where.column}",
            f"{gutter} |",
            f"{where.line} | {where.line_text}",
            f"{gutter} | {' ' * (where.column - 1)}{marker}",
        ])
        if details:
            lines.append(f"{gutter} = {details}")
    elif details:
        lines.append(f"  = {details}")

    return "\n".join(lines)


def render(source: str, diagnostic: Diagnostic, *, source_name: str = "<string>") -> str:
    """Render any record exposing message/span/details/found/expected."""
    return render_diagnostic(
        source,
        message=diagnostic.message,
        span=diagnostic.span,
        details=diagnostic.details,
        found=diagnostic.found,
        expected=diagnostic.expected,
        source_name=source_name,
    )
