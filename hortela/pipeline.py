"""
Pipeline facade: source text -> Ledger in one call.

``compile_source`` chains lex, parse and build_ledger under a LogContext
naming the source, and turns any accumulated lex/parse diagnostics into a
single SourceRejectedError. Callers that want best-effort results with the
diagnostics alongside should call the stages directly or use
``compile_source_lenient``.
"""

from __future__ import annotations

from dataclasses import dataclass

from hortela.exceptions import SourceRejectedError
from hortela.ledger.builder import build_ledger
from hortela.ledger.model import Ledger
from hortela.logging_config import LogContext, get_logger
from hortela.syntax.diagnostics import LexError, ParseError
from hortela.syntax.lexer import lex
from hortela.syntax.parser import parse

logger = get_logger("pipeline")


@dataclass(frozen=True, slots=True)
class Compilation:
    """A best-effort ledger plus every diagnostic met on the way."""

    ledger: Ledger
    diagnostics: tuple[LexError | ParseError, ...]

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def compile_source_lenient(source: str, *, source_name: str = "<string>") -> Compilation:
    """Lex, parse and build; never raises for a malformed source."""
    with LogContext.bind(source_name=source_name):
        with LogContext.bind(stage="lex"):
            lexed = lex(source)
        with LogContext.bind(stage="parse"):
            parsed = parse(lexed.tokens)
        with LogContext.bind(stage="build"):
            ledger = build_ledger(parsed.operations)

    diagnostics = sorted(
        (*lexed.errors, *parsed.errors),
        key=lambda d: (d.span.start, d.span.end),
    )
    return Compilation(ledger=ledger, diagnostics=tuple(diagnostics))


def compile_source(source: str, *, source_name: str = "<string>") -> Ledger:
    """
    Compile ``source`` into a Ledger.

    Raises:
        SourceRejectedError: if lexing or parsing reported any diagnostic.
    """
    compilation = compile_source_lenient(source, source_name=source_name)
    if not compilation.ok:
        logger.warning(
            "source_rejected",
            extra={"source_name": source_name, "error_count": len(compilation.diagnostics)},
        )
        raise SourceRejectedError(source_name, compilation.diagnostics)
    return compilation.ledger
