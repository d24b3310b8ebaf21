"""
hortela - plain-text double-entry ledger compiler.

Turns ledger source text into a validated, queryable ledger:

- Lexer and recursive-descent parser with byte-span diagnostics
- Exact rational money arithmetic (no floating point)
- Sequentially labelled ledger entries grouped per source transaction
- Global, per-transaction and running-balance reconciliation checks
"""

from hortela.ledger.builder import build_ledger
from hortela.pipeline import compile_source
from hortela.syntax.lexer import lex
from hortela.syntax.parser import parse
from hortela.validation.engine import validate

__version__ = "0.1.0"

__all__ = [
    "build_ledger",
    "compile_source",
    "lex",
    "parse",
    "validate",
]
