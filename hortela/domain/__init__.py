"""
Pure domain layer.

Value objects (Currency, Money), accounts with their sign convention,
source spans, and the Operation records produced by the parser. Nothing in
this package performs I/O or logs.
"""

from hortela.domain.account import MAX_SEGMENTS, Account, AccountKind, MovementKind
from hortela.domain.operations import (
    BalanceAssertion,
    Movement,
    OpenAccount,
    Operation,
    TransactionStatement,
)
from hortela.domain.span import Span, Spanned
from hortela.domain.values import Currency, Money, format_amount, parse_decimal, to_fraction

__all__ = [
    "MAX_SEGMENTS",
    "Account",
    "AccountKind",
    "BalanceAssertion",
    "Currency",
    "Money",
    "Movement",
    "MovementKind",
    "OpenAccount",
    "Operation",
    "Span",
    "Spanned",
    "TransactionStatement",
    "format_amount",
    "parse_decimal",
    "to_fraction",
]
