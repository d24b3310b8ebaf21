"""
Operations -- one immutable record per source statement.

The parser emits ``Spanned[Operation]`` values; the ledger builder folds
them into ledger entries. Movements are kept exactly as written (unsigned
amount plus a direction) -- signing happens later, per account kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from hortela.domain.account import Account, MovementKind
from hortela.domain.values import Currency, Money

__all__ = [
    "BalanceAssertion",
    "Movement",
    "MovementKind",
    "OpenAccount",
    "Operation",
    "TransactionStatement",
]


@dataclass(frozen=True, slots=True)
class Movement:
    """One leg of a transaction statement: ``< 100 BRL assets:cash``."""

    kind: MovementKind
    amount: Money
    account: Account

    @classmethod
    def debit(cls, account: Account, amount: Money) -> Movement:
        return cls(MovementKind.DEBIT, amount, account)

    @classmethod
    def credit(cls, account: Account, amount: Money) -> Movement:
        return cls(MovementKind.CREDIT, amount, account)

    @property
    def is_credit(self) -> bool:
        return self.kind is MovementKind.CREDIT


@dataclass(frozen=True, slots=True)
class OpenAccount:
    """``2020-01-01 open assets:cash BRL``"""

    date: date
    account: Account
    currency: Currency


@dataclass(frozen=True, slots=True)
class BalanceAssertion:
    """``2020-01-31 balance assets:cash 100 BRL``"""

    date: date
    account: Account
    amount: Money


@dataclass(frozen=True, slots=True)
class TransactionStatement:
    """A dated, described group of movements (at least one)."""

    date: date
    description: str
    movements: tuple[Movement, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "movements", tuple(self.movements))
        if not self.movements:
            raise ValueError("A transaction needs at least one movement")


Operation = OpenAccount | BalanceAssertion | TransactionStatement
