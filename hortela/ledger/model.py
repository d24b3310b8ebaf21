"""
Ledger model -- the materialized, read-only ledger.

Responsibility:
    Holds the entities the builder produces from the Operation stream:
    Transaction (one per movement), BalanceVerification (one per balance
    assertion) and AccountOpening (one per open statement), plus query
    helpers used by the validators and reports.

Invariants enforced:
    - Ids are unique and strictly increasing in source order across all
      three entity kinds.
    - Every Transaction carries the span of the statement it came from and
      the ``parent_id`` shared by its sibling movements.
    - The Ledger is frozen; collections are tuples.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from fractions import Fraction
from types import MappingProxyType

from hortela.domain.account import Account, MovementKind
from hortela.domain.span import Span
from hortela.domain.values import Currency, Money


@dataclass(frozen=True, slots=True)
class Transaction:
    """One movement of a source transaction, labelled and dated."""

    id: int
    date: date
    description: str
    kind: MovementKind
    account: Account
    amount: Money
    span: Span
    parent_id: int | None = None

    @property
    def is_credit(self) -> bool:
        return self.kind is MovementKind.CREDIT

    @property
    def currency(self) -> Currency:
        return self.amount.currency

    @property
    def signed_amount(self) -> Money:
        """Effect on the account's natural balance (see Account.signed_factor)."""
        return self.amount * self.account.signed_factor(self.kind)

    @property
    def entry_amount(self) -> Fraction:
        """Direction-signed amount: credits positive, debits negative."""
        return self.amount.amount if self.is_credit else -self.amount.amount


@dataclass(frozen=True, slots=True)
class BalanceVerification:
    """As of ``date``, ``account``'s cumulative signed balance equals ``amount``."""

    id: int
    account: Account
    date: date
    amount: Money
    span: Span


@dataclass(frozen=True, slots=True)
class AccountOpening:
    """Declares an account, its start date and its home currency."""

    id: int
    account: Account
    date: date
    currency: Currency
    span: Span


@dataclass(frozen=True, slots=True)
class Ledger:
    """Immutable snapshot of a compiled ledger source."""

    transactions: tuple[Transaction, ...] = ()
    verifications: tuple[BalanceVerification, ...] = ()
    openings: tuple[AccountOpening, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "transactions", tuple(self.transactions))
        object.__setattr__(self, "verifications", tuple(self.verifications))
        object.__setattr__(self, "openings", tuple(self.openings))

    @property
    def is_empty(self) -> bool:
        return not (self.transactions or self.verifications or self.openings)

    def credits(self) -> tuple[Transaction, ...]:
        return tuple(t for t in self.transactions if t.kind is MovementKind.CREDIT)

    def debits(self) -> tuple[Transaction, ...]:
        return tuple(t for t in self.transactions if t.kind is MovementKind.DEBIT)

    def accounts(self) -> tuple[Account, ...]:
        """Every account mentioned anywhere in the ledger, sorted."""
        seen = {t.account for t in self.transactions}
        seen.update(v.account for v in self.verifications)
        seen.update(o.account for o in self.openings)
        return tuple(sorted(seen))

    def transactions_for(self, account: Account) -> tuple[Transaction, ...]:
        return tuple(t for t in self.transactions if t.account == account)

    def verifications_for(self, account: Account) -> tuple[BalanceVerification, ...]:
        return tuple(v for v in self.verifications if v.account == account)

    def opening_for(self, account: Account) -> AccountOpening | None:
        """The first open statement for ``account``, if any."""
        for opening in self.openings:
            if opening.account == account:
                return opening
        return None

    def groups(self) -> MappingProxyType[int, tuple[Transaction, ...]]:
        """
        Transactions grouped by parent_id, in first-seen order.

        A transaction without a parent_id forms a group of its own, keyed by
        its id.
        """
        grouped: dict[int, list[Transaction]] = defaultdict(list)
        for transaction in self.transactions:
            key = transaction.parent_id if transaction.parent_id is not None else transaction.id
            grouped[key].append(transaction)
        return MappingProxyType({key: tuple(items) for key, items in grouped.items()})
