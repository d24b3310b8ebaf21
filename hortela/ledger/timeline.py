"""
Running balances over a sparse calendar.

An AccountTimeline sorts one account's transactions by date and keeps the
cumulative signed sum at each distinct date. ``balance_on(day)`` is the sum
of every transaction dated on or before ``day``: same-day transactions are
included, and a day with no activity inherits the last balance before it.
Lookups are a bisection over the distinct dates.

Amounts from different currency tags are summed together; ``currencies``
exposes which tags went into the total so callers can flag the mix.
"""

from __future__ import annotations

from bisect import bisect_right
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from fractions import Fraction

from hortela.domain.account import Account
from hortela.domain.values import Currency
from hortela.ledger.model import Transaction


@dataclass(frozen=True, slots=True)
class AccountTimeline:
    account: Account
    dates: tuple[date, ...]
    cumulative: tuple[Fraction, ...]
    currencies: frozenset[Currency]

    @classmethod
    def from_transactions(
        cls, account: Account, transactions: Iterable[Transaction]
    ) -> AccountTimeline:
        per_day: dict[date, Fraction] = defaultdict(Fraction)
        currencies: set[Currency] = set()
        for transaction in transactions:
            if transaction.account != account:
                continue
            per_day[transaction.date] += transaction.signed_amount.amount
            currencies.add(transaction.currency)

        dates = tuple(sorted(per_day))
        cumulative: list[Fraction] = []
        running = Fraction(0)
        for day in dates:
            running += per_day[day]
            cumulative.append(running)
        return cls(account, dates, tuple(cumulative), frozenset(currencies))

    @property
    def is_mixed_currency(self) -> bool:
        return len(self.currencies) > 1

    @property
    def final_balance(self) -> Fraction:
        return self.cumulative[-1] if self.cumulative else Fraction(0)

    def balance_on(self, day: date) -> Fraction:
        """Cumulative signed balance including every transaction dated <= ``day``."""
        index = bisect_right(self.dates, day)
        if index == 0:
            return Fraction(0)
        return self.cumulative[index - 1]


def build_timelines(
    transactions: Iterable[Transaction],
    accounts: Iterable[Account] | None = None,
) -> dict[Account, AccountTimeline]:
    """
    Build one timeline per account in a single pass.

    With ``accounts`` given, only those accounts are materialized (accounts
    without transactions get an empty timeline).
    """
    wanted = set(accounts) if accounts is not None else None
    by_account: dict[Account, list[Transaction]] = defaultdict(list)
    for transaction in transactions:
        if wanted is None or transaction.account in wanted:
            by_account[transaction.account].append(transaction)

    targets = wanted if wanted is not None else set(by_account)
    return {
        account: AccountTimeline.from_transactions(account, by_account.get(account, ()))
        for account in sorted(targets)
    }
