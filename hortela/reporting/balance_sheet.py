"""
Balance report -- per-account and per-kind totals.

Responsibility:
    Summarizes a validated Ledger: for each account, gross debit and credit
    totals and the natural (signed) balance; for each account kind, the sum
    of its accounts. With ``as_of`` set, only transactions dated on or before
    that day count, which matches the running-balance semantics of the
    balance-statement check.

Architecture position:
    Reporting -- pure, read-only over the Ledger. Formatting to text lives
    in ``format_balance_sheet``; the CLI only prints its output.

Accounts that were opened but never moved appear with zero totals. Amounts
in different currencies are aggregated as plain numbers (no conversion);
``AccountBalance.currencies`` lists the tags involved.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from fractions import Fraction

from hortela.domain.account import Account, AccountKind
from hortela.domain.values import Currency, format_amount
from hortela.ledger.model import Ledger, Transaction


@dataclass(frozen=True, slots=True)
class AccountBalance:
    account: Account
    currencies: tuple[Currency, ...]
    debit_total: Fraction
    credit_total: Fraction
    balance: Fraction

    @property
    def kind(self) -> AccountKind:
        return self.account.kind


@dataclass(frozen=True, slots=True)
class KindTotal:
    kind: AccountKind
    debit_total: Fraction
    credit_total: Fraction
    balance: Fraction


@dataclass(frozen=True, slots=True)
class BalanceSheet:
    as_of: date | None
    accounts: tuple[AccountBalance, ...]
    kinds: tuple[KindTotal, ...]

    def for_account(self, account: Account) -> AccountBalance | None:
        for row in self.accounts:
            if row.account == account:
                return row
        return None

    def for_kind(self, kind: AccountKind) -> KindTotal | None:
        for row in self.kinds:
            if row.kind is kind:
                return row
        return None


def _included(transaction: Transaction, as_of: date | None) -> bool:
    return as_of is None or transaction.date <= as_of


def build_balance_sheet(ledger: Ledger, as_of: date | None = None) -> BalanceSheet:
    """Aggregate ``ledger`` into account rows and kind totals."""
    debits: dict[Account, Fraction] = defaultdict(Fraction)
    credits: dict[Account, Fraction] = defaultdict(Fraction)
    balances: dict[Account, Fraction] = defaultdict(Fraction)
    currencies: dict[Account, set[Currency]] = defaultdict(set)

    for opening in ledger.openings:
        if as_of is None or opening.date <= as_of:
            currencies[opening.account].add(opening.currency)

    for transaction in ledger.transactions:
        if not _included(transaction, as_of):
            continue
        account = transaction.account
        if transaction.is_credit:
            credits[account] += transaction.amount.amount
        else:
            debits[account] += transaction.amount.amount
        balances[account] += transaction.signed_amount.amount
        currencies[account].add(transaction.currency)

    rows = tuple(
        AccountBalance(
            account=account,
            currencies=tuple(sorted(currencies[account], key=lambda c: c.code)),
            debit_total=debits[account],
            credit_total=credits[account],
            balance=balances[account],
        )
        for account in sorted(currencies)
    )

    kinds: list[KindTotal] = []
    for kind in AccountKind:
        members = [row for row in rows if row.kind is kind]
        if not members:
            continue
        kinds.append(KindTotal(
            kind=kind,
            debit_total=sum((r.debit_total for r in members), Fraction(0)),
            credit_total=sum((r.credit_total for r in members), Fraction(0)),
            balance=sum((r.balance for r in members), Fraction(0)),
        ))

    return BalanceSheet(as_of=as_of, accounts=rows, kinds=tuple(kinds))


def format_balance_sheet(sheet: BalanceSheet) -> str:
    """Render a BalanceSheet as a fixed-width text table."""
    header = ("account", "currency", "debits", "credits", "balance")
    lines: list[tuple[str, ...]] = [header]
    for row in sheet.accounts:
        lines.append((
            row.account.path,
            ",".join(c.code for c in row.currencies),
            format_amount(row.debit_total),
            format_amount(row.credit_total),
            format_amount(row.balance),
        ))
    for total in sheet.kinds:
        lines.append((
            f"[{total.kind.value}]",
            "",
            format_amount(total.debit_total),
            format_amount(total.credit_total),
            format_amount(total.balance),
        ))

    widths = [max(len(line[i]) for line in lines) for i in range(len(header))]
    rendered = []
    if sheet.as_of is not None:
        rendered.append(f"as of {sheet.as_of.isoformat()}")
    for line in lines:
        cells = [line[0].ljust(widths[0]), line[1].ljust(widths[1])]
        cells.extend(cell.rjust(width) for cell, width in zip(line[2:], widths[2:]))
        rendered.append("  ".join(cells).rstrip())
    return "\n".join(rendered)
