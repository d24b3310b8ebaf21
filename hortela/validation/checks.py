"""
Ledger checks -- pure functions from a Ledger to Trace records.

Three independent notions of "balanced":

    credits_debits_balance
        Gross, unsigned: the sum of all credit amounts equals the sum of all
        debit amounts across the whole ledger.

    isolated_transactions_balance
        Per source statement: the movements sharing a parent_id sum to zero
        when credits count positive and debits negative.

    balance_statements
        Per balance assertion: the account's running natural balance
        (Transaction.signed_amount) up to and including the assertion date
        equals the asserted amount, compared as exact rationals.

Each function returns an empty tuple when the ledger passes. None of them
raise for a bad ledger and none of them mutate it.

Amounts tagged with different currencies are aggregated as plain numbers;
when that happens a ``mixed_currency_aggregation`` warning is logged and the
trace details name the currencies involved.
"""

from __future__ import annotations

from collections.abc import Iterable
from fractions import Fraction

from hortela.domain.span import Span
from hortela.domain.values import Currency, format_amount
from hortela.ledger.model import Ledger, Transaction
from hortela.ledger.timeline import build_timelines
from hortela.logging_config import get_logger
from hortela.validation.trace import Trace

logger = get_logger("validation.checks")


def _currency_note(currencies: Iterable[Currency]) -> str:
    codes = sorted(c.code for c in currencies)
    if len(codes) < 2:
        return ""
    return f" Amounts in {', '.join(codes)} were summed together without conversion."


def check_credits_and_debits_balance(ledger: Ledger) -> tuple[Trace, ...]:
    """Gross credit total must equal gross debit total."""
    credit_sum = sum((t.amount.amount for t in ledger.credits()), Fraction(0))
    debit_sum = sum((t.amount.amount for t in ledger.debits()), Fraction(0))

    if credit_sum == debit_sum:
        return ()

    currencies = {t.currency for t in ledger.transactions}
    return (
        Trace(
            message="Budget does not balance",
            details=(
                "In a double-entry accounting system, all credits and debits "
                "should balance in the end." + _currency_note(currencies)
            ),
            span=None,
            found=format_amount(credit_sum - debit_sum),
            expected="0",
        ),
    )


def _group_trace(parent_id: int, group: tuple[Transaction, ...]) -> Trace | None:
    currencies = {t.currency for t in group}
    if len(currencies) > 1:
        logger.warning(
            "mixed_currency_aggregation",
            extra={"parent_id": parent_id, "currencies": sorted(c.code for c in currencies)},
        )

    total = sum((t.entry_amount for t in group), Fraction(0))
    if total == 0:
        return None
    return Trace(
        message="Transaction does not balance",
        details=(
            "Inside a transaction, all debits and credits must balance in the end."
            + _currency_note(currencies)
        ),
        span=Span.covering(t.span for t in group),
        found=format_amount(total),
        expected="0",
    )


def check_isolated_transactions_balance(ledger: Ledger) -> tuple[Trace, ...]:
    """Every transaction statement's movements must net to zero."""
    traces: list[Trace] = []
    for parent_id, group in ledger.groups().items():
        trace = _group_trace(parent_id, group)
        if trace is not None:
            traces.append(trace)
    return tuple(traces)


def check_balance_statements(ledger: Ledger) -> tuple[Trace, ...]:
    """Every balance assertion must match the running balance on its date."""
    if not ledger.verifications:
        return ()

    verified = {v.account for v in ledger.verifications}
    timelines = build_timelines(ledger.transactions, accounts=verified)

    traces: list[Trace] = []
    for verification in ledger.verifications:
        timeline = timelines[verification.account]
        balance = timeline.balance_on(verification.date)

        currencies = timeline.currencies | {verification.amount.currency}
        if len(currencies) > 1:
            logger.warning(
                "mixed_currency_aggregation",
                extra={
                    "account": verification.account.path,
                    "currencies": sorted(c.code for c in currencies),
                },
            )

        if balance == verification.amount.amount:
            continue

        traces.append(Trace(
            message="Balance statement does not match",
            details=(
                f"The balance of {verification.account} including every "
                f"transaction up to {verification.date.isoformat()} differs "
                "from the asserted amount." + _currency_note(currencies)
            ),
            span=verification.span,
            found=f"{format_amount(balance)} {verification.amount.currency}",
            expected=str(verification.amount),
        ))
    return tuple(traces)
