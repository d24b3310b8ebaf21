"""
Ledger builder -- fold spanned Operations into a Ledger.

A single id counter runs across every entity in source order:

    open         -> 1 AccountOpening              (1 id)
    balance      -> 1 BalanceVerification         (1 id)
    transaction  -> reserve 1 id as parent_id, then
                    1 Transaction per movement    (1 id each)

No validation happens here; construction always succeeds for parsed input.
"""

from __future__ import annotations

from collections.abc import Iterable
from itertools import count

from hortela.domain.operations import (
    BalanceAssertion,
    OpenAccount,
    Operation,
    TransactionStatement,
)
from hortela.domain.span import Spanned
from hortela.ledger.model import AccountOpening, BalanceVerification, Ledger, Transaction
from hortela.logging_config import get_logger

logger = get_logger("ledger.builder")


def build_ledger(operations: Iterable[Spanned[Operation]]) -> Ledger:
    """Flatten and label ``operations`` into an immutable Ledger."""
    ids = count(1)
    transactions: list[Transaction] = []
    verifications: list[BalanceVerification] = []
    openings: list[AccountOpening] = []

    for spanned in operations:
        operation, span = spanned.value, spanned.span

        if isinstance(operation, OpenAccount):
            openings.append(AccountOpening(
                id=next(ids),
                account=operation.account,
                date=operation.date,
                currency=operation.currency,
                span=span,
            ))
        elif isinstance(operation, BalanceAssertion):
            verifications.append(BalanceVerification(
                id=next(ids),
                account=operation.account,
                date=operation.date,
                amount=operation.amount,
                span=span,
            ))
        elif isinstance(operation, TransactionStatement):
            parent_id = next(ids)
            for movement in operation.movements:
                transactions.append(Transaction(
                    id=next(ids),
                    date=operation.date,
                    description=operation.description,
                    kind=movement.kind,
                    account=movement.account,
                    amount=movement.amount,
                    span=span,
                    parent_id=parent_id,
                ))
        else:
            raise TypeError(f"Unknown operation type: {type(operation).__name__}")

    ledger = Ledger(
        transactions=tuple(transactions),
        verifications=tuple(verifications),
        openings=tuple(openings),
    )
    logger.debug(
        "ledger_built",
        extra={
            "transaction_count": len(ledger.transactions),
            "verification_count": len(ledger.verifications),
            "opening_count": len(ledger.openings),
        },
    )
    return ledger
