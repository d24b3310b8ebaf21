"""Ledger model, builder and running-balance timelines."""

from hortela.ledger.builder import build_ledger
from hortela.ledger.model import AccountOpening, BalanceVerification, Ledger, Transaction
from hortela.ledger.timeline import AccountTimeline, build_timelines

__all__ = [
    "AccountOpening",
    "AccountTimeline",
    "BalanceVerification",
    "Ledger",
    "Transaction",
    "build_ledger",
    "build_timelines",
]
