"""Validation engine: ledger checks and their structured results."""

from hortela.validation.checks import (
    check_balance_statements,
    check_credits_and_debits_balance,
    check_isolated_transactions_balance,
)
from hortela.validation.engine import (
    ALL_CHECKS,
    CHECKS_BY_KEY,
    ValidationCheck,
    resolve_checks,
    validate,
)
from hortela.validation.trace import CheckOutcome, Trace, ValidationReport

__all__ = [
    "ALL_CHECKS",
    "CHECKS_BY_KEY",
    "CheckOutcome",
    "Trace",
    "ValidationCheck",
    "ValidationReport",
    "check_balance_statements",
    "check_credits_and_debits_balance",
    "check_isolated_transactions_balance",
    "resolve_checks",
    "validate",
]
