"""
Validation engine -- runs the registered checks in declared order.

The registry (``ALL_CHECKS``) fixes the order. Callers may select a subset
by key; the subset still runs in registry order. By default every selected
check runs even if an earlier one failed; ``fail_fast=True`` stops after the
first failing check, which is how the command line reports problems.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from types import MappingProxyType

from hortela.exceptions import UnknownCheckError
from hortela.ledger.model import Ledger
from hortela.logging_config import LogContext, get_logger
from hortela.validation.checks import (
    check_balance_statements,
    check_credits_and_debits_balance,
    check_isolated_transactions_balance,
)
from hortela.validation.trace import CheckOutcome, Trace, ValidationReport

logger = get_logger("validation.engine")


@dataclass(frozen=True, slots=True)
class ValidationCheck:
    key: str
    description: str
    run: Callable[[Ledger], tuple[Trace, ...]]


ALL_CHECKS: tuple[ValidationCheck, ...] = (
    ValidationCheck(
        "credits_debits_balance",
        "validate that credits and debits balance",
        check_credits_and_debits_balance,
    ),
    ValidationCheck(
        "isolated_transactions_balance",
        "validate that all isolated transactions are properly balanced",
        check_isolated_transactions_balance,
    ),
    ValidationCheck(
        "balance_statements",
        "validate that all balance statements are correct",
        check_balance_statements,
    ),
)

CHECKS_BY_KEY = MappingProxyType({check.key: check for check in ALL_CHECKS})


def resolve_checks(keys: Iterable[str] | None = None) -> tuple[ValidationCheck, ...]:
    """
    Map check keys to registered checks, in registry order.

    Raises:
        UnknownCheckError: if a key is not registered.
    """
    if keys is None:
        return ALL_CHECKS
    wanted = set()
    for key in keys:
        if key not in CHECKS_BY_KEY:
            raise UnknownCheckError(key, tuple(CHECKS_BY_KEY))
        wanted.add(key)
    return tuple(check for check in ALL_CHECKS if check.key in wanted)


def _run_check(check: ValidationCheck, ledger: Ledger) -> CheckOutcome:
    with LogContext.bind(check_name=check.key):
        logger.debug("check_started")
        started = time.monotonic()
        traces = tuple(check.run(ledger))
        duration_ms = round((time.monotonic() - started) * 1000, 3)

        outcome = CheckOutcome(check.key, check.description, traces)
        if outcome.ok:
            logger.info("check_passed", extra={"duration_ms": duration_ms})
        else:
            logger.warning(
                "check_failed",
                extra={"trace_count": len(traces), "duration_ms": duration_ms},
            )
    return outcome


def validate(
    ledger: Ledger,
    *,
    checks: Iterable[str] | None = None,
    fail_fast: bool = False,
) -> ValidationReport:
    """
    Run checks over ``ledger`` and collect their outcomes.

    Args:
        ledger: The ledger to validate. Never mutated.
        checks: Keys of the checks to run (default: all registered checks).
        fail_fast: Stop after the first check that reports any trace.

    Returns:
        A ValidationReport. Failures are returned, never raised.
    """
    selected = resolve_checks(checks)
    outcomes: list[CheckOutcome] = []

    for check in selected:
        outcome = _run_check(check, ledger)
        outcomes.append(outcome)
        if fail_fast and not outcome.ok:
            break

    report = ValidationReport(
        outcomes=tuple(outcomes),
        skipped=tuple(check.key for check in selected[len(outcomes):]),
    )
    logger.info(
        "validation_completed",
        extra={
            "passed": report.ok,
            "checks_run": len(report.outcomes),
            "checks_skipped": len(report.skipped),
            "trace_count": len(report.traces),
        },
    )
    return report
