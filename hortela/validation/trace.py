"""
Validation result records.

A check produces zero or more Trace records; zero means the check passed.
The engine wraps each check's traces in a CheckOutcome and collects the
outcomes into a ValidationReport. None of these types raise on their own --
``ValidationReport.raise_for_failures`` is the single opt-in way to turn a
failing report into an exception.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from hortela.domain.span import Span
from hortela.exceptions import ValidationFailedError


@dataclass(frozen=True, slots=True)
class Trace:
    """
    One validation failure, ready to be rendered against the source.

    ``span`` is None for ledger-wide failures (e.g. the global credit/debit
    total), which have no single place in the source to point at.
    """

    message: str
    details: str
    span: Span | None = None
    found: str | None = None
    expected: str | None = None


@dataclass(frozen=True, slots=True)
class CheckOutcome:
    """The result of running one named check."""

    name: str
    description: str
    traces: tuple[Trace, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.traces


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """
    Outcomes of every check that ran, in declared order.

    ``skipped`` lists checks that were selected but not run because an
    earlier check failed under fail-fast.
    """

    outcomes: tuple[CheckOutcome, ...]
    skipped: tuple[str, ...] = ()

    def __iter__(self) -> Iterator[CheckOutcome]:
        return iter(self.outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)

    @property
    def ok(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    @property
    def failures(self) -> tuple[CheckOutcome, ...]:
        return tuple(outcome for outcome in self.outcomes if not outcome.ok)

    @property
    def first_failure(self) -> CheckOutcome | None:
        failures = self.failures
        return failures[0] if failures else None

    @property
    def traces(self) -> tuple[Trace, ...]:
        return tuple(trace for outcome in self.outcomes for trace in outcome.traces)

    def outcome(self, name: str) -> CheckOutcome | None:
        for outcome in self.outcomes:
            if outcome.name == name:
                return outcome
        return None

    def raise_for_failures(self) -> None:
        """Raise ValidationFailedError for the first failing check, if any."""
        failure = self.first_failure
        if failure is not None:
            raise ValidationFailedError(failure.name, failure.traces)
