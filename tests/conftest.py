"""
Pytest fixtures for the hortela test suite.

Provides:
- Structured logging configured for the whole session
- ``captured_logs`` for asserting on JSON log records
- Small builders for accounts, money and ledgers from source text
"""

import json
import logging
from io import StringIO

import pytest

from hortela.domain.account import Account
from hortela.domain.values import Money
from hortela.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from hortela.pipeline import compile_source


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture hortela logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            validate(ledger)
            logs = captured_logs()
            assert any(r["message"] == "check_passed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("hortela")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Domain builders
# =============================================================================


@pytest.fixture
def account():
    """``account("assets:cash")`` -> Account."""
    return Account.parse


@pytest.fixture
def brl():
    """``brl("10.50")`` -> Money in BRL."""

    def _brl(amount):
        return Money.of(amount, "BRL")

    return _brl


@pytest.fixture
def ledger_from():
    """Compile source text into a Ledger, failing the test on any diagnostic."""

    def _compile(source: str):
        return compile_source(source, source_name="test.hta")

    return _compile


OPENING_SOURCE = """\
// A small household ledger
2020-01-01 open assets:cash BRL
2020-01-01 open equity:opening BRL
2020-01-01 open expenses:food BRL

2020-01-01 transaction "Opening balance"
< 100 BRL assets:cash
> 100 BRL equity:opening

2020-01-05 transaction "Groceries"
< 30.25 BRL expenses:food
> 30.25 BRL assets:cash

2020-01-05 balance assets:cash 69.75 BRL
2020-01-31 balance expenses:food 30.25 BRL
"""


@pytest.fixture
def household_source() -> str:
    return OPENING_SOURCE
