"""
Ledger check tests.

Verifies the three notions of "balanced":
- Global gross credit/debit totals
- Per-statement (isolated) balance with statement-covering spans
- Balance assertions against running balances, same-day inclusive
"""

import pytest

from hortela.domain.span import Span
from hortela.ledger.model import Ledger
from hortela.validation.checks import (
    check_balance_statements,
    check_credits_and_debits_balance,
    check_isolated_transactions_balance,
)

UNBALANCED = '2020-01-01 transaction "x"\n< 100 BRL assets:a\n> 99 BRL equity:b'

RECONCILIATION = (
    "2020-01-01 open assets:cash BRL\n"
    '2020-01-01 transaction "Opening"\n'
    "< 100 BRL assets:cash\n"
    "> 100 BRL equity:open\n"
)


class TestEmptyLedger:

    @pytest.mark.parametrize(
        "check",
        [
            check_credits_and_debits_balance,
            check_isolated_transactions_balance,
            check_balance_statements,
        ],
    )
    def test_passes_trivially(self, check):
        assert check(Ledger()) == ()


class TestCreditsAndDebitsBalance:

    def test_balanced_household(self, ledger_from, household_source):
        assert check_credits_and_debits_balance(ledger_from(household_source)) == ()

    def test_unbalanced(self, ledger_from):
        (trace,) = check_credits_and_debits_balance(ledger_from(UNBALANCED))
        assert trace.message == "Budget does not balance"
        assert trace.span is None
        assert trace.found == "-1"
        assert trace.expected == "0"

    def test_gross_totals_ignore_account_kind(self, ledger_from):
        # Two debits against assets and expenses, two credits elsewhere:
        # gross totals match even though no statement pairs them up.
        ledger = ledger_from(
            '2020-01-01 transaction "a"\n< 10 BRL assets:a\n'
            '2020-01-02 transaction "b"\n> 10 BRL income:b\n'
        )
        assert check_credits_and_debits_balance(ledger) == ()

    def test_exact_decimal_sum(self, ledger_from):
        ledger = ledger_from(
            '2020-01-01 transaction "x"\n'
            "< 0.1 BRL assets:a\n< 0.1 BRL assets:a\n< 0.1 BRL assets:a\n"
            "> 0.3 BRL equity:b\n"
        )
        assert check_credits_and_debits_balance(ledger) == ()

    def test_mixed_currency_details(self, ledger_from):
        ledger = ledger_from(
            '2020-01-01 transaction "x"\n< 10 BRL assets:a\n> 9 USD equity:b\n'
        )
        (trace,) = check_credits_and_debits_balance(ledger)
        assert "BRL, USD" in trace.details


class TestIsolatedTransactionsBalance:

    def test_unbalanced_legs(self, ledger_from):
        (trace,) = check_isolated_transactions_balance(ledger_from(UNBALANCED))
        assert trace.message == "Transaction does not balance"
        assert trace.found == "-1"
        assert trace.expected == "0"
        assert trace.span == Span(0, len(UNBALANCED))
        assert trace.span.slice(UNBALANCED).endswith("> 99 BRL equity:b")

    def test_one_trace_per_unbalanced_group(self, ledger_from, household_source):
        source = household_source + UNBALANCED.replace('"x"', '"y"') + "\n" + UNBALANCED
        traces = check_isolated_transactions_balance(ledger_from(source))
        assert len(traces) == 2
        assert traces[0].span.start < traces[1].span.start

    def test_balanced_across_kinds(self, ledger_from):
        ledger = ledger_from(
            '2020-01-01 transaction "salary"\n< 50 BRL assets:bank\n> 50 BRL income:salary\n'
            '2020-01-02 transaction "card"\n< 20 BRL expenses:food\n> 20 BRL liabilities:card\n'
        )
        assert check_isolated_transactions_balance(ledger) == ()

    def test_globally_balanced_but_isolated_unbalanced(self, ledger_from):
        ledger = ledger_from(
            '2020-01-01 transaction "a"\n< 10 BRL assets:a\n'
            '2020-01-02 transaction "b"\n> 10 BRL income:b\n'
        )
        assert check_credits_and_debits_balance(ledger) == ()
        assert len(check_isolated_transactions_balance(ledger)) == 2

    def test_tiny_imbalance_reported_exactly(self, ledger_from):
        tiny = "0." + "0" * 4400 + "1"
        ledger = ledger_from(
            f'2020-01-01 transaction "dust"\n< 1 BRL assets:a\n> 1{tiny[1:]} BRL equity:b\n'
        )
        (trace,) = check_isolated_transactions_balance(ledger)
        assert trace.found == tiny
        (total,) = check_credits_and_debits_balance(ledger)
        assert total.found == tiny

    def test_mixed_currency_logged(self, ledger_from, captured_logs):
        ledger = ledger_from(
            '2020-01-01 transaction "fx"\n< 10 BRL assets:a\n> 10 USD equity:b\n'
        )
        assert check_isolated_transactions_balance(ledger) == ()
        warnings = [r for r in captured_logs() if r["message"] == "mixed_currency_aggregation"]
        assert warnings
        assert warnings[0]["currencies"] == ["BRL", "USD"]
        assert warnings[0]["level"] == "WARNING"


class TestBalanceStatements:

    def test_balance_after_same_day_passes(self, ledger_from):
        ledger = ledger_from(RECONCILIATION + "2020-01-02 balance assets:cash 100 BRL\n")
        assert check_balance_statements(ledger) == ()

    def test_same_day_transaction_counts(self, ledger_from):
        source = RECONCILIATION + "2020-01-01 balance assets:cash 0 BRL\n"
        ledger = ledger_from(source)
        (trace,) = check_balance_statements(ledger)
        assert trace.message == "Balance statement does not match"
        assert trace.found == "100 BRL"
        assert trace.expected == "0 BRL"
        assert trace.span.slice(source) == "2020-01-01 balance assets:cash 0 BRL"

    def test_cumulative_not_per_period(self, ledger_from):
        source = (
            RECONCILIATION
            + '2020-02-01 transaction "Lunch"\n< 25 BRL expenses:food\n> 25 BRL assets:cash\n'
            + "2020-01-31 balance assets:cash 100 BRL\n"
            + "2020-02-01 balance assets:cash 75 BRL\n"
            + "2020-12-31 balance assets:cash 75 BRL\n"
        )
        assert check_balance_statements(ledger_from(source)) == ()

    def test_each_wrong_assertion_reported(self, ledger_from):
        source = (
            RECONCILIATION
            + "2020-01-02 balance assets:cash 99 BRL\n"
            + "2020-01-03 balance assets:cash 101 BRL\n"
            + "2020-01-04 balance assets:cash 100 BRL\n"
        )
        traces = check_balance_statements(ledger_from(source))
        assert [t.expected for t in traces] == ["99 BRL", "101 BRL"]

    def test_natural_balance_for_credit_kinds(self, ledger_from):
        source = RECONCILIATION + "2020-01-01 balance equity:open 100 BRL\n"
        assert check_balance_statements(ledger_from(source)) == ()

    def test_negative_assertion(self, ledger_from):
        source = (
            '2020-01-01 transaction "overdraft"\n< 5 BRL expenses:fees\n> 5 BRL assets:bank\n'
            "2020-01-01 balance assets:bank -5 BRL\n"
        )
        assert check_balance_statements(ledger_from(source)) == ()

    def test_account_without_transactions(self, ledger_from):
        source = "2020-01-01 open assets:bank BRL\n2020-01-02 balance assets:bank 0 BRL\n"
        assert check_balance_statements(ledger_from(source)) == ()

    def test_exact_rational_comparison(self, ledger_from):
        source = (
            '2020-01-01 transaction "x"\n'
            "< 0.1 BRL assets:a\n< 0.1 BRL assets:a\n< 0.1 BRL assets:a\n"
            "> 0.3 BRL equity:b\n"
            "2020-01-01 balance assets:a 0.3 BRL\n"
        )
        assert check_balance_statements(ledger_from(source)) == ()
