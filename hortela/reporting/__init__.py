"""Reports over a compiled ledger and renderers for diagnostics."""

from hortela.reporting.balance_sheet import (
    AccountBalance,
    BalanceSheet,
    KindTotal,
    build_balance_sheet,
    format_balance_sheet,
)
from hortela.reporting.diagnostics import locate, render, render_diagnostic

__all__ = [
    "AccountBalance",
    "BalanceSheet",
    "KindTotal",
    "build_balance_sheet",
    "format_balance_sheet",
    "locate",
    "render",
    "render_diagnostic",
]
