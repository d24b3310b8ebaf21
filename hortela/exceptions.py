"""
Typed Exception Hierarchy for hortela.

===============================================================================
WHAT IS (AND IS NOT) AN EXCEPTION HERE
===============================================================================

Problems found in a ledger source file are *data*, not exceptions:

  - lexical errors   -> ``hortela.syntax.diagnostics.LexError`` records
  - syntax errors    -> ``hortela.syntax.diagnostics.ParseError`` records
  - failed checks    -> ``hortela.validation.trace.Trace`` records

``lex``, ``parse``, ``build_ledger`` and ``validate`` always return; they
never raise for a bad ledger. The exceptions below are raised when a caller
explicitly asks for a hard failure (``compile_source``,
``ValidationReport.raise_for_failures``) or when a value object is built
programmatically with invalid data.

Every class carries a ``code`` class attribute so callers can branch on the
type (or the code) instead of parsing messages.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    HortelaError (base)
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |   +-- CurrencyMismatchError
    |
    +-- AccountError
    |   +-- InvalidAccountError
    |
    +-- SourceError
    |   +-- SourceRejectedError
    |
    +-- ValidationError
    |   +-- ValidationFailedError
    |
    +-- ConfigError
        +-- InvalidConfigError
        +-- UnknownCheckError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code               | When Raised
-----------|--------------------|----------------------------------------------
Currency   | INVALID_CURRENCY   | Tag is not 3-5 uppercase ASCII letters
           | CURRENCY_MISMATCH  | Money arithmetic across different tags
-----------|--------------------|----------------------------------------------
Account    | INVALID_ACCOUNT    | Empty path or more than 3 segments
-----------|--------------------|----------------------------------------------
Source     | SOURCE_REJECTED    | compile_source() saw lex/parse diagnostics
-----------|--------------------|----------------------------------------------
Validation | VALIDATION_FAILED  | raise_for_failures() on a failing report
-----------|--------------------|----------------------------------------------
Config     | INVALID_CONFIG     | Malformed configuration mapping / file
           | UNKNOWN_CHECK      | Configuration names a check that does not exist
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hortela.validation.trace import Trace


class HortelaError(Exception):
    """
    Base exception for all hortela errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "HORTELA_ERROR"


# Currency-related exceptions


class CurrencyError(HortelaError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError):
    """Currency tag is not 3 to 5 uppercase ASCII letters."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Invalid currency tag: {currency!r}")


class CurrencyMismatchError(CurrencyError):
    """Arithmetic attempted between Money values of different currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, left: str, right: str, operation: str):
        self.left = left
        self.right = right
        self.operation = operation
        super().__init__(
            f"Cannot {operation} Money with different currencies: "
            f"{left} and {right}"
        )


# Account-related exceptions


class AccountError(HortelaError):
    """Base exception for account-related errors."""

    code: str = "ACCOUNT_ERROR"


class InvalidAccountError(AccountError):
    """Account path is empty, too deep, or contains an invalid segment."""

    code: str = "INVALID_ACCOUNT"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid account {path!r}: {reason}")


# Source-related exceptions


class SourceError(HortelaError):
    """Base exception for errors about a ledger source text."""

    code: str = "SOURCE_ERROR"


class SourceRejectedError(SourceError):
    """
    The source text produced lexical or syntax diagnostics.

    ``diagnostics`` holds every LexError/ParseError, in source order, so a
    renderer can report all of them at once.
    """

    code: str = "SOURCE_REJECTED"

    def __init__(self, source_name: str, diagnostics: Sequence[Any]):
        self.source_name = source_name
        self.diagnostics = tuple(diagnostics)
        super().__init__(
            f"{source_name}: {len(self.diagnostics)} error(s) while reading source"
        )


# Validation-related exceptions


class ValidationError(HortelaError):
    """Base exception for ledger validation errors."""

    code: str = "VALIDATION_ERROR"


class ValidationFailedError(ValidationError):
    """A validation check reported at least one trace."""

    code: str = "VALIDATION_FAILED"

    def __init__(self, check_name: str, traces: Sequence[Trace]):
        self.check_name = check_name
        self.traces = tuple(traces)
        super().__init__(
            f"Validation {check_name!r} failed with {len(self.traces)} trace(s)"
        )


# Configuration-related exceptions


class ConfigError(HortelaError):
    """Base exception for configuration errors."""

    code: str = "CONFIG_ERROR"


class InvalidConfigError(ConfigError):
    """Configuration mapping has a wrong type or an unknown key."""

    code: str = "INVALID_CONFIG"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration for {key!r}: {reason}")


class UnknownCheckError(ConfigError):
    """Configuration names a validation check that is not registered."""

    code: str = "UNKNOWN_CHECK"

    def __init__(self, check_key: str, available: Sequence[str]):
        self.check_key = check_key
        self.available = tuple(available)
        super().__init__(
            f"Unknown check {check_key!r}; available: {', '.join(self.available)}"
        )
