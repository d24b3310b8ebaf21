"""
Values -- Immutable, self-validating monetary value objects.

Responsibility:
    Provides Currency and Money, the value types used wherever an amount
    appears: token payloads, movements, ledger entries, validation traces.

Architecture position:
    Domain -- pure functional core, zero I/O. Imported by every other
    module; depends only on hortela.exceptions.

Invariants enforced:
    - Amounts are ``fractions.Fraction`` (arbitrary-precision numerator and
      denominator), never float. Summing any number of decimal literals is
      exact; ``0.1 + 0.1 + 0.1 == 3/10`` holds without an epsilon.
    - Currency tags are 3-5 uppercase ASCII letters. No registry lookup is
      performed and no conversion ever happens.
    - Money arithmetic refuses to mix currencies (CurrencyMismatchError).
      Code that deliberately aggregates across currencies works on the raw
      ``amount`` instead and says so.

Failure modes:
    - InvalidCurrencyError on a malformed tag.
    - TypeError when an amount is a float or a non-numeric object.
    - CurrencyMismatchError on cross-currency add/subtract.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from fractions import Fraction

from hortela.exceptions import CurrencyMismatchError, InvalidCurrencyError

_CURRENCY_RE = re.compile(r"[A-Z]{3,5}")
_DECIMAL_RE = re.compile(r"(-?)([0-9]+)(?:\.([0-9]+))?")

# int <-> str conversions above sys.get_int_max_str_digits() raise ValueError,
# so long digit strings are split until every piece fits under this size.
_DIGIT_CHUNK = 1000
_CHUNK_LIMIT = 10**_DIGIT_CHUNK


def _int_from_digits(digits: str) -> int:
    """int(digits) for a run of ASCII digits of any length."""
    if len(digits) <= _DIGIT_CHUNK:
        return int(digits)
    split = len(digits) // 2
    high, low = digits[:split], digits[split:]
    return _int_from_digits(high) * 10 ** len(low) + _int_from_digits(low)


def _digits_of(value: int) -> str:
    """str(value) for a non-negative int of any size."""
    if value < _CHUNK_LIMIT:
        return str(value)
    # bit_length * 3 // 10 never overestimates the digit count
    half = value.bit_length() * 3 // 20
    high, low = divmod(value, 10**half)
    return _digits_of(high) + _digits_of(low).rjust(half, "0")


def _signed_digits(value: int) -> str:
    return f"-{_digits_of(-value)}" if value < 0 else _digits_of(value)


def parse_decimal(literal: str) -> Fraction:
    """
    Exact value of a decimal literal such as ``100``, ``-0.5`` or ``200.01``.

    Unlike ``Fraction(literal)`` this accepts any number of digits.
    """
    match = _DECIMAL_RE.fullmatch(literal)
    if match is None:
        raise ValueError(f"not a decimal literal: {literal[:40]!r}")
    sign, whole, places = match.group(1), match.group(2), match.group(3) or ""
    value = Fraction(_int_from_digits(whole + places), 10 ** len(places))
    return -value if sign else value


def to_fraction(value: Fraction | int | str) -> Fraction:
    """
    Convert an int, decimal string or Fraction into an exact Fraction.

    Floats are rejected: ``Fraction(0.1)`` is not one tenth.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"amount must be Fraction, int or str, not {type(value).__name__}")
    if isinstance(value, Fraction):
        return value
    if isinstance(value, str) and _DECIMAL_RE.fullmatch(value):
        return parse_decimal(value)
    if isinstance(value, (int, str)):
        return Fraction(value)
    raise TypeError(f"amount must be Fraction, int or str, not {type(value).__name__}")


def format_amount(amount: Fraction) -> str:
    """
    Render a rational without losing precision.

    Terminating decimals are written in plain decimal notation with no
    trailing zeros (``1``, ``-0.5``, ``200.01``); anything else falls back
    to ``numerator/denominator``.
    """
    amount = Fraction(amount)
    denominator = amount.denominator
    twos = fives = 0
    while denominator % 2 == 0:
        denominator //= 2
        twos += 1
    while denominator % 5 == 0:
        denominator //= 5
        fives += 1
    if denominator != 1:
        return f"{_signed_digits(amount.numerator)}/{_digits_of(amount.denominator)}"

    places = max(twos, fives)
    scaled = abs(amount.numerator) * (10**places // amount.denominator)
    sign = "-" if amount < 0 else ""
    if places == 0:
        return f"{sign}{_digits_of(scaled)}"
    digits = _digits_of(scaled).rjust(places + 1, "0")
    whole, fraction = digits[:-places], digits[-places:].rstrip("0")
    return f"{sign}{whole}.{fraction}" if fraction else f"{sign}{whole}"


@dataclass(frozen=True, slots=True)
class Currency:
    """
    Currency tag value object.

    Any 3-5 letter uppercase tag is accepted (``BRL``, ``USD``, ``BTC``,
    ``USDT``). Tags are labels only; hortela never converts between them.
    """

    code: str

    def __post_init__(self) -> None:
        if not isinstance(self.code, str) or not _CURRENCY_RE.fullmatch(self.code):
            raise InvalidCurrencyError(str(self.code))

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Pairs an exact rational amount with its Currency. Equality compares
        the reduced fraction (``Fraction`` is always in lowest terms) and the
        currency tag, so ``Money.of("1.50", "BRL") == Money.of("1.5", "BRL")``.

    Non-goals:
        - Does NOT round. There is no precision per currency.
        - Does NOT convert between currencies.
    """

    amount: Fraction
    currency: Currency

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_fraction(self.amount))
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be Currency or str, got {type(self.currency)}")

    @classmethod
    def of(cls, amount: Fraction | int | str, currency: str | Currency) -> Money:
        """Factory accepting decimal strings, ints and Fractions."""
        return cls(amount=to_fraction(amount), currency=currency)

    @classmethod
    def zero(cls, currency: str | Currency) -> Money:
        """Create a zero amount in the given currency."""
        return cls(amount=Fraction(0), currency=currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def _check_currency(self, other: Money, operation: str) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                self.currency.code, other.currency.code, operation
            )

    def __add__(self, other: Money) -> Money:
        """Add two Money values. Must be same currency."""
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "add")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        """Subtract two Money values. Must be same currency."""
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "subtract")
        return Money(self.amount - other.amount, self.currency)

    def __neg__(self) -> Money:
        return Money(-self.amount, self.currency)

    def __abs__(self) -> Money:
        return Money(abs(self.amount), self.currency)

    def __mul__(self, factor: int | Fraction) -> Money:
        """Multiply by an exact scalar."""
        if isinstance(factor, (bool, float)) or not isinstance(factor, (int, Fraction)):
            return NotImplemented
        return Money(self.amount * factor, self.currency)

    __rmul__ = __mul__

    def __str__(self) -> str:
        return f"{format_amount(self.amount)} {self.currency.code}"

    def __repr__(self) -> str:
        return f"Money({format_amount(self.amount)!r}, {self.currency.code!r})"
