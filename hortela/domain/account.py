"""
Account -- account kinds, account paths and the sign-convention table.

An account is written ``kind:segment[:segment[:segment]]`` in source text,
e.g. ``assets:bank:checking``. The kind decides how debits and credits move
the account's natural balance; that mapping lives in a fixed table
(``_SIGNED_FACTORS``) and is never computed or mutated at runtime.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from hortela.exceptions import InvalidAccountError

MAX_SEGMENTS = 3

_SEGMENT_RE = re.compile(r"[a-z][a-z_]*")


class MovementKind(str, Enum):
    """Direction of one transaction leg: ``<`` is a debit, ``>`` a credit."""

    CREDIT = "credit"
    DEBIT = "debit"

    @classmethod
    def from_symbol(cls, symbol: str) -> MovementKind:
        if symbol == "<":
            return cls.DEBIT
        if symbol == ">":
            return cls.CREDIT
        raise ValueError(f"Unknown movement symbol: {symbol!r}")

    @property
    def symbol(self) -> str:
        return "<" if self is MovementKind.DEBIT else ">"


class AccountKind(str, Enum):
    """The five top-level account kinds, in declaration order."""

    ASSETS = "assets"
    LIABILITIES = "liabilities"
    INCOME = "income"
    EQUITY = "equity"
    EXPENSES = "expenses"

    @property
    def rank(self) -> int:
        return _KIND_ORDER[self]

    @classmethod
    def from_keyword(cls, keyword: str) -> AccountKind | None:
        """Return the kind spelled ``keyword`` or None."""
        try:
            return cls(keyword)
        except ValueError:
            return None


_KIND_ORDER = MappingProxyType({kind: i for i, kind in enumerate(AccountKind)})

# Natural-balance sign of a movement, by (account kind, movement kind).
# Assets and expenses grow with debits; the other kinds grow with credits.
_SIGNED_FACTORS: MappingProxyType[tuple[AccountKind, MovementKind], int] = MappingProxyType({
    (AccountKind.ASSETS, MovementKind.DEBIT): 1,
    (AccountKind.LIABILITIES, MovementKind.DEBIT): -1,
    (AccountKind.INCOME, MovementKind.DEBIT): -1,
    (AccountKind.EQUITY, MovementKind.DEBIT): -1,
    (AccountKind.EXPENSES, MovementKind.DEBIT): 1,
    (AccountKind.ASSETS, MovementKind.CREDIT): -1,
    (AccountKind.LIABILITIES, MovementKind.CREDIT): 1,
    (AccountKind.INCOME, MovementKind.CREDIT): 1,
    (AccountKind.EQUITY, MovementKind.CREDIT): 1,
    (AccountKind.EXPENSES, MovementKind.CREDIT): -1,
})


@dataclass(frozen=True, slots=True)
class Account:
    """
    Immutable account path.

    Guarantees:
        - 1 to MAX_SEGMENTS segments, each ``[a-z][a-z_]*``.
        - Hashable; usable as a dict key.
        - Ordered structurally: by kind (declaration order), then segments
          lexicographically.
    """

    kind: AccountKind
    segments: tuple[str, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.kind, AccountKind):
            kind = AccountKind.from_keyword(self.kind) if isinstance(self.kind, str) else None
            if kind is None:
                raise InvalidAccountError(str(self.kind), "unknown account kind")
            object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "segments", tuple(self.segments))

        path = self.path
        if not self.segments:
            raise InvalidAccountError(path, "an account needs at least one segment")
        if len(self.segments) > MAX_SEGMENTS:
            raise InvalidAccountError(
                path,
                f"accounts may contain at most {MAX_SEGMENTS} segments beyond their kind",
            )
        for segment in self.segments:
            if not _SEGMENT_RE.fullmatch(segment):
                raise InvalidAccountError(path, f"invalid segment {segment!r}")

    @classmethod
    def parse(cls, path: str) -> Account:
        """Build an Account from its printable path (``assets:cash``)."""
        kind, *segments = path.split(":")
        return cls(kind, tuple(segments))

    @property
    def path(self) -> str:
        return ":".join((self.kind.value, *self.segments))

    def signed_factor(self, movement_kind: MovementKind) -> int:
        """+1 or -1: how a movement of this kind moves the natural balance."""
        return _SIGNED_FACTORS[(self.kind, movement_kind)]

    def _sort_key(self) -> tuple[int, tuple[str, ...]]:
        return (self.kind.rank, self.segments)

    def __lt__(self, other: Account) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __le__(self, other: Account) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self._sort_key() <= other._sort_key()

    def __gt__(self, other: Account) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self._sort_key() > other._sort_key()

    def __ge__(self, other: Account) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self._sort_key() >= other._sort_key()

    def __str__(self) -> str:
        return self.path
