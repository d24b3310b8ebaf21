"""
Span -- half-open byte ranges into a ledger source text.

Every token, operation, ledger entry and diagnostic carries a Span so that a
renderer can point back at the exact bytes that produced it. Offsets index
``source.encode("utf-8")``, not the decoded ``str``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True, order=True)
class Span:
    """Half-open byte range ``[start, end)``."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span: {self.start}..{self.end}")

    def __len__(self) -> int:
        return self.end - self.start

    def union(self, other: Span) -> Span:
        """Smallest span covering both spans."""
        return Span(min(self.start, other.start), max(self.end, other.end))

    @classmethod
    def covering(cls, spans: Iterable[Span]) -> Span:
        """Union of min start and max end over ``spans`` (must be non-empty)."""
        spans = list(spans)
        if not spans:
            raise ValueError("covering() requires at least one span")
        return cls(
            min(span.start for span in spans),
            max(span.end for span in spans),
        )

    def slice(self, source: str) -> str:
        """Return the source text covered by this span."""
        return source.encode("utf-8")[self.start:self.end].decode(
            "utf-8", errors="replace"
        )

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"


@dataclass(frozen=True, slots=True)
class Spanned(Generic[T]):
    """A value paired with the span of source text it was read from."""

    value: T
    span: Span
