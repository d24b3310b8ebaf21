"""
Parser -- spanned tokens to spanned Operations.

Responsibility:
    Recursive-descent parser over the token stream produced by
    ``hortela.syntax.lexer.lex``. Each statement starts with a date literal
    and its kind is decided by the keyword that follows, so one token of
    lookahead after the date is enough; there is no backtracking.

Grammar:
    statement   := date [':'] ( open | balance | transaction )
    open        := 'open' account CURRENCY
    balance     := 'balance' account ['-'] NUMBER CURRENCY
    transaction := 'transaction' STRING movement+
    movement    := ('<' | '>') NUMBER CURRENCY account
    account     := kind ':' IDENT (':' IDENT)*      -- at most 3 segments
    date        := NUMBER '-' NUMBER '-' NUMBER      -- calendar-checked

Invariants enforced:
    - Every production's span is the union of its constituent spans.
    - Dates are built with ``datetime.date``; an in-range but impossible
      combination (2021-02-30) is rejected.
    - A malformed statement never aborts the file: one ParseError is
      recorded and tokens are skipped up to the next date literal.
    - No statements at all (empty file, only comments) is a valid, empty
      result.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from hortela.domain.account import MAX_SEGMENTS, Account, AccountKind, MovementKind
from hortela.domain.operations import (
    BalanceAssertion,
    Movement,
    OpenAccount,
    Operation,
    TransactionStatement,
)
from hortela.domain.span import Span, Spanned
from hortela.domain.values import Currency, Money
from hortela.logging_config import get_logger
from hortela.syntax.diagnostics import ParseError
from hortela.syntax.tokens import Token, TokenKind

logger = get_logger("syntax.parser")

YEAR_RANGE = (1000, 3000)
MONTH_RANGE = (1, 12)
DAY_RANGE = (1, 31)

SEGMENT_LIMIT_MESSAGE = (
    f"accounts may contain at most {MAX_SEGMENTS} segments beyond their kind."
)

_KINDS = ", ".join(kind.value for kind in AccountKind)


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Every statement that parsed, plus every statement that did not."""

    operations: tuple[Spanned[Operation], ...]
    errors: tuple[ParseError, ...]

    @property
    def ok(self) -> bool:
        return not self.errors


class _Reject(Exception):
    """Aborts the current statement; caught by the statement loop."""

    def __init__(self, error: ParseError):
        self.error = error
        super().__init__(error.message)


class _Parser:
    def __init__(self, tokens: Iterable[Spanned[Token]]):
        self._tokens = [t for t in tokens if t.value.kind is not TokenKind.COMMENT]
        self._pos = 0

    # -----------------------------------------------------------------
    # Cursor
    # -----------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Spanned[Token] | None:
        index = self._pos + offset
        if index < len(self._tokens):
            return self._tokens[index]
        return None

    def _at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def _advance(self) -> Spanned[Token]:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _end_span(self) -> Span:
        if not self._tokens:
            return Span(0, 0)
        end = self._tokens[-1].span.end
        return Span(end, end)

    def _fail(
        self,
        message: str,
        *,
        expected: str | None = None,
        token: Spanned[Token] | None = None,
        span: Span | None = None,
        found: str | None = None,
    ) -> _Reject:
        if span is None:
            span = token.span if token is not None else self._end_span()
        if found is None:
            found = token.value.describe() if token is not None else "end of input"
        return _Reject(ParseError(span=span, message=message, found=found, expected=expected))

    def _expect(self, kind: TokenKind, expected: str) -> Spanned[Token]:
        token = self._peek()
        if token is None:
            raise self._fail(f"unexpected end of input, expected {expected}", expected=expected)
        if token.value.kind is not kind:
            raise self._fail(f"expected {expected}", expected=expected, token=token)
        return self._advance()

    def _expect_separator(self, symbol: str, expected: str) -> Spanned[Token]:
        token = self._peek()
        if token is None or not token.value.is_separator(symbol):
            message = f"expected {expected}"
            if token is None:
                message = f"unexpected end of input, expected {expected}"
            raise self._fail(message, expected=f"'{symbol}'", token=token)
        return self._advance()

    def _next_is_separator(self, symbol: str) -> bool:
        token = self._peek()
        return token is not None and token.value.is_separator(symbol)

    def _at_statement_start(self) -> bool:
        """A statement starts with ``INT '-' NUMBER '-' NUMBER``."""
        window = [self._peek(i) for i in range(5)]
        if any(token is None for token in window):
            return False
        year, dash1, month, dash2, day = (token.value for token in window)
        return (
            year.is_integer_literal
            and dash1.is_separator("-")
            and month.kind is TokenKind.NUMBER
            and dash2.is_separator("-")
            and day.kind is TokenKind.NUMBER
        )

    def _synchronize(self, statement_start: int) -> None:
        self._pos = statement_start + 1
        while not self._at_end() and not self._at_statement_start():
            self._pos += 1

    # -----------------------------------------------------------------
    # Entry point
    # -----------------------------------------------------------------

    def parse(self) -> ParseResult:
        operations: list[Spanned[Operation]] = []
        errors: list[ParseError] = []

        while not self._at_end():
            start = self._pos
            try:
                operations.append(self._statement())
            except _Reject as reject:
                logger.debug(
                    "parse_error",
                    extra={
                        "span_start": reject.error.span.start,
                        "span_end": reject.error.span.end,
                        "error_message": reject.error.message,
                    },
                )
                errors.append(reject.error)
                self._synchronize(start)

        return ParseResult(operations=tuple(operations), errors=tuple(errors))

    # -----------------------------------------------------------------
    # Statements
    # -----------------------------------------------------------------

    def _statement(self) -> Spanned[Operation]:
        when = self._date()
        if self._next_is_separator(":"):
            self._advance()

        keyword = self._expect(TokenKind.IDENTIFIER, "a statement keyword")
        name = keyword.value.value
        if name == "open":
            return self._open(when)
        if name == "balance":
            return self._balance(when)
        if name == "transaction":
            return self._transaction(when)
        raise self._fail(
            f"unknown statement keyword {name!r}",
            expected="open, balance or transaction",
            token=keyword,
        )

    def _open(self, when: Spanned[date]) -> Spanned[Operation]:
        account = self._account()
        currency = self._expect(TokenKind.CURRENCY, "a currency (3 to 5 uppercase letters)")
        return Spanned(
            OpenAccount(when.value, account.value, Currency(currency.value.value)),
            when.span.union(currency.span),
        )

    def _balance(self, when: Spanned[date]) -> Spanned[Operation]:
        account = self._account()
        amount = self._amount(signed=True)
        return Spanned(
            BalanceAssertion(when.value, account.value, amount.value),
            when.span.union(amount.span),
        )

    def _transaction(self, when: Spanned[date]) -> Spanned[Operation]:
        description = self._expect(TokenKind.STRING, "a quoted description")
        movements: list[Spanned[Movement]] = []
        while (token := self._peek()) is not None and token.value.kind is TokenKind.MOVEMENT:
            movements.append(self._movement())

        if not movements:
            raise self._fail(
                "transactions require at least one movement",
                expected="a movement line starting with '<' or '>'",
                token=self._peek(),
            )

        return Spanned(
            TransactionStatement(
                when.value,
                description.value.value,
                tuple(m.value for m in movements),
            ),
            Span.covering([when.span, description.span, *(m.span for m in movements)]),
        )

    # -----------------------------------------------------------------
    # Sub-productions
    # -----------------------------------------------------------------

    def _movement(self) -> Spanned[Movement]:
        arrow = self._advance()
        kind = MovementKind.from_symbol(arrow.value.value)
        amount = self._amount(signed=False)
        account = self._account()
        return Spanned(
            Movement(kind, amount.value, account.value),
            arrow.span.union(account.span),
        )

    def _amount(self, *, signed: bool) -> Spanned[Money]:
        sign: Spanned[Token] | None = None
        if self._next_is_separator("-"):
            if not signed:
                raise self._fail(
                    "movement amounts may not be negative",
                    expected="an unsigned amount",
                    token=self._peek(),
                )
            sign = self._advance()

        number = self._expect(TokenKind.NUMBER, "an amount")
        currency = self._expect(TokenKind.CURRENCY, "a currency (3 to 5 uppercase letters)")
        value = -number.value.value if sign is not None else number.value.value
        start = sign.span if sign is not None else number.span
        return Spanned(Money(value, Currency(currency.value.value)), start.union(currency.span))

    def _account(self) -> Spanned[Account]:
        head = self._expect(TokenKind.IDENTIFIER, "an account")
        kind = AccountKind.from_keyword(head.value.value)
        if kind is None:
            raise self._fail(
                f"unknown account kind {head.value.value!r}",
                expected=_KINDS,
                token=head,
            )
        self._expect_separator(":", "':' after the account kind")

        segments = [self._expect(TokenKind.IDENTIFIER, "an account segment")]
        while self._next_is_separator(":"):
            self._advance()
            segments.append(self._expect(TokenKind.IDENTIFIER, "an account segment"))

        span = head.span.union(segments[-1].span)
        names = tuple(segment.value.value for segment in segments)
        if len(names) > MAX_SEGMENTS:
            raise self._fail(
                SEGMENT_LIMIT_MESSAGE,
                expected=f"at most {MAX_SEGMENTS} segments",
                found=":".join((kind.value, *names)),
                span=span,
            )
        return Spanned(Account(kind, names), span)

    def _date(self) -> Spanned[date]:
        year = self._expect(TokenKind.NUMBER, "a date (YYYY-MM-DD)")
        self._expect_separator("-", "'-' between date components")
        month = self._expect(TokenKind.NUMBER, "a month")
        self._expect_separator("-", "'-' between date components")
        day = self._expect(TokenKind.NUMBER, "a day")
        span = year.span.union(day.span)

        for token, name, (low, high) in (
            (year, "year", YEAR_RANGE),
            (month, "month", MONTH_RANGE),
            (day, "day", DAY_RANGE),
        ):
            if not token.value.is_integer_literal or not low <= token.value.value <= high:
                raise self._fail(
                    f"{name} {token.value.text} is not valid",
                    expected=f"a {name} between {low} and {high}",
                    found=token.value.text,
                    span=token.span,
                )

        text = f"{year.value.text}-{month.value.text}-{day.value.text}"
        try:
            value = date(int(year.value.value), int(month.value.value), int(day.value.value))
        except ValueError:
            raise self._fail(
                f"{text} is not a valid calendar date",
                expected="a date that exists in the calendar",
                found=text,
                span=span,
            ) from None
        return Spanned(value, span)


def parse(tokens: Iterable[Spanned[Token]]) -> ParseResult:
    """
    Parse a token stream into spanned Operations.

    Never raises for malformed input; see ``ParseResult.errors``.
    """
    result = _Parser(tokens).parse()
    logger.debug(
        "parse_completed",
        extra={
            "operation_count": len(result.operations),
            "error_count": len(result.errors),
        },
    )
    return result
