"""
Lexer tests.

Verifies:
- Token kinds and decoded payloads
- Byte-offset spans (including non-ASCII input)
- Error recovery: one LexError per unrecognized run, lexing continues
"""

from fractions import Fraction

from hortela.domain.span import Span
from hortela.syntax.lexer import lex
from hortela.syntax.tokens import Token, TokenKind


def _kinds(source: str) -> list[TokenKind]:
    return [t.value.kind for t in lex(source).tokens]


def _texts(source: str) -> list[str]:
    return [t.value.text for t in lex(source).tokens]


class TestTokenKinds:

    def test_empty_source(self):
        result = lex("")
        assert result.tokens == ()
        assert result.errors == ()
        assert result.ok

    def test_whitespace_only(self):
        assert lex("  \n\t\n").tokens == ()

    def test_open_statement(self):
        assert _kinds("2020-01-01 open assets:cash BRL") == [
            TokenKind.NUMBER,
            TokenKind.SEPARATOR,
            TokenKind.NUMBER,
            TokenKind.SEPARATOR,
            TokenKind.NUMBER,
            TokenKind.IDENTIFIER,
            TokenKind.IDENTIFIER,
            TokenKind.SEPARATOR,
            TokenKind.IDENTIFIER,
            TokenKind.CURRENCY,
        ]

    def test_movement_line(self):
        assert _texts('< 100.50 BRL expenses:food') == [
            "<", "100.50", "BRL", "expenses", ":", "food",
        ]

    def test_movement_symbols(self):
        tokens = lex("< >").tokens
        assert [t.value for t in tokens] == [Token.movement("<"), Token.movement(">")]

    def test_string_payload_unquoted(self):
        (token,) = lex('"Groceries at the market"').tokens
        assert token.value.kind is TokenKind.STRING
        assert token.value.value == "Groceries at the market"
        assert token.value.text == '"Groceries at the market"'

    def test_empty_string(self):
        (token,) = lex('""').tokens
        assert token.value == Token.string("")

    def test_number_is_exact_fraction(self):
        (token,) = lex("0.1").tokens
        assert token.value.value == Fraction(1, 10)
        assert not token.value.is_integer_literal

    def test_integer_literal(self):
        (token,) = lex("2020").tokens
        assert token.value.value == 2020
        assert token.value.is_integer_literal

    def test_currency_lengths(self):
        assert _kinds("BRL USDT ABCDE") == [TokenKind.CURRENCY] * 3

    def test_underscore_identifier(self):
        assert _texts("assets:bank_account") == ["assets", ":", "bank_account"]

    def test_comment_token(self):
        tokens = lex("// monthly budget\n2020").tokens
        assert tokens[0].value == Token.comment(" monthly budget")
        assert tokens[0].span == Span(0, 17)
        assert tokens[1].value.kind is TokenKind.NUMBER

    def test_trailing_comment_after_statement(self):
        assert _kinds("BRL // note")[-1] is TokenKind.COMMENT


class TestSpans:

    def test_spans_are_byte_offsets(self):
        tokens = lex("2020-01-01 open").tokens
        assert [t.span for t in tokens] == [
            Span(0, 4), Span(4, 5), Span(5, 7), Span(7, 8), Span(8, 10), Span(11, 15),
        ]

    def test_non_ascii_string_spans_bytes(self):
        source = '"Padaria São João" BRL'
        tokens = lex(source).tokens
        string_end = len('"Padaria São João"'.encode("utf-8"))
        assert tokens[0].span == Span(0, string_end)
        assert tokens[1].span == Span(string_end + 1, string_end + 4)

    def test_spans_strictly_increasing(self, household_source):
        spans = [t.span for t in lex(household_source).tokens]
        for previous, current in zip(spans, spans[1:]):
            assert previous.end <= current.start


class TestRecovery:

    def test_unrecognized_run_reported_once(self):
        result = lex("BRL @@@ USD")
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.span == Span(4, 7)
        assert error.found == "@@@"
        assert _kinds("BRL @@@ USD") == [TokenKind.CURRENCY, TokenKind.CURRENCY]

    def test_multiple_errors(self):
        result = lex("# BRL $")
        assert len(result.errors) == 2
        assert not result.ok

    def test_too_long_currency_is_error(self):
        result = lex("ABCDEF")
        assert result.errors
        assert result.errors[0].span.start == 0

    def test_unterminated_string(self):
        result = lex('2020 "no end')
        assert len(result.errors) == 1
        assert result.errors[0].message == "unterminated string"
        assert result.errors[0].span == Span(5, 6)
        # lexing resumes after the quote
        assert _texts('2020 "no end') == ["2020", "no", "end"]

    def test_error_code(self):
        assert lex("@").errors[0].code == "LEX_ERROR"

    def test_logs_completion(self, captured_logs):
        lex("2020 @")
        records = captured_logs()
        completed = [r for r in records if r["message"] == "lexing_completed"]
        assert completed[-1]["token_count"] == 1
        assert completed[-1]["error_count"] == 1
        assert any(r["message"] == "lex_error" for r in records)


class TestLongNumbers:
    """Literals longer than the interpreter's int/str conversion limit."""

    def test_long_fraction_lexes(self):
        source = "2020-01-01 balance assets:cash 0." + "1" * 5000 + " BRL"
        result = lex(source)
        assert result.ok
        amount = result.tokens[-2].value
        assert amount.kind is TokenKind.NUMBER
        assert amount.value.denominator == 10**5000
        assert amount.value == Fraction(10**5000 - 1, 9 * 10**5000)

    def test_tiny_amount_is_exact(self):
        (token,) = lex("0." + "0" * 4400 + "1").tokens
        assert token.value.value == Fraction(1, 10**4401)

    def test_long_integer_literal(self):
        (token,) = lex("9" * 5000).tokens
        assert token.value.value == 10**5000 - 1
        assert token.value.is_integer_literal
        assert token.span == Span(0, 5000)
