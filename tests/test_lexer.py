"""Tests for lexer implementation."""
import pytest
from pydantic import ValidationError

from calculator.common.types import LexError, Token, TokenKind
from calculator.core.lexer import normalize, tokenize


def kinds(tokens):
    return [token.kind for token in tokens]


def test_tokenize_simple_expression():
    """Test tokenizing operators, numbers and parentheses."""
    tokens = tokenize("(2 + 3) * 4")
    assert kinds(tokens) == [
        TokenKind.LPAREN,
        TokenKind.NUMBER,
        TokenKind.OPERATOR,
        TokenKind.NUMBER,
        TokenKind.RPAREN,
        TokenKind.OPERATOR,
        TokenKind.NUMBER,
        TokenKind.END,
    ]
    assert [t.text for t in tokens[:-1]] == ["(", "2", "+", "3", ")", "*", "4"]


def test_tokenize_always_ends_with_single_end():
    """Test that END terminates every sequence, including empty input."""
    assert tokenize("") == [Token(kind=TokenKind.END)]
    assert tokenize("   ") == [Token(kind=TokenKind.END)]
    tokens = tokenize("1+2")
    assert kinds(tokens).count(TokenKind.END) == 1
    assert tokens[-1].kind == TokenKind.END


def test_tokenize_scientific_notation():
    """Test that exponents are captured in a single NUMBER token."""
    assert tokenize("3.14e2")[0] == Token(kind=TokenKind.NUMBER, text="3.14e2")
    assert tokenize("1E-3")[0] == Token(kind=TokenKind.NUMBER, text="1E-3")
    assert tokenize(".5e+10")[0] == Token(kind=TokenKind.NUMBER, text=".5e+10")

    # Only one exponent marker is absorbed
    tokens = tokenize("1e2e3")
    assert tokens[0].text == "1e2"
    assert tokens[1] == Token(kind=TokenKind.IDENTIFIER, text="e3")


def test_tokenize_defers_number_validation():
    """Test that malformed numbers are still lexed as one token."""
    assert tokenize("1.2.3")[0] == Token(kind=TokenKind.NUMBER, text="1.2.3")
    assert tokenize("2e")[0] == Token(kind=TokenKind.NUMBER, text="2e")


def test_tokenize_identifiers_keep_case():
    """Test identifiers with letters and digits."""
    tokens = tokenize("Ans + SIN(x2)")
    assert tokens[0] == Token(kind=TokenKind.IDENTIFIER, text="Ans")
    assert tokens[2] == Token(kind=TokenKind.IDENTIFIER, text="SIN")
    assert tokens[4] == Token(kind=TokenKind.IDENTIFIER, text="x2")


def test_tokenize_factorial_and_operators():
    """Test single-character tokens."""
    tokens = tokenize("5!^2%3/1-+")
    assert kinds(tokens) == [
        TokenKind.NUMBER,
        TokenKind.FACTORIAL,
        TokenKind.OPERATOR,
        TokenKind.NUMBER,
        TokenKind.OPERATOR,
        TokenKind.NUMBER,
        TokenKind.OPERATOR,
        TokenKind.NUMBER,
        TokenKind.OPERATOR,
        TokenKind.OPERATOR,
        TokenKind.END,
    ]
    assert [t.text for t in tokens if t.kind == TokenKind.OPERATOR] == ["^", "%", "/", "-", "+"]


@pytest.mark.parametrize("text,bad", [("2 $ 3", "$"), ("1,5", ","), ("2×3", "×"), ("a=1", "=")])
def test_tokenize_bad_character(text, bad):
    """Test that unknown characters raise LexError."""
    with pytest.raises(LexError) as exc:
        tokenize(text)
    assert str(exc.value) == f"bad character: {bad}"


def test_tokens_are_immutable():
    """Test that tokens cannot be modified."""
    token = tokenize("1")[0]
    with pytest.raises(ValidationError):
        token.text = "2"


def test_normalize_glyphs():
    """Test replacement of convenience glyphs."""
    assert normalize("2×3÷4") == "2*3/4"
    assert normalize("√(9)") == "sqrt(9)"
    assert normalize("2×π") == "2*pi"
    assert normalize("1+2") == "1+2"


def test_identifiers_stop_at_non_ascii_digits():
    """Test that superscript digits are not absorbed into identifiers."""
    with pytest.raises(LexError) as exc:
        tokenize("pi²")
    assert str(exc.value) == "bad character: ²"

    tokens = tokenize("x2")
    assert tokens[0] == Token(kind=TokenKind.IDENTIFIER, text="x2")
