"""Lexer turning normalized expression text into tokens."""
import logging
from typing import List

from ..common.types import LexError, Token, TokenKind

logger = logging.getLogger(__name__)

DIGITS = "0123456789"
OPERATORS = "+-*/^%"

# Convenience glyphs entered by users, rewritten before lexing
GLYPHS = {
    "×": "*",
    "÷": "/",
    "√": "sqrt",
    "π": "pi",
}

_SINGLE_CHAR_TOKENS = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "!": TokenKind.FACTORIAL,
}


def normalize(raw: str) -> str:
    """Replace alternate glyphs with their canonical ASCII forms."""
    for glyph, canonical in GLYPHS.items():
        raw = raw.replace(glyph, canonical)
    return raw


def _scan_number(text: str, start: int) -> int:
    """Return the index just past the numeric literal starting at `start`."""
    i = start + 1
    has_exponent = False
    while i < len(text):
        ch = text[i]
        if ch in DIGITS or ch == ".":
            i += 1
        elif ch in "eE" and not has_exponent:
            has_exponent = True
            i += 1
            if i < len(text) and text[i] in "+-":
                i += 1
        else:
            break
    return i


def _scan_identifier(text: str, start: int) -> int:
    i = start + 1
    while i < len(text) and (text[i].isalpha() or text[i] in DIGITS):
        i += 1
    return i


def tokenize(text: str) -> List[Token]:
    """Split normalized text into tokens, always ending with a single END token.

    Raises:
        LexError: if a character cannot start any token.
    """
    tokens: List[Token] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch.isspace():
            i += 1
        elif ch in DIGITS or ch == ".":
            end = _scan_number(text, i)
            tokens.append(Token(kind=TokenKind.NUMBER, text=text[i:end]))
            i = end
        elif ch.isalpha():
            end = _scan_identifier(text, i)
            tokens.append(Token(kind=TokenKind.IDENTIFIER, text=text[i:end]))
            i = end
        elif ch in _SINGLE_CHAR_TOKENS:
            tokens.append(Token(kind=_SINGLE_CHAR_TOKENS[ch], text=ch))
            i += 1
        elif ch in OPERATORS:
            tokens.append(Token(kind=TokenKind.OPERATOR, text=ch))
            i += 1
        else:
            raise LexError(f"bad character: {ch}")

    tokens.append(Token(kind=TokenKind.END))
    logger.debug(f"Tokenized {text!r} into {len(tokens)} tokens")
    return tokens
