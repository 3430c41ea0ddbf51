"""Recursive-descent parser evaluating a token sequence.

Grammar, from lowest to highest precedence::

    expression := term (("+"|"-") term)*
    term       := power (("*"|"/"|"%") power)*
    power      := unary ("^" power)?
    unary      := ("+"|"-") unary | postfix
    postfix    := primary ("!")*
    primary    := NUMBER
                | IDENTIFIER [ "(" expression ")" ]
                | "(" expression ")"

Values are computed while parsing; no tree is built.
"""
import logging
from typing import List, Optional, Sequence

from ..common.types import AngleMode, DivisionByZeroError, ParseError, Token, TokenKind
from .floatmath import ieee_fmod, ieee_pow
from .registry import ANSWER_NAME, DEFAULT_REGISTRY, Constant, IdentifierRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100
MAX_FACTORIAL = 170


def factorial(value: float) -> float:
    """Iterative factorial of an integral float in [0, 170]."""
    if value < 0 or value > MAX_FACTORIAL:
        raise ParseError("n! out of range")
    if value % 1.0 != 0.0:
        raise ParseError("n! needs integer")
    result = 1.0
    n = int(value)
    while n > 1:
        result *= n
        n -= 1
    return result


class Parser:
    """Single-use parser over one token sequence."""

    def __init__(
        self,
        tokens: Sequence[Token],
        angle_mode: AngleMode = AngleMode.DEGREES,
        last_answer: float = 0.0,
        registry: Optional[IdentifierRegistry] = None,
        max_depth: int = DEFAULT_MAX_DEPTH
    ):
        if not tokens or tokens[-1].kind != TokenKind.END:
            raise ValueError("Token sequence must end with an END token")
        self.tokens: List[Token] = list(tokens)
        self.angle_mode = angle_mode
        self.last_answer = last_answer
        self.registry = registry if registry is not None else DEFAULT_REGISTRY
        self.max_depth = max_depth
        self.pos = 0
        self._depth = 0

    def _peek(self) -> Token:
        return self.tokens[self.pos]

    def _match(self, kind: TokenKind, text: Optional[str] = None) -> bool:
        """Consume the current token if it has the given kind (and text)."""
        token = self._peek()
        if token.kind == kind and (text is None or token.text == text):
            self.pos += 1
            return True
        return False

    def _descend(self) -> None:
        self._depth += 1
        if self._depth > self.max_depth:
            raise ParseError("expression nested too deeply")

    def has_more(self) -> bool:
        """True while tokens other than END remain."""
        return self._peek().kind != TokenKind.END

    def parse_expression(self) -> float:
        self._descend()
        try:
            value = self._parse_term()
            while True:
                if self._match(TokenKind.OPERATOR, "+"):
                    value += self._parse_term()
                elif self._match(TokenKind.OPERATOR, "-"):
                    value -= self._parse_term()
                else:
                    return value
        finally:
            self._depth -= 1

    def _parse_term(self) -> float:
        value = self._parse_power()
        while True:
            if self._match(TokenKind.OPERATOR, "*"):
                value *= self._parse_power()
            elif self._match(TokenKind.OPERATOR, "/"):
                divisor = self._parse_power()
                if divisor == 0.0:
                    raise DivisionByZeroError("division by zero")
                value /= divisor
            elif self._match(TokenKind.OPERATOR, "%"):
                value = ieee_fmod(value, self._parse_power())
            else:
                return value

    def _parse_power(self) -> float:
        value = self._parse_unary()
        if self._match(TokenKind.OPERATOR, "^"):
            self._descend()
            try:
                value = ieee_pow(value, self._parse_power())
            finally:
                self._depth -= 1
        return value

    def _parse_unary(self) -> float:
        for sign in ("+", "-"):
            if self._match(TokenKind.OPERATOR, sign):
                self._descend()
                try:
                    operand = self._parse_unary()
                finally:
                    self._depth -= 1
                return operand if sign == "+" else -operand
        return self._parse_postfix()

    def _parse_postfix(self) -> float:
        value = self._parse_primary()
        while self._match(TokenKind.FACTORIAL):
            value = factorial(value)
        return value

    def _parse_primary(self) -> float:
        token = self._peek()
        if token.kind == TokenKind.NUMBER:
            self.pos += 1
            return self._to_number(token.text)
        if token.kind == TokenKind.IDENTIFIER:
            self.pos += 1
            return self._resolve_identifier(token.text)
        if token.kind == TokenKind.LPAREN:
            self.pos += 1
            value = self.parse_expression()
            if not self._match(TokenKind.RPAREN):
                raise ParseError("missing )")
            return value
        raise ParseError("unexpected token")

    @staticmethod
    def _to_number(text: str) -> float:
        try:
            return float(text)
        except ValueError:
            raise ParseError(f"malformed number: {text}") from None

    def _resolve_identifier(self, text: str) -> float:
        name = text.lower()
        if name == ANSWER_NAME:
            return self.last_answer
        item = self.registry.lookup(name)
        if item is None:
            raise ParseError(f"unknown identifier: {name}")
        if isinstance(item, Constant):
            return item.value
        return item.apply(self._parenthesized_argument(), self.angle_mode)

    def _parenthesized_argument(self) -> float:
        if not self._match(TokenKind.LPAREN):
            raise ParseError("missing (")
        value = self.parse_expression()
        if not self._match(TokenKind.RPAREN):
            raise ParseError("missing )")
        return value


def parse_expression(
    tokens: Sequence[Token],
    angle_mode: AngleMode = AngleMode.DEGREES,
    last_answer: float = 0.0,
    registry: Optional[IdentifierRegistry] = None,
    max_depth: int = DEFAULT_MAX_DEPTH
) -> float:
    """Parse one expression from the start of `tokens` and return its value.

    Tokens left after the expression are not checked here; see
    `CalculatorEngine.evaluate` for the full pipeline.
    """
    parser = Parser(tokens, angle_mode, last_answer, registry, max_depth)
    return parser.parse_expression()
