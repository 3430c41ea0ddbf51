"""Single-line expression evaluator."""
from .common.types import (
    AngleMode,
    DivisionByZeroError,
    EvalResult,
    EvaluatorError,
    LexError,
    ParseError,
    Token,
    TokenKind,
)
from .core.lexer import normalize, tokenize
from .core.parser import Parser, parse_expression
from .engine import CalculatorEngine

__all__ = [
    "AngleMode",
    "CalculatorEngine",
    "DivisionByZeroError",
    "EvalResult",
    "EvaluatorError",
    "LexError",
    "ParseError",
    "Parser",
    "Token",
    "TokenKind",
    "normalize",
    "parse_expression",
    "tokenize",
]
