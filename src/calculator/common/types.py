"""Core types for the expression evaluator using Pydantic models."""
import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator


class EvaluatorError(Exception):
    """Base class for evaluator errors."""
    pass

class LexError(EvaluatorError):
    """Raised when the lexer meets a character it does not recognize."""
    pass

class ParseError(EvaluatorError):
    """Raised for grammar violations, unknown identifiers and domain errors."""
    pass

class DivisionByZeroError(EvaluatorError, ArithmeticError):
    """Raised when the right operand of '/' is exactly zero."""
    pass


class TokenKind(str, Enum):
    """Kinds of tokens produced by the lexer."""
    NUMBER = "number"
    IDENTIFIER = "identifier"
    OPERATOR = "operator"
    LPAREN = "lparen"
    RPAREN = "rparen"
    FACTORIAL = "factorial"
    END = "end"

class AngleMode(str, Enum):
    """Unit used by the trigonometric functions."""
    DEGREES = "degrees"
    RADIANS = "radians"


class Token(BaseModel):
    """A single lexed token."""
    kind: TokenKind
    text: str = ""

    model_config = ConfigDict(frozen=True)


class EvalResult(BaseModel):
    """Outcome of one evaluation: a value, or NaN paired with an error message."""
    value: float
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_result(self) -> "EvalResult":
        if self.error is not None:
            if not self.error:
                raise ValueError("Error message must not be empty")
            if not math.isnan(self.value):
                raise ValueError(f"Failed result must carry NaN, got {self.value}")
        return self

    @classmethod
    def failure(cls, message: str) -> "EvalResult":
        """Build a failed result."""
        return cls(value=math.nan, error=message or "invalid expression")

    @property
    def ok(self) -> bool:
        return self.error is None
