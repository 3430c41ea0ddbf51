"""Calculator tool implementation."""
from langchain_core.tools import tool

from core import settings
from ..engine import CalculatorEngine

_engine = CalculatorEngine(
    angle_mode=settings.DEFAULT_ANGLE_MODE,
    max_depth=settings.MAX_NESTING_DEPTH
)


def get_engine() -> CalculatorEngine:
    """Engine shared by all calls of the calculator tool."""
    return _engine


@tool
def calculator(expression: str) -> str:
    """Calculates a single-line math expression. Supports + - * / % ^, factorial (!), parentheses, sqrt, sin, cos, tan (degrees by default), log (base 10), ln, the constants pi and e, and ans for the previous result."""
    result = _engine.evaluate(expression.strip())
    if not result.ok:
        raise ValueError(
            f'Calculator("{expression}") raised error: {result.error}. Please try again with a valid numerical expression'
        )
    _engine.commit(result, settings.ANS_SIGNIFICANT_DIGITS)
    return str(result.value)
