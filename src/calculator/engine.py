"""Calculator engine: a session holding angle mode and last answer."""
import logging
import math
import time
from typing import Optional

from .common.types import AngleMode, EvalResult, EvaluatorError, ParseError
from .core.lexer import normalize, tokenize
from .core.metrics import MetricsCollector, metrics as default_metrics
from .core.parser import DEFAULT_MAX_DEPTH, Parser
from .core.registry import IdentifierRegistry

logger = logging.getLogger(__name__)

DEFAULT_SIGNIFICANT_DIGITS = 12


def round_significant(value: float, digits: int = DEFAULT_SIGNIFICANT_DIGITS) -> float:
    """Round to `digits` significant digits; NaN and infinities pass through."""
    if math.isnan(value) or math.isinf(value):
        return value
    return float(f"{value:.{digits}g}")


class CalculatorEngine:
    """Evaluates expressions against session state.

    The engine owns the angle mode and the last answer. It is not
    thread-safe: each caller should own its engine.

    `evaluate` never changes the last answer. Callers decide when a result
    is final and store it with `commit` (or the `last_answer` setter).
    """

    def __init__(
        self,
        angle_mode: AngleMode = AngleMode.DEGREES,
        registry: Optional[IdentifierRegistry] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        collector: Optional[MetricsCollector] = None
    ):
        self._angle_mode = AngleMode(angle_mode)
        self._last_answer = 0.0
        self.registry = registry
        self.max_depth = max_depth
        self.collector = collector if collector is not None else default_metrics

    @property
    def angle_mode(self) -> AngleMode:
        return self._angle_mode

    def set_angle_mode(self, mode: AngleMode) -> None:
        """Switch the unit used by sin, cos and tan."""
        self._angle_mode = AngleMode(mode)
        logger.debug(f"Angle mode set to {self._angle_mode.value}")

    @property
    def last_answer(self) -> float:
        return self._last_answer

    @last_answer.setter
    def last_answer(self, value: float) -> None:
        self._last_answer = float(value)

    def commit(self, result: EvalResult, significant_digits: int = DEFAULT_SIGNIFICANT_DIGITS) -> bool:
        """Store a successful result as the last answer.

        Returns False, leaving the last answer untouched, if the result is an error.
        """
        if not result.ok:
            return False
        self._last_answer = round_significant(result.value, significant_digits)
        logger.debug(f"Committed last answer {self._last_answer}")
        return True

    def _run(self, expression: str) -> float:
        tokens = tokenize(normalize(expression))
        parser = Parser(
            tokens,
            angle_mode=self._angle_mode,
            last_answer=self._last_answer,
            registry=self.registry,
            max_depth=self.max_depth
        )
        value = parser.parse_expression()
        if parser.has_more():
            raise ParseError("unexpected token")
        return value

    def evaluate(self, expression: str) -> EvalResult:
        """Evaluate an expression; failures come back as NaN with an error message."""
        start = time.perf_counter()
        error_type = None
        try:
            result = EvalResult(value=self._run(expression))
        except EvaluatorError as e:
            error_type = type(e).__name__
            logger.info(f"Evaluation of {expression!r} failed: {e}")
            result = EvalResult.failure(str(e))
        except RecursionError:
            error_type = ParseError.__name__
            logger.warning(f"Evaluation of {expression!r} exhausted the call stack")
            result = EvalResult.failure("expression nested too deeply")
        except Exception as e:
            error_type = type(e).__name__
            logger.exception(f"Unexpected error evaluating {expression!r}")
            result = EvalResult.failure(str(e))

        self.collector.record_evaluation(time.perf_counter() - start, error_type)
        if result.ok:
            logger.debug(f"Evaluated {expression!r} = {result.value}")
        return result
