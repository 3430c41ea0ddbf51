"""Metrics collection for expression evaluation."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class EvaluationMetrics:
    """Aggregated counters for evaluate calls."""
    total_evaluations: int = 0
    successful_evaluations: int = 0
    failed_evaluations: int = 0
    errors_by_type: Dict[str, int] = field(default_factory=dict)
    average_evaluation_time: float = 0.0
    max_evaluation_time: float = 0.0

    def add_evaluation(self, evaluation_time: float, error_type: Optional[str] = None) -> None:
        """Add one evaluation."""
        self.total_evaluations += 1
        if error_type is None:
            self.successful_evaluations += 1
        else:
            self.failed_evaluations += 1
            self.errors_by_type[error_type] = self.errors_by_type.get(error_type, 0) + 1

        # Running average, no per-call history kept
        self.average_evaluation_time = (
            (self.average_evaluation_time * (self.total_evaluations - 1) + evaluation_time)
            / self.total_evaluations
        )
        self.max_evaluation_time = max(self.max_evaluation_time, evaluation_time)


class MetricsCollector:
    """Collect and aggregate metrics."""
    def __init__(self):
        self.evaluation_metrics = EvaluationMetrics()
        self.start_time = datetime.now()

    def record_evaluation(self, evaluation_time: float, error_type: Optional[str] = None) -> None:
        """Record the duration and outcome of an evaluation."""
        self.evaluation_metrics.add_evaluation(
            evaluation_time=evaluation_time,
            error_type=error_type
        )

    def reset(self) -> None:
        """Drop all collected metrics."""
        self.evaluation_metrics = EvaluationMetrics()
        self.start_time = datetime.now()

    def get_summary(self) -> Dict[str, Any]:
        """Get metrics summary."""
        total_time = (datetime.now() - self.start_time).total_seconds()
        evaluations = self.evaluation_metrics

        return {
            "uptime_seconds": total_time,
            "evaluations": {
                "total": evaluations.total_evaluations,
                "successful": evaluations.successful_evaluations,
                "failed": evaluations.failed_evaluations,
                "errors_by_type": dict(evaluations.errors_by_type),
                "average_evaluation_time": evaluations.average_evaluation_time,
                "max_evaluation_time": evaluations.max_evaluation_time
            }
        }

# Global metrics collector instance
metrics = MetricsCollector()
