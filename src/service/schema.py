"""Request and response models for the calculator API."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from calculator.common.types import AngleMode


class IdentifierInfo(BaseModel):
    """Info about a constant or function usable in expressions."""
    name: str = Field(description="Identifier as typed in expressions.", examples=["sin"])
    description: str = Field(description="Description of the identifier.")


class ServiceMetadata(BaseModel):
    """Metadata about the service including available identifiers."""
    functions: List[IdentifierInfo]
    constants: List[IdentifierInfo]
    default_angle_mode: AngleMode
    max_nesting_depth: int


class SessionInfo(BaseModel):
    """State of one evaluation session."""
    session_id: str
    angle_mode: AngleMode
    last_answer: Optional[float] = Field(description="Last answer, null when NaN or infinite.")
    last_answer_text: str = Field(description="Last answer as text, e.g. '10.0', 'nan', 'inf'.")


class EvaluateInput(BaseModel):
    """Expression to evaluate."""
    expression: str = Field(description="Expression to evaluate.", examples=["2+3*4", "sin(90)"])
    session_id: Optional[str] = Field(
        default=None,
        description="Session to evaluate in. Without one the expression is evaluated in a fresh, unsaved session.",
    )
    commit: bool = Field(
        default=True,
        description="Store a successful result as the session's last answer.",
    )


class EvaluateOutput(BaseModel):
    """Result of an evaluation."""
    session_id: Optional[str] = None
    value: Optional[float] = Field(description="Numeric result, null when NaN or infinite.")
    text: str = Field(description="Result as text, e.g. '14.0', 'nan', 'inf'.")
    error: Optional[str] = None


class AngleModeInput(BaseModel):
    mode: AngleMode


class LastAnswerInput(BaseModel):
    value: float = Field(allow_inf_nan=False)


class MetricsSummary(BaseModel):
    uptime_seconds: float
    evaluations: Dict[str, Any]
