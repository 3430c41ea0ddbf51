"""Service implementation for the calculator API."""
import logging
import math
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated, Dict, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, FastAPI, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from calculator.core.metrics import metrics
from calculator.core.registry import DEFAULT_REGISTRY
from calculator.engine import CalculatorEngine
from core import settings
from core.logging_config import setup_logging
from service.schema import (
    AngleModeInput,
    EvaluateInput,
    EvaluateOutput,
    IdentifierInfo,
    LastAnswerInput,
    MetricsSummary,
    ServiceMetadata,
    SessionInfo,
)

logger = logging.getLogger(__name__)

setup_logging(settings.LOG_LEVEL)

# In-memory sessions; handlers are async so they run on a single event loop
_sessions: Dict[str, CalculatorEngine] = {}


def verify_bearer(
    http_auth: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(HTTPBearer(description="Please provide AUTH_SECRET api key.", auto_error=False)),
    ],
) -> None:
    if not settings.AUTH_SECRET:
        return
    auth_secret = settings.AUTH_SECRET.get_secret_value()
    if not http_auth or http_auth.credentials != auth_secret:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Calculator service starting")
    yield
    logger.info(f"Calculator service stopping, dropping {len(_sessions)} sessions")
    _sessions.clear()

app = FastAPI(lifespan=lifespan)
router = APIRouter(dependencies=[Depends(verify_bearer)])


def _create_engine() -> CalculatorEngine:
    return CalculatorEngine(
        angle_mode=settings.DEFAULT_ANGLE_MODE,
        max_depth=settings.MAX_NESTING_DEPTH
    )


def _new_session() -> str:
    # Evict the oldest sessions once the cap is reached
    while len(_sessions) >= settings.MAX_SESSIONS:
        evicted = next(iter(_sessions))
        del _sessions[evicted]
        logger.info(f"Evicted session {evicted}, limit of {settings.MAX_SESSIONS} reached")
    session_id = str(uuid4())
    _sessions[session_id] = _create_engine()
    logger.debug(f"Created session {session_id}")
    return session_id


def _get_session(session_id: str) -> CalculatorEngine:
    engine = _sessions.get(session_id)
    if engine is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Session not found: {session_id}")
    return engine


def _json_number(value: float) -> Optional[float]:
    # JSON has no NaN or infinity
    return value if math.isfinite(value) else None


def _session_info(session_id: str, engine: CalculatorEngine) -> SessionInfo:
    return SessionInfo(
        session_id=session_id,
        angle_mode=engine.angle_mode,
        last_answer=_json_number(engine.last_answer),
        last_answer_text=str(engine.last_answer)
    )


@router.get("/info")
async def info() -> ServiceMetadata:
    return ServiceMetadata(
        functions=[
            IdentifierInfo(name=name, description=item.description)
            for name, item in DEFAULT_REGISTRY.get_by_category("function").items()
        ],
        constants=[
            IdentifierInfo(name=name, description=item.description)
            for name, item in DEFAULT_REGISTRY.get_by_category("constant").items()
        ],
        default_angle_mode=settings.DEFAULT_ANGLE_MODE,
        max_nesting_depth=settings.MAX_NESTING_DEPTH,
    )


@router.get("/metrics")
async def get_metrics() -> MetricsSummary:
    return MetricsSummary(**metrics.get_summary())


@router.post("/sessions", status_code=status.HTTP_201_CREATED)
async def create_session() -> SessionInfo:
    """Create a new evaluation session."""
    session_id = _new_session()
    return _session_info(session_id, _sessions[session_id])


@router.get("/sessions/{session_id}")
async def get_session(session_id: str) -> SessionInfo:
    return _session_info(session_id, _get_session(session_id))


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str) -> None:
    _get_session(session_id)
    del _sessions[session_id]


@router.put("/sessions/{session_id}/angle-mode")
async def set_angle_mode(session_id: str, body: AngleModeInput) -> SessionInfo:
    engine = _get_session(session_id)
    engine.set_angle_mode(body.mode)
    return _session_info(session_id, engine)


@router.get("/sessions/{session_id}/ans")
async def get_last_answer(session_id: str) -> SessionInfo:
    return _session_info(session_id, _get_session(session_id))


@router.put("/sessions/{session_id}/ans")
async def set_last_answer(session_id: str, body: LastAnswerInput) -> SessionInfo:
    engine = _get_session(session_id)
    engine.last_answer = body.value
    return _session_info(session_id, engine)


@router.post("/evaluate")
async def evaluate(user_input: EvaluateInput) -> EvaluateOutput:
    """Evaluate an expression within a session, or statelessly without one."""
    session_id = user_input.session_id
    engine = _get_session(session_id) if session_id else _create_engine()
    result = engine.evaluate(user_input.expression)
    if user_input.commit:
        engine.commit(result, settings.ANS_SIGNIFICANT_DIGITS)
    return EvaluateOutput(
        session_id=session_id,
        value=_json_number(result.value),
        text=str(result.value),
        error=result.error,
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}

app.include_router(router)


def main() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
