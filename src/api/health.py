"""Health check endpoints for monitoring and orchestration."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.config import settings
from src.db.turso import TursoClient

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Service identity and current time."""

    status: str
    service: str
    timestamp: datetime
    version: str
    environment: str


class LivenessResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    """Readiness status with per-dependency checks."""

    status: str
    checks: dict[str, str]


async def _database_status(db: TursoClient | None) -> str:
    if db is None:
        return "not_configured"
    return "ok" if await db.is_healthy() else "failed"


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service=settings.app_name,
        timestamp=datetime.now(UTC),
        version=settings.app_version,
        environment=settings.app_env,
    )


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness probe - the process answers."""
    return LivenessResponse(status="alive")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(request: Request) -> ReadinessResponse:
    """Readiness probe - app can serve traffic.

    Only the connection store blocks readiness. Missing LLM keys are
    reported, since preparation degrades to fallback materials without
    them.
    """
    checks = {
        "api": "ok",
        "database": await _database_status(getattr(request.app.state, "db", None)),
        "llm": "ok" if settings.openrouter_api_key else "not_configured",
    }
    status = "ready" if checks["database"] == "ok" else "not_ready"
    return ReadinessResponse(status=status, checks=checks)
