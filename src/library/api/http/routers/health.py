"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.library.api.http.app_data import ApplicationDependencies

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe; returns 200 as long as the process is running."""
    return {"status": "healthy", "service": "library"}


@router.get("/ready", response_model=None)
def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe; 503 when the database is unreachable."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    database = app_deps.database_service

    db_healthy = database.health_check()
    response = {
        "status": "ready" if db_healthy else "not_ready",
        "checks": {
            "database": {
                "status": "healthy" if db_healthy else "unhealthy",
                "type": database.engine.dialect.name,
                "pool": database.get_pool_status(),
            }
        },
    }
    if not db_healthy:
        return JSONResponse(status_code=503, content=response)
    return response
