"""Liveness and readiness checks."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.lingomate.api.http.app_data import ApplicationDependencies
from src.lingomate.api.http.deps import get_app_dependencies

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@router.get("/ready")
def readiness(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> JSONResponse:
    """Readiness check endpoint; fails while the database is unreachable."""
    if not app_deps.database_service.health_check():
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return JSONResponse(content={"status": "ready"})
