from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from catalog.api.http.app_data import ApplicationDependencies
from catalog.api.http.deps import get_app_dependencies

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@router.get("/ready")
def readiness(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> JSONResponse:
    """Readiness check: the product store must accept connections."""
    if not app_deps.database_service.health_check():
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return JSONResponse(content={"status": "ready"})
