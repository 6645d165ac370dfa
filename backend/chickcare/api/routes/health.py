# backend/chickcare/api/routes/health.py

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from chickcare.api.deps import Storage
from chickcare.core.health_checks import check_mongodb, check_storage
from chickcare.core.settings import get_settings
from chickcare.core.utils import utcnow
from chickcare.models.base.health import HealthCheck

settings = get_settings()

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthCheck,
    summary="Health check de l'API",
    description="Retourne le statut de l'API et de ses dépendances (base, stockage photo).",
)
async def health(storage: Storage) -> JSONResponse:
    """
    Health check endpoint standard

    Vérifie :
    - MongoDB
    - Répertoire des photos

    Returns:
        200 si tout OK, 503 si un service est down
    """
    checks = {
        "database": await check_mongodb(),
        "storage": await check_storage(storage),
    }

    response = HealthCheck(
        status="ok" if all(check == "ok" for check in checks.values()) else "degraded",
        service=settings.app_name,
        timestamp=utcnow(),
        version=settings.api_version,
        checks=checks,
    )

    status_code = status.HTTP_200_OK if response.healthy else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))
