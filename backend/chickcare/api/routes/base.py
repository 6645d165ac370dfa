# backend/chickcare/api/routes/base.py
# Route de base : ping, avec le jour de référence courant de l'élevage.

from fastapi import APIRouter

from chickcare.core.calendar_utils import today
from chickcare.core.settings import get_settings

router = APIRouter()


@router.get(
    "/ping",
    tags=["Health"],
    summary="Vérification de santé de l’API",
    description=(
        "Retourne 'pong', le nom du service et le jour calendaire courant du fuseau de référence "
        "(celui sous lequel une complétion sans `day_date` est enregistrée)."
    ),
)
async def ping():
    """Ping.

    Returns:
        dict: `status`, `message`, `service`, `reference_timezone`, `reference_day` (YYYY-MM-DD).
    """
    settings = get_settings()
    return {
        "status": "ok",
        "message": "pong",
        "service": settings.app_name,
        "reference_timezone": settings.reference_timezone,
        "reference_day": today().date().isoformat(),
    }
