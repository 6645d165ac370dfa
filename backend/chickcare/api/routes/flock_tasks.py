# backend/chickcare/api/routes/flock_tasks.py
# Tâches d'un élevage pour une semaine, annotées avec l'état du jour.

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from chickcare.api.deps import OwnedFlock
from chickcare.core.security import get_current_user
from chickcare.models.task_dto import FlockTasksResponse
from chickcare.services.task_resolution import resolve_tasks_for_flock

router = APIRouter(
    prefix="/flocks/{flock_id}/tasks",
    tags=["flock-tasks"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "",
    response_model=FlockTasksResponse,
    summary="Tâches de la semaine pour un élevage",
    description=(
        "Retourne les tâches d’une semaine (semaine courante par défaut).\n\n"
        "- `is_completed` : fait **aujourd’hui** (fuseau de référence)\n"
        "- `is_applicable_today` : tâche quotidienne ou épinglée sur le jour courant\n"
        "- `current_week` / `current_day` calculés depuis la date de départ"
    ),
)
async def list_flock_tasks(
    flock: OwnedFlock,
    week: int | None = Query(default=None, ge=0, description="Semaine à afficher (0 = préparation)."),
):
    """Tâches annotées d’un élevage.

    Args:
        week (int | None): Semaine demandée.

    Returns:
        FlockTasksResponse: Tâches, semaine et jour courants, statut de l’élevage.
    """
    return await resolve_tasks_for_flock(flock, week)
