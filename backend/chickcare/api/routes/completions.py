# backend/chickcare/api/routes/completions.py
# Registre des complétions d'un élevage : compléter / annuler, lecture par jour, statistiques.

from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Body, Depends, Query, Response, status

from chickcare.api.deps import OwnedFlock
from chickcare.core.calendar_utils import normalize, today
from chickcare.core.security import get_current_user
from chickcare.models.task_dto import (
    CompletionIn,
    CompletionOut,
    CompletionStatsOut,
    CompletionWithTaskOut,
    completion_out,
)
from chickcare.services import completion_ledger
from chickcare.services.task_catalog import get_task

router = APIRouter(
    prefix="/flocks/{flock_id}/completions",
    tags=["completions"],
    dependencies=[Depends(get_current_user)],
)


@router.post(
    "",
    response_model=CompletionOut,
    status_code=status.HTTP_201_CREATED,
    summary="Compléter ou annuler une tâche pour un jour",
    description=(
        "`action=complete` (défaut) : upsert idempotent de la complétion (201).\n\n"
        "`action=undo` : pose `undone_at` sur la complétion existante (200, 404 si aucune).\n\n"
        "`day_date` : jour calendaire du fuseau de référence ; aujourd’hui si absent."
    ),
)
async def record(flock: OwnedFlock, response: Response, payload: CompletionIn = Body(...)):
    """Compléter / annuler.

    Description:
        Vérifie l’existence de la tâche, ramène `day_date` au jour canonique
        (`calendar_utils.normalize`), puis délègue au registre.

    Args:
        payload (CompletionIn): Tâche, jour, notes, action.

    Returns:
        CompletionOut: Ligne du registre après écriture.
    """
    task = await get_task(payload.task_id)
    day_date = normalize(payload.day_date) if payload.day_date is not None else today()

    if payload.action == "undo":
        completion = await completion_ledger.undo(flock.id, task.id, day_date)
        response.status_code = status.HTTP_200_OK
    else:
        completion = await completion_ledger.complete(flock.id, task.id, day_date, payload.notes)
    return completion_out(completion)


@router.get(
    "",
    response_model=list[CompletionWithTaskOut],
    summary="Complétions d’un jour",
    description="Complétions actives (non annulées) d’un jour, avec la tâche jointe. Aujourd’hui par défaut.",
)
async def list_for_day(
    flock: OwnedFlock,
    day: dt.date | None = Query(default=None, description="Jour calendaire (YYYY-MM-DD)."),
):
    day_date = normalize(day) if day is not None else today()
    docs = await completion_ledger.completions_for_day(flock.id, day_date)
    return [completion_out(d) for d in docs]


@router.get(
    "/stats",
    response_model=CompletionStatsOut,
    summary="Statistiques de complétion",
    description="Total des complétions actives de l’élevage et répartition par catégorie de tâche.",
)
async def stats(flock: OwnedFlock):
    return await completion_ledger.completion_stats(flock.id)
