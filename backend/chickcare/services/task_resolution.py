# backend/chickcare/services/task_resolution.py
# Liste des tâches d'un élevage pour une semaine, annotée avec l'état du jour (fait / applicable).

from __future__ import annotations

import datetime as dt
from typing import Any

from chickcare.core.calendar_utils import current_position, today
from chickcare.models.flock import Flock
from chickcare.models.task import is_applicable_today
from chickcare.services.completion_ledger import completed_task_ids_for_day
from chickcare.services.task_catalog import tasks_for_week


async def resolve_tasks_for_flock(
    flock: Flock,
    requested_week: int | None = None,
    now: dt.datetime | None = None,
) -> dict[str, Any]:
    """Tâches d’une semaine pour un élevage, avec état du jour.

    Description:
        1. Position courante (semaine, jour) calculée depuis `start_date` (jour 0 et
           semaine mémorisée si l’élevage n’a pas démarré).
        2. Semaine affichée : `requested_week` si fourni, sinon la semaine courante.
        3. `is_completed` : complétion non annulée **aujourd’hui** (fuseau de
           référence), même si l’on consulte une autre semaine.
        4. `is_applicable_today` : tâche quotidienne, ou épinglée sur le jour courant.

    Args:
        flock (Flock): Élevage (propriété déjà vérifiée).
        requested_week (int | None): Semaine à afficher.
        now (datetime | None): Horloge (tests).

    Returns:
        dict: `{tasks, current_week, current_day, flock_status}`.
    """
    current_week, current_day = current_position(flock.start_date, flock.current_week, now)
    week = requested_week if requested_week is not None else current_week

    done = await completed_task_ids_for_day(flock.id, today(now))

    tasks = []
    async for task in tasks_for_week(week):
        item = task.model_dump(by_alias=True)
        item["is_completed"] = task.id in done
        item["is_applicable_today"] = is_applicable_today(task, current_day)
        tasks.append(item)

    return {
        "tasks": tasks,
        "current_week": current_week,
        "current_day": current_day,
        "flock_status": flock.status,
    }
