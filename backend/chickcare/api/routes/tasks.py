# backend/chickcare/api/routes/tasks.py
# Catalogue des tâches (lecture seule).

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query

from chickcare.core.security import get_current_user
from chickcare.models.task import TaskCategory, TaskFrequency
from chickcare.models.task_dto import TaskOut
from chickcare.services.task_catalog import (
    all_tasks,
    collect,
    get_task,
    tasks_by_category,
    tasks_by_frequency,
    tasks_for_week,
    tasks_for_week_and_day,
)

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "",
    response_model=list[TaskOut],
    summary="Lister le catalogue de tâches",
    description=(
        "Filtres optionnels :\n\n"
        "- `week` : tâches d’une semaine\n"
        "- `week` + `day` : tâches épinglées sur ce jour + tâches quotidiennes sans jour\n"
        "- `week` + `frequency` : tâches d’une semaine pour une fréquence\n"
        "- `category` : tâches d’une catégorie"
    ),
)
async def list_tasks(
    week: int | None = Query(default=None, ge=0, description="Semaine du programme."),
    day: int | None = Query(default=None, ge=1, description="Jour absolu depuis le départ (avec `week`)."),
    frequency: TaskFrequency | None = Query(default=None, description="once | daily | weekly (avec `week`)."),
    category: TaskCategory | None = Query(default=None, description="Catégorie d’affichage."),
):
    """Catalogue filtré.

    Returns:
        list[TaskOut]: Tâches triées (semaine, jour, sort_order).
    """
    if week is not None and day is not None:
        it = tasks_for_week_and_day(week, day)
    elif week is not None and frequency is not None:
        it = tasks_by_frequency(week, frequency)
    elif week is not None:
        it = tasks_for_week(week)
    elif category is not None:
        it = tasks_by_category(category)
    else:
        it = all_tasks()
    return [t.model_dump(by_alias=True) for t in await collect(it)]


@router.get(
    "/{task_id}",
    response_model=TaskOut,
    summary="Détail d’une tâche",
)
async def get_one(task_id: str = Path(..., description="Identifiant de la tâche.")):
    task = await get_task(task_id)
    return task.model_dump(by_alias=True)
