# backend/chickcare/services/task_catalog.py
# Catalogue des tâches (lecture seule) : requêtes par semaine, jour, fréquence et catégorie.

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from bson import ObjectId

from chickcare.core.bson_utils import to_object_id
from chickcare.core.errors import TaskNotFound
from chickcare.db.mongodb import TASKS, get_collection
from chickcare.models.task import Task, TaskCategory, TaskFrequency

# Tri d'affichage. Mongo range les `day_number` null en tête : tâches « toute la semaine » d'abord.
WEEK_ORDER = [("day_number", 1), ("sort_order", 1), ("_id", 1)]
CATALOG_ORDER = [("week_number", 1), ("day_number", 1), ("sort_order", 1), ("_id", 1)]


async def _iter_tasks(query: dict[str, Any], sort: list[tuple[str, int]]) -> AsyncIterator[Task]:
    coll = await get_collection(TASKS)
    async for doc in coll.find(query, sort=sort):
        yield Task(**doc)


def tasks_for_week(week_number: int) -> AsyncIterator[Task]:
    """Tâches d'une semaine, triées (jour puis sort_order).

    Description:
        Séquence paresseuse, finie, relançable : chaque appel ouvre un nouveau curseur.
        Une semaine sans tâche produit une séquence vide.

    Args:
        week_number (int): Semaine du programme (0 = préparation).

    Returns:
        AsyncIterator[Task]: Tâches de la semaine.
    """
    return _iter_tasks({"week_number": week_number}, WEEK_ORDER)


def tasks_for_week_and_day(week_number: int, day_number: int) -> AsyncIterator[Task]:
    """Tâches épinglées sur `day_number` + tâches quotidiennes sans jour de la semaine."""
    query = {
        "week_number": week_number,
        "$or": [
            {"day_number": day_number},
            {"day_number": None, "frequency": "daily"},
        ],
    }
    return _iter_tasks(query, [("sort_order", 1), ("_id", 1)])


def tasks_by_frequency(week_number: int, frequency: TaskFrequency) -> AsyncIterator[Task]:
    """Tâches d'une semaine pour une fréquence donnée (daily / weekly / once)."""
    sort = WEEK_ORDER if frequency == "once" else [("sort_order", 1), ("_id", 1)]
    return _iter_tasks({"week_number": week_number, "frequency": frequency}, sort)


def all_tasks() -> AsyncIterator[Task]:
    """Catalogue complet (semaine, jour, sort_order)."""
    return _iter_tasks({}, CATALOG_ORDER)


def tasks_by_category(category: TaskCategory) -> AsyncIterator[Task]:
    return _iter_tasks({"category": category}, CATALOG_ORDER)


async def get_task(task_id: ObjectId | str) -> Task:
    """Détail d'une tâche du catalogue.

    Raises:
        TaskNotFound: Id invalide ou tâche absente.
    """
    coll = await get_collection(TASKS)
    doc = await coll.find_one({"_id": to_object_id(task_id, TaskNotFound)})
    if doc is None:
        raise TaskNotFound()
    return Task(**doc)


async def collect(tasks: AsyncIterator[Task]) -> list[Task]:
    """Matérialise une séquence de tâches."""
    return [t async for t in tasks]
