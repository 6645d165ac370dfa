# backend/chickcare/services/completion_ledger.py
# Registre des complétions : upsert atomique par (élevage, tâche, jour), annulation douce, statistiques.

from __future__ import annotations

import datetime as dt
from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from chickcare.core.errors import CompletionNotFound
from chickcare.core.logging_config import get_loggers
from chickcare.core.utils import utcnow
from chickcare.db.mongodb import TASK_COMPLETIONS, TASKS, get_collection
from chickcare.models.task_completion import TaskCompletion

logger_main = get_loggers()[0]


def _key(flock_id: ObjectId, task_id: ObjectId, day_date: dt.datetime) -> dict[str, Any]:
    return {"flock_id": flock_id, "task_id": task_id, "day_date": day_date}


async def complete(
    flock_id: ObjectId,
    task_id: ObjectId,
    day_date: dt.datetime,
    notes: str | None = None,
) -> TaskCompletion:
    """Marque une tâche comme faite pour un jour (idempotent).

    Description:
        Upsert en une seule opération sur la clé composite : crée la ligne à la
        première complétion, sinon réécrit `completed_at`, efface `undone_at` et
        remplace `notes` seulement si de nouvelles notes sont fournies. L’index
        unique garantit une seule ligne par clé ; si deux
        upserts concurrents se croisent, le perdant reçoit un `DuplicateKeyError`
        et rejoue l’opération, qui devient alors une simple mise à jour.

    Args:
        flock_id (ObjectId): Élevage.
        task_id (ObjectId): Tâche.
        day_date (datetime): Jour canonique (voir `calendar_utils.normalize`).
        notes (str | None): Notes libres.

    Returns:
        TaskCompletion: Ligne après écriture.
    """
    coll = await get_collection(TASK_COMPLETIONS)
    ts = utcnow()
    fields: dict[str, Any] = {"completed_at": ts, "undone_at": None}
    if notes is not None:
        fields["notes"] = notes
    update = {"$set": fields, "$setOnInsert": {"created_at": ts}}
    try:
        doc = await coll.find_one_and_update(
            _key(flock_id, task_id, day_date), update, upsert=True, return_document=ReturnDocument.AFTER
        )
    except DuplicateKeyError:
        doc = await coll.find_one_and_update(
            _key(flock_id, task_id, day_date), update, upsert=True, return_document=ReturnDocument.AFTER
        )

    logger_main.info(f"Task completed flock={flock_id} task={task_id} day={day_date.date()}")
    return TaskCompletion(**doc)


async def undo(flock_id: ObjectId, task_id: ObjectId, day_date: dt.datetime) -> TaskCompletion:
    """Annule la complétion d’un jour (pose `undone_at`).

    Raises:
        CompletionNotFound: Aucune complétion enregistrée pour cette clé (erreur appelant, pas de retry).
    """
    coll = await get_collection(TASK_COMPLETIONS)
    doc = await coll.find_one_and_update(
        _key(flock_id, task_id, day_date),
        {"$set": {"undone_at": utcnow()}},
        return_document=ReturnDocument.AFTER,
    )
    if doc is None:
        raise CompletionNotFound()

    logger_main.info(f"Task completion undone flock={flock_id} task={task_id} day={day_date.date()}")
    return TaskCompletion(**doc)


async def is_completed(flock_id: ObjectId, task_id: ObjectId, day_date: dt.datetime) -> bool:
    """Vrai ssi la ligne existe et n’est pas annulée."""
    coll = await get_collection(TASK_COMPLETIONS)
    doc = await coll.find_one(_key(flock_id, task_id, day_date))
    return doc is not None and doc.get("undone_at") is None


async def _with_tasks(docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Joint les métadonnées de tâche (`task`) sur des lignes de complétion."""
    task_ids = list({d["task_id"] for d in docs})
    tasks_coll = await get_collection(TASKS)
    tasks = {t["_id"]: t async for t in tasks_coll.find({"_id": {"$in": task_ids}})}
    return [{**d, "task": tasks.get(d["task_id"])} for d in docs]


async def completions_for_day(flock_id: ObjectId, day_date: dt.datetime) -> list[dict[str, Any]]:
    """Complétions actives d’un élevage pour un jour, avec la tâche jointe."""
    coll = await get_collection(TASK_COMPLETIONS)
    docs = await coll.find({"flock_id": flock_id, "day_date": day_date, "undone_at": None}).to_list(length=None)
    return await _with_tasks(docs)


async def completed_task_ids_for_day(flock_id: ObjectId, day_date: dt.datetime) -> set[ObjectId]:
    """Ids des tâches complétées (non annulées) d’un élevage pour un jour."""
    coll = await get_collection(TASK_COMPLETIONS)
    cursor = coll.find({"flock_id": flock_id, "day_date": day_date, "undone_at": None}, {"task_id": 1})
    return {d["task_id"] async for d in cursor}


async def completions_for_flock(flock_id: ObjectId) -> list[dict[str, Any]]:
    """Historique des complétions actives d’un élevage (plus récentes d’abord)."""
    coll = await get_collection(TASK_COMPLETIONS)
    docs = await coll.find(
        {"flock_id": flock_id, "undone_at": None}, sort=[("completed_at", -1)]
    ).to_list(length=None)
    return await _with_tasks(docs)


async def completions_for_task(flock_id: ObjectId, task_id: ObjectId) -> list[TaskCompletion]:
    """Jours où une tâche a été faite (plus récents d’abord)."""
    coll = await get_collection(TASK_COMPLETIONS)
    cursor = coll.find({"flock_id": flock_id, "task_id": task_id, "undone_at": None}, sort=[("day_date", -1)])
    return [TaskCompletion(**d) async for d in cursor]


async def completion_stats(flock_id: ObjectId) -> dict[str, Any]:
    """Total des complétions actives et répartition par catégorie de tâche."""
    completions = await completions_for_flock(flock_id)
    by_category: dict[str, int] = {}
    for c in completions:
        task = c.get("task")
        if task is None:
            continue
        by_category[task["category"]] = by_category.get(task["category"], 0) + 1
    return {"total_completed": len(completions), "by_category": by_category}


async def delete_for_flock(flock_id: ObjectId) -> int:
    """Supprime les complétions d’un élevage (cascade de suppression)."""
    coll = await get_collection(TASK_COMPLETIONS)
    res = await coll.delete_many({"flock_id": flock_id})
    return res.deleted_count
