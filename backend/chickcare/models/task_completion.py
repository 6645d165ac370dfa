# backend/chickcare/models/task_completion.py
# Entrée du registre de complétions : une ligne par (élevage, tâche, jour).

from __future__ import annotations

import datetime as dt

from pydantic import Field

from chickcare.core.bson_utils import MongoBaseModel, PyObjectId
from chickcare.core.utils import utcnow


class TaskCompletion(MongoBaseModel):
    """Document Mongo « TaskCompletion ».

    Description:
        (flock_id, task_id, day_date) est unique (index). Jamais supprimée par une
        annulation : `undone_at` est posé, puis effacé à la re-complétion.
        « Complétée » ⇔ la ligne existe et `undone_at` est None.

    Attributes:
        flock_id (PyObjectId): Élevage.
        task_id (PyObjectId): Tâche du catalogue.
        day_date (datetime): Jour canonique (minuit UTC de la date de référence).
        completed_at (datetime | None): Dernière complétion.
        undone_at (datetime | None): Dernière annulation (None si complétée).
        notes (str | None): Notes libres.
        created_at (datetime): Première complétion.
    """

    flock_id: PyObjectId
    task_id: PyObjectId
    day_date: dt.datetime
    completed_at: dt.datetime | None = None
    undone_at: dt.datetime | None = None
    notes: str | None = None
    created_at: dt.datetime = Field(default_factory=lambda: utcnow())

    @property
    def is_completed(self) -> bool:
        return self.undone_at is None
