# backend/chickcare/models/task_dto.py
# Schémas I/O : tâches du catalogue, tâches annotées d’un élevage, complétions.

from __future__ import annotations

import datetime as dt
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from chickcare.core.bson_utils import PyObjectId
from chickcare.models.chick import NOTE_MAX_LENGTH
from chickcare.models.flock import FlockStatus
from chickcare.models.task import TaskCategory, TaskFrequency


class TaskOut(BaseModel):
    """Tâche du catalogue (sortie).

    Attributes:
        id (PyObjectId): Id de la tâche.
        code (str): Code stable du seed.
        title (str): Titre.
        description (str): Résumé.
        detailed_content (str): Contenu long.
        week_number (int): Semaine.
        day_number (int | None): Jour absolu épinglé.
        frequency (str): once | daily | weekly.
        category (str): Catégorie d’affichage.
        sort_order (int): Ordre d’affichage.
    """

    id: PyObjectId = Field(validation_alias=AliasChoices("_id", "id"))
    code: str
    title: str
    description: str
    detailed_content: str = ""
    week_number: int
    day_number: int | None = None
    frequency: TaskFrequency
    category: TaskCategory
    sort_order: int = 0

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)


class FlockTaskOut(TaskOut):
    """Tâche annotée pour un élevage (état du jour)."""

    is_completed: bool = False
    is_applicable_today: bool = False


class FlockTasksResponse(BaseModel):
    tasks: list[FlockTaskOut]
    current_week: int
    current_day: int
    flock_status: FlockStatus


class CompletionIn(BaseModel):
    """Entrée de complétion / annulation.

    Attributes:
        task_id (PyObjectId): Tâche concernée.
        day_date (datetime | date | None): Jour ; « aujourd’hui » (fuseau de référence) si absent.
        notes (str | None): Notes (complétion uniquement).
        action (str): 'complete' | 'undo'.
    """

    task_id: PyObjectId
    day_date: dt.datetime | dt.date | None = None
    notes: str | None = Field(default=None, max_length=NOTE_MAX_LENGTH)
    action: Literal["complete", "undo"] = "complete"


class CompletionOut(BaseModel):
    id: PyObjectId = Field(validation_alias=AliasChoices("_id", "id"))
    flock_id: PyObjectId
    task_id: PyObjectId
    day_date: dt.date
    completed_at: dt.datetime | None = None
    undone_at: dt.datetime | None = None
    notes: str | None = None
    is_completed: bool = False

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    @field_validator("day_date", mode="before")
    @classmethod
    def _day_only(cls, v: Any) -> Any:
        # clé stockée = minuit UTC : seule la date calendaire est exposée
        return v.date() if isinstance(v, dt.datetime) else v


class CompletionWithTaskOut(CompletionOut):
    task: TaskOut | None = None


class CompletionStatsOut(BaseModel):
    total_completed: int
    by_category: dict[str, int]


def completion_out(doc: Any) -> dict[str, Any]:
    """Document (ou modèle) de complétion → dict de sortie avec `is_completed`."""
    data = doc.model_dump(by_alias=True) if isinstance(doc, BaseModel) else dict(doc)
    data["is_completed"] = data.get("undone_at") is None
    return data
