# backend/chickcare/models/task.py
# Tâche du catalogue (programme de 8 semaines) : document Mongo et entrée de seed.

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from chickcare.core.bson_utils import MongoBaseModel

TaskFrequency = Literal["once", "daily", "weekly"]
TaskCategory = Literal[
    "preparation",
    "brooder_care",
    "feeding_water",
    "health_check",
    "milestone",
    "environment",
]


class TaskBase(BaseModel):
    """Champs d'une tâche du catalogue.

    Attributes:
        code (str): Identifiant stable du seed (ex. `w1-03`), clé d'upsert.
        title (str): Titre court.
        description (str): Résumé.
        detailed_content (str): Contenu long (conseils, listes).
        week_number (int): Semaine du programme (0 = préparation).
        day_number (int | None): Jour absolu depuis le départ (base 1), ou None = n'importe quel jour de la semaine.
        frequency (str): 'once' | 'daily' | 'weekly'.
        category (str): Regroupement d'affichage.
        sort_order (int): Départage d'affichage dans une semaine/un jour.
    """

    code: str
    title: str
    description: str
    detailed_content: str = ""
    week_number: int = Field(ge=0)
    day_number: int | None = Field(default=None, ge=1)
    frequency: TaskFrequency
    category: TaskCategory
    sort_order: int = 0


class Task(MongoBaseModel, TaskBase):
    """Document Mongo « Task » (lecture seule à l'exécution)."""


def is_applicable_today(task: TaskBase | dict, current_day: int) -> bool:
    """La tâche concerne-t-elle le jour courant de l'élevage ?

    Description:
        Vrai pour une tâche quotidienne, ou pour une tâche épinglée sur le jour
        `current_day`. Même prédicat côté serveur et côté client (activation des cases).

    Args:
        task (TaskBase | dict): Tâche (modèle ou document brut).
        current_day (int): Jour écoulé de l'élevage (0 si non démarré).

    Returns:
        bool: True si la tâche s'applique aujourd'hui.
    """
    if isinstance(task, dict):
        frequency, day_number = task.get("frequency"), task.get("day_number")
    else:
        frequency, day_number = task.frequency, task.day_number
    if frequency == "daily":
        return True
    return day_number is not None and day_number == current_day
