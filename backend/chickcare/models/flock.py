# backend/chickcare/models/flock.py
# Élevage (cohorte de poussins d'un utilisateur) : document Mongo et statut.

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import Field

from chickcare.core.bson_utils import MongoBaseModel, PyObjectId
from chickcare.core.utils import utcnow

FlockStatus = Literal["preparing", "active", "graduated"]

FLOCK_NAME_MAX_LENGTH = 50
DEFAULT_FLOCK_NAME = "My Flock"


class Flock(MongoBaseModel):
    """Document Mongo « Flock ».

    Description:
        Invariant : status == 'preparing' ⇔ start_date is None ⇔ current_week == 0.
        Le départ (preparing → active) fixe start_date et current_week=1 en une seule écriture.

    Attributes:
        user_id (PyObjectId): Propriétaire (jamais partagé).
        name (str): Nom (≤ 50 caractères).
        status (str): 'preparing' | 'active' | 'graduated'.
        start_date (datetime | None): Ancre de tous les calculs de dates.
        current_week (int): Semaine mémorisée (commodité, 0 en préparation).
        created_at (datetime): Création (UTC).
        updated_at (datetime | None): MAJ.
    """

    user_id: PyObjectId
    name: str = Field(default=DEFAULT_FLOCK_NAME, max_length=FLOCK_NAME_MAX_LENGTH)
    status: FlockStatus = "preparing"
    start_date: dt.datetime | None = None
    current_week: int = 0

    created_at: dt.datetime = Field(default_factory=lambda: utcnow())
    updated_at: dt.datetime | None = None
