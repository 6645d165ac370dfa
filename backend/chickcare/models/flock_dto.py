# backend/chickcare/models/flock_dto.py
# Schémas I/O pour les routes élevages (création, patch, sortie).

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from chickcare.core.bson_utils import PyObjectId
from chickcare.models.flock import FLOCK_NAME_MAX_LENGTH, FlockStatus


def _clean_name(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be empty")
    return v


class FlockCreateIn(BaseModel):
    """Entrée de création d’élevage.

    Attributes:
        name (str | None): Nom (≤ 50), « My Flock » si absent.
        start_date (datetime | None): Si fourni, l’élevage est créé directement actif.
    """

    name: str | None = Field(default=None, max_length=FLOCK_NAME_MAX_LENGTH)
    start_date: dt.datetime | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _blank_is_default(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class FlockPatchIn(BaseModel):
    """Entrée de patch d’élevage.

    Description:
        Soit une action (`start` | `graduate`), soit une mise à jour de champs.
        `status` n’accepte que la diplomation manuelle (`graduated`).

    Attributes:
        action (str | None): 'start' | 'graduate'.
        name (str | None): Nouveau nom.
        start_date (datetime | None): Départ (pour `start`, ou ré-ancrage d’un élevage actif).
        current_week (int | None): Semaine mémorisée (élevage actif).
        status (str | None): Nouveau statut.
    """

    action: Literal["start", "graduate"] | None = None
    name: str | None = Field(default=None, max_length=FLOCK_NAME_MAX_LENGTH)
    start_date: dt.datetime | None = None
    current_week: int | None = Field(default=None, ge=1)
    status: FlockStatus | None = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, v):
        return _clean_name(v)


class FlockOut(BaseModel):
    id: PyObjectId = Field(validation_alias=AliasChoices("_id", "id"))
    user_id: PyObjectId
    name: str
    status: FlockStatus
    start_date: dt.datetime | None = None
    current_week: int
    created_at: dt.datetime
    updated_at: dt.datetime | None = None

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)


class DeleteResponse(BaseModel):
    success: bool = True
    deleted: dict[str, int] = Field(default_factory=dict)
