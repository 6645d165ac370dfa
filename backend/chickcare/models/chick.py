# backend/chickcare/models/chick.py
# Poussins d'un élevage, avec leur journal photo et leurs notes.

from __future__ import annotations

import datetime as dt

from pydantic import Field

from chickcare.core.bson_utils import MongoBaseModel, PyObjectId
from chickcare.core.utils import utcnow

CHICK_NAME_MAX_LENGTH = 50
NOTE_MAX_LENGTH = 1000

MAX_CHICKS_PER_FLOCK = 50
MAX_PHOTOS_PER_CHICK = 100
MAX_NOTES_PER_CHICK = 50


class Chick(MongoBaseModel):
    """Document Mongo « Chick ».

    Attributes:
        flock_id (PyObjectId): Élevage parent.
        name (str): Nom (≤ 50 caractères).
        breed (str | None): Race.
        hatch_date (datetime | None): Date d'éclosion.
        description (str | None): Description libre.
        photo_url (str | None): Photo de profil.
    """

    flock_id: PyObjectId
    name: str
    breed: str | None = None
    hatch_date: dt.datetime | None = None
    description: str | None = None
    photo_url: str | None = None

    created_at: dt.datetime = Field(default_factory=lambda: utcnow())
    updated_at: dt.datetime | None = None


class ChickPhoto(MongoBaseModel):
    """Photo d'un poussin : deux blobs (image optimisée + vignette)."""

    chick_id: PyObjectId
    image_url: str
    thumbnail_url: str
    taken_at: dt.datetime = Field(default_factory=lambda: utcnow())
    week_number: int | None = None

    created_at: dt.datetime = Field(default_factory=lambda: utcnow())


class ChickNote(MongoBaseModel):
    """Note de journal d'un poussin."""

    chick_id: PyObjectId
    content: str
    week_number: int | None = None

    created_at: dt.datetime = Field(default_factory=lambda: utcnow())
    updated_at: dt.datetime | None = None
