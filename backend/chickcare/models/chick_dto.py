# backend/chickcare/models/chick_dto.py
# Schémas I/O pour les poussins, leurs photos et leurs notes.

from __future__ import annotations

import datetime as dt

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from chickcare.core.bson_utils import PyObjectId
from chickcare.models.chick import CHICK_NAME_MAX_LENGTH, NOTE_MAX_LENGTH


def _strip_or_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


def _required_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty")
    return v


class ChickCreateIn(BaseModel):
    name: str = Field(max_length=CHICK_NAME_MAX_LENGTH)
    breed: str | None = None
    hatch_date: dt.datetime | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("breed", "description", mode="before")
    @classmethod
    def _optional_text(cls, v):
        return _strip_or_none(v)


class ChickPatchIn(BaseModel):
    """Patch d’un poussin : seuls les champs envoyés sont modifiés, une valeur vide efface le champ."""

    name: str | None = Field(default=None, max_length=CHICK_NAME_MAX_LENGTH)
    breed: str | None = None
    hatch_date: dt.datetime | None = None
    description: str | None = None
    photo_url: str | None = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("Name cannot be empty")
        return _required_text(v)

    @field_validator("breed", "description", "photo_url", mode="before")
    @classmethod
    def _optional_text(cls, v):
        return _strip_or_none(v)

    @field_validator("hatch_date", mode="before")
    @classmethod
    def _optional_date(cls, v):
        return v or None


class PhotoOut(BaseModel):
    id: PyObjectId = Field(validation_alias=AliasChoices("_id", "id"))
    chick_id: PyObjectId
    image_url: str
    thumbnail_url: str
    taken_at: dt.datetime
    week_number: int | None = None

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)


class NoteIn(BaseModel):
    content: str = Field(max_length=NOTE_MAX_LENGTH)
    week_number: int | None = Field(default=None, ge=0)

    @field_validator("content")
    @classmethod
    def _check_content(cls, v: str) -> str:
        return _required_text(v)


class NotePatchIn(BaseModel):
    content: str = Field(max_length=NOTE_MAX_LENGTH)

    @field_validator("content")
    @classmethod
    def _check_content(cls, v: str) -> str:
        return _required_text(v)


class NoteOut(BaseModel):
    id: PyObjectId = Field(validation_alias=AliasChoices("_id", "id"))
    chick_id: PyObjectId
    content: str
    week_number: int | None = None
    created_at: dt.datetime
    updated_at: dt.datetime | None = None

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)


class ChickOut(BaseModel):
    id: PyObjectId = Field(validation_alias=AliasChoices("_id", "id"))
    flock_id: PyObjectId
    name: str
    breed: str | None = None
    hatch_date: dt.datetime | None = None
    description: str | None = None
    photo_url: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime | None = None

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)


class ChickListItemOut(ChickOut):
    """Élément de galerie : poussin + sa photo la plus récente."""

    latest_photo: PhotoOut | None = None


class ChickDetailOut(ChickOut):
    photos: list[PhotoOut] = Field(default_factory=list)
    notes: list[NoteOut] = Field(default_factory=list)
