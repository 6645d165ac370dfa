# backend/chickcare/models/user.py
# Schémas utilisateur : document Mongo, payloads d’inscription/login, sorties publiques et tokens.

from __future__ import annotations

import datetime as dt

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from chickcare.core.bson_utils import MongoBaseModel, PyObjectId
from chickcare.core.utils import utcnow


class User(MongoBaseModel):
    """Document Mongo utilisateur.

    Attributes:
        username (str): Pseudo unique (insensible à la casse).
        email (EmailStr): Email unique (insensible à la casse).
        password_hash (str): Hash bcrypt.
        is_active (bool): Compte actif.
        created_at (datetime): Création (UTC).
        updated_at (datetime | None): MAJ.
    """

    username: str
    email: EmailStr
    password_hash: str = ""
    is_active: bool = True

    created_at: dt.datetime = Field(default_factory=lambda: utcnow())
    updated_at: dt.datetime | None = None


# Input/Output DTOs


class UserInRegister(BaseModel):
    """Entrée d’inscription.

    Attributes:
        username (str): 3–30 caractères.
        email (EmailStr): Email valide.
        password (str): ≥ 8 caractères.
    """

    username: str = Field(min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(min_length=8)


class UserOut(BaseModel):
    """Sortie publique utilisateur."""

    id: PyObjectId = Field(validation_alias=AliasChoices("_id", "id"))
    email: EmailStr
    username: str

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class RefreshTokenRequest(BaseModel):
    refresh_token: str
