# backend/chickcare/services/ownership.py
# Garde de propriété : toute opération sur un élevage (et ses poussins, photos, notes) est limitée à son propriétaire.

from __future__ import annotations

from typing import Any

from bson import ObjectId

from chickcare.core.bson_utils import to_object_id
from chickcare.core.errors import ChickNotFound, FlockNotFound, ForbiddenError, NoteNotFound, PhotoNotFound
from chickcare.core.settings import get_settings
from chickcare.db.mongodb import CHICK_NOTES, CHICK_PHOTOS, CHICKS, FLOCKS, get_collection
from chickcare.models.flock import Flock


async def get_owned_flock(user_id: ObjectId, flock_id: ObjectId | str) -> Flock:
    """Charge un élevage appartenant à l’utilisateur.

    Description:
        404 si l’élevage n’existe pas ; 403 s’il appartient à un autre utilisateur,
        sauf si `hide_foreign_resources` est actif (404 dans les deux cas, sans
        révéler l’existence de la ressource).

    Args:
        user_id (ObjectId): Utilisateur courant.
        flock_id (ObjectId | str): Élevage demandé.

    Returns:
        Flock: Élevage du propriétaire.

    Raises:
        FlockNotFound: Élevage absent (ou étranger en mode masqué).
        ForbiddenError: Élevage d’un autre utilisateur.
    """
    coll = await get_collection(FLOCKS)
    doc = await coll.find_one({"_id": to_object_id(flock_id, FlockNotFound)})
    if doc is None:
        raise FlockNotFound()
    if doc["user_id"] != user_id:
        if get_settings().hide_foreign_resources:
            raise FlockNotFound()
        raise ForbiddenError()
    return Flock(**doc)


async def get_flock_chick(flock: Flock, chick_id: ObjectId | str) -> dict[str, Any]:
    """Poussin appartenant à l’élevage (un poussin d’un autre élevage est 404)."""
    coll = await get_collection(CHICKS)
    doc = await coll.find_one({"_id": to_object_id(chick_id, ChickNotFound)})
    if doc is None or doc["flock_id"] != flock.id:
        raise ChickNotFound()
    return doc


async def get_chick_photo(chick: dict[str, Any], photo_id: ObjectId | str) -> dict[str, Any]:
    coll = await get_collection(CHICK_PHOTOS)
    doc = await coll.find_one({"_id": to_object_id(photo_id, PhotoNotFound)})
    if doc is None or doc["chick_id"] != chick["_id"]:
        raise PhotoNotFound()
    return doc


async def get_chick_note(chick: dict[str, Any], note_id: ObjectId | str) -> dict[str, Any]:
    coll = await get_collection(CHICK_NOTES)
    doc = await coll.find_one({"_id": to_object_id(note_id, NoteNotFound)})
    if doc is None or doc["chick_id"] != chick["_id"]:
        raise NoteNotFound()
    return doc
