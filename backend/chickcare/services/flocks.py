# backend/chickcare/services/flocks.py
# Cycle de vie des élevages : création, démarrage, diplomation, patch et suppression en cascade.

from __future__ import annotations

import datetime as dt
from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument

from chickcare.core.bson_utils import dump_mongo
from chickcare.core.errors import InvalidTransition, ValidationFailed
from chickcare.core.logging_config import get_loggers
from chickcare.core.utils import as_utc, utcnow
from chickcare.db.mongodb import CHICK_NOTES, CHICK_PHOTOS, CHICKS, FLOCKS, get_collection
from chickcare.models.flock import DEFAULT_FLOCK_NAME, Flock
from chickcare.models.flock_dto import FlockPatchIn
from chickcare.services import completion_ledger
from chickcare.services.photo_storage import PhotoStorage

logger_main, logger_errors, data_logger = get_loggers()


async def create_flock(user_id: ObjectId, name: str | None = None, start_date: dt.datetime | None = None) -> Flock:
    """Crée un élevage.

    Description:
        Sans date de départ : statut `preparing`, semaine 0. Avec une date de départ :
        l’élevage est créé directement `active` en semaine 1.

    Args:
        user_id (ObjectId): Propriétaire.
        name (str | None): Nom, « My Flock » si absent.
        start_date (datetime | None): Date de départ optionnelle.

    Returns:
        Flock: Élevage persisté.
    """
    flock = Flock(user_id=user_id, name=name or DEFAULT_FLOCK_NAME)
    if start_date is not None:
        flock.status = "active"
        flock.start_date = as_utc(start_date)
        flock.current_week = 1

    coll = await get_collection(FLOCKS)
    res = await coll.insert_one(dump_mongo(flock, exclude_none=False))
    flock.id = res.inserted_id
    logger_main.info(f"Flock created id={flock.id} user={user_id} status={flock.status}")
    return flock


async def list_flocks(user_id: ObjectId) -> list[Flock]:
    """Élevages de l’utilisateur, plus récents d’abord."""
    coll = await get_collection(FLOCKS)
    cursor = coll.find({"user_id": user_id}, sort=[("created_at", -1), ("_id", -1)])
    return [Flock(**d) async for d in cursor]


async def start_flock(flock: Flock, start_date: dt.datetime | None = None) -> Flock:
    """Démarre un élevage en préparation (preparing → active).

    Description:
        Écriture conditionnelle sur `status == 'preparing'` : statut, date de départ
        et semaine 1 sont posés ensemble. Un élevage déjà actif ou diplômé n’est pas
        redémarré.

    Args:
        flock (Flock): Élevage (propriété déjà vérifiée).
        start_date (datetime | None): Date de départ, maintenant si absente.

    Returns:
        Flock: Élevage actif.

    Raises:
        InvalidTransition: L’élevage n’est pas en préparation.
    """
    coll = await get_collection(FLOCKS)
    ts = utcnow()
    doc = await coll.find_one_and_update(
        {"_id": flock.id, "status": "preparing"},
        {
            "$set": {
                "status": "active",
                "start_date": as_utc(start_date) if start_date else ts,
                "current_week": 1,
                "updated_at": ts,
            }
        },
        return_document=ReturnDocument.AFTER,
    )
    if doc is None:
        raise InvalidTransition(f"Cannot start a flock with status '{flock.status}'")

    logger_main.info(f"Flock started id={flock.id}")
    return Flock(**doc)


async def graduate_flock(flock: Flock) -> Flock:
    """Diplôme un élevage actif (active → graduated).

    Raises:
        InvalidTransition: L’élevage n’est pas actif.
    """
    coll = await get_collection(FLOCKS)
    doc = await coll.find_one_and_update(
        {"_id": flock.id, "status": "active"},
        {"$set": {"status": "graduated", "updated_at": utcnow()}},
        return_document=ReturnDocument.AFTER,
    )
    if doc is None:
        raise InvalidTransition(f"Cannot graduate a flock with status '{flock.status}'")

    logger_main.info(f"Flock graduated id={flock.id}")
    return Flock(**doc)


async def patch_flock(flock: Flock, patch: FlockPatchIn) -> Flock:
    """Applique un patch (action ou mise à jour de champs).

    Description:
        - `action=start` / `action=graduate` : transitions de statut.
        - `status` : seule la diplomation manuelle est acceptée.
        - `name` : renommage, quel que soit le statut.
        - `current_week` / `start_date` : uniquement sur un élevage actif (l’invariant
          « préparation ⇔ pas de date de départ ⇔ semaine 0 » est conservé).

    Raises:
        InvalidTransition: Transition interdite.
        ValidationFailed: Champ non modifiable dans l’état courant, ou patch vide.
    """
    fields = patch.model_fields_set

    if patch.action == "start":
        flock = await start_flock(flock, patch.start_date)
        fields = fields - {"action", "start_date"}
    elif patch.action == "graduate" or ("status" in fields and patch.status == "graduated"):
        flock = await graduate_flock(flock)
        fields = fields - {"action", "status"}
    elif "status" in fields:
        raise InvalidTransition(f"Status cannot be set to '{patch.status}'")

    updates: dict[str, Any] = {}
    if "name" in fields and patch.name is not None:
        updates["name"] = patch.name
    if "current_week" in fields and patch.current_week is not None:
        if flock.status != "active":
            raise ValidationFailed("current_week can only be changed on an active flock", details={"field": "current_week"})
        updates["current_week"] = patch.current_week
    if "start_date" in fields and patch.start_date is not None:
        if flock.status != "active":
            raise ValidationFailed("start_date can only be changed on an active flock", details={"field": "start_date"})
        updates["start_date"] = as_utc(patch.start_date)

    if not updates:
        if patch.action is None and "status" not in patch.model_fields_set:
            raise ValidationFailed("Nothing to update")
        return flock

    updates["updated_at"] = utcnow()
    coll = await get_collection(FLOCKS)
    doc = await coll.find_one_and_update(
        {"_id": flock.id}, {"$set": updates}, return_document=ReturnDocument.AFTER
    )
    return Flock(**doc)


async def delete_flock(flock: Flock, storage: PhotoStorage) -> dict[str, int]:
    """Supprime un élevage et tout ce qui en dépend.

    Description:
        Deux phases : (1) suppression best-effort des blobs photo (échecs journalisés,
        jamais bloquants) ; (2) suppression des documents photos, notes, poussins,
        complétions puis de l’élevage.

    Args:
        flock (Flock): Élevage (propriété déjà vérifiée).
        storage (PhotoStorage): Stockage des blobs.

    Returns:
        dict[str, int]: Compteurs de suppression par collection.
    """
    chicks_coll = await get_collection(CHICKS)
    photos_coll = await get_collection(CHICK_PHOTOS)
    notes_coll = await get_collection(CHICK_NOTES)
    flocks_coll = await get_collection(FLOCKS)

    chick_ids = [c["_id"] async for c in chicks_coll.find({"flock_id": flock.id}, {"_id": 1})]
    photos = await photos_coll.find({"chick_id": {"$in": chick_ids}}).to_list(length=None)
    urls: list[str] = []
    for p in photos:
        urls.extend([p["image_url"], p["thumbnail_url"]])
    chicks_with_profile = chicks_coll.find({"flock_id": flock.id, "photo_url": {"$ne": None}}, {"photo_url": 1})
    urls.extend([c["photo_url"] async for c in chicks_with_profile if c.get("photo_url") not in urls])
    blobs = await storage.delete_photos(urls)

    deleted = {
        "blobs": blobs,
        "photos": (await photos_coll.delete_many({"chick_id": {"$in": chick_ids}})).deleted_count,
        "notes": (await notes_coll.delete_many({"chick_id": {"$in": chick_ids}})).deleted_count,
        "chicks": (await chicks_coll.delete_many({"flock_id": flock.id})).deleted_count,
        "completions": await completion_ledger.delete_for_flock(flock.id),
        "flocks": (await flocks_coll.delete_one({"_id": flock.id})).deleted_count,
    }

    logger_main.info(f"Flock deleted id={flock.id} {deleted}")
    data_logger.log_data("delete_flock", {"flock_id": str(flock.id), "deleted": deleted}, {"user_id": str(flock.user_id)})
    return deleted
