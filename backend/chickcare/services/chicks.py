# backend/chickcare/services/chicks.py
# Poussins d'un élevage : CRUD avec limites, journal photo (via le stockage) et notes.

from __future__ import annotations

import datetime as dt
from typing import Any

from pymongo import ReturnDocument

from chickcare.core.bson_utils import dump_mongo
from chickcare.core.calendar_utils import elapsed_days, week_of
from chickcare.core.errors import LimitExceeded, ValidationFailed
from chickcare.core.logging_config import get_loggers
from chickcare.core.utils import as_utc, utcnow
from chickcare.db.mongodb import CHICK_NOTES, CHICK_PHOTOS, CHICKS, get_collection
from chickcare.models.chick import (
    MAX_CHICKS_PER_FLOCK,
    MAX_NOTES_PER_CHICK,
    MAX_PHOTOS_PER_CHICK,
    Chick,
    ChickNote,
    ChickPhoto,
)
from chickcare.models.chick_dto import ChickCreateIn, ChickPatchIn, NoteIn
from chickcare.models.flock import Flock
from chickcare.services.photo_storage import PhotoStorage

logger_main = get_loggers()[0]


# --- Poussins ---


async def list_chicks(flock: Flock) -> list[dict[str, Any]]:
    """Galerie d’un élevage : poussins (ordre de création) avec leur photo la plus récente."""
    chicks_coll = await get_collection(CHICKS)
    photos_coll = await get_collection(CHICK_PHOTOS)

    chicks = await chicks_coll.find({"flock_id": flock.id}, sort=[("created_at", 1), ("_id", 1)]).to_list(length=None)
    for chick in chicks:
        chick["latest_photo"] = await photos_coll.find_one(
            {"chick_id": chick["_id"]}, sort=[("taken_at", -1), ("_id", -1)]
        )
    return chicks


async def create_chick(flock: Flock, payload: ChickCreateIn) -> Chick:
    """Ajoute un poussin à l’élevage.

    Raises:
        LimitExceeded: L’élevage compte déjà `MAX_CHICKS_PER_FLOCK` poussins.
    """
    coll = await get_collection(CHICKS)
    if await coll.count_documents({"flock_id": flock.id}) >= MAX_CHICKS_PER_FLOCK:
        raise LimitExceeded(f"Maximum of {MAX_CHICKS_PER_FLOCK} chicks per flock")

    data = payload.model_dump()
    if data.get("hatch_date") is not None:
        data["hatch_date"] = as_utc(data["hatch_date"])
    chick = Chick(flock_id=flock.id, **data)
    res = await coll.insert_one(dump_mongo(chick, exclude_none=False))
    chick.id = res.inserted_id
    logger_main.info(f"Chick created id={chick.id} flock={flock.id}")
    return chick


async def get_chick_detail(chick: dict[str, Any]) -> dict[str, Any]:
    """Poussin avec ses photos (plus récentes d’abord) et ses notes (plus récentes d’abord)."""
    photos_coll = await get_collection(CHICK_PHOTOS)
    notes_coll = await get_collection(CHICK_NOTES)
    photos = await photos_coll.find({"chick_id": chick["_id"]}, sort=[("taken_at", -1), ("_id", -1)]).to_list(length=None)
    notes = await notes_coll.find({"chick_id": chick["_id"]}, sort=[("created_at", -1), ("_id", -1)]).to_list(length=None)
    return {**chick, "photos": photos, "notes": notes}


async def update_chick(chick: dict[str, Any], payload: ChickPatchIn) -> dict[str, Any]:
    """Met à jour les champs envoyés (une valeur vide efface un champ optionnel).

    Raises:
        ValidationFailed: Aucun champ à mettre à jour.
    """
    fields = payload.model_fields_set
    if not fields:
        raise ValidationFailed("Nothing to update")

    updates = {f: getattr(payload, f) for f in fields}
    if updates.get("hatch_date") is not None:
        updates["hatch_date"] = as_utc(updates["hatch_date"])
    updates["updated_at"] = utcnow()

    coll = await get_collection(CHICKS)
    return await coll.find_one_and_update(
        {"_id": chick["_id"]}, {"$set": updates}, return_document=ReturnDocument.AFTER
    )


async def delete_chick(chick: dict[str, Any], storage: PhotoStorage) -> dict[str, int]:
    """Supprime un poussin : blobs (best-effort), puis photos, notes et le poussin."""
    photos_coll = await get_collection(CHICK_PHOTOS)
    notes_coll = await get_collection(CHICK_NOTES)
    chicks_coll = await get_collection(CHICKS)

    urls: list[str] = []
    async for p in photos_coll.find({"chick_id": chick["_id"]}):
        urls.extend([p["image_url"], p["thumbnail_url"]])
    if chick.get("photo_url") and chick["photo_url"] not in urls:
        urls.append(chick["photo_url"])
    blobs = await storage.delete_photos(urls)

    deleted = {
        "blobs": blobs,
        "photos": (await photos_coll.delete_many({"chick_id": chick["_id"]})).deleted_count,
        "notes": (await notes_coll.delete_many({"chick_id": chick["_id"]})).deleted_count,
        "chicks": (await chicks_coll.delete_one({"_id": chick["_id"]})).deleted_count,
    }
    logger_main.info(f"Chick deleted id={chick['_id']} {deleted}")
    return deleted


# --- Photos ---


def photo_week_number(flock: Flock, now: dt.datetime | None = None) -> int | None:
    """Semaine du programme à la prise de vue (None si l’élevage n’a pas démarré)."""
    if flock.start_date is None:
        return None
    day = elapsed_days(flock.start_date, now)
    if day < 1:
        return None
    return week_of(day)


async def list_photos(chick: dict[str, Any]) -> list[dict[str, Any]]:
    coll = await get_collection(CHICK_PHOTOS)
    return await coll.find({"chick_id": chick["_id"]}, sort=[("taken_at", -1), ("_id", -1)]).to_list(length=None)


async def add_photo(
    flock: Flock,
    chick: dict[str, Any],
    data: bytes,
    content_type: str | None,
    storage: PhotoStorage,
    now: dt.datetime | None = None,
) -> ChickPhoto:
    """Ajoute une photo au journal d’un poussin.

    Description:
        Contrôle la limite, délègue l’upload au stockage (un échec d’upload fait
        échouer l’opération), puis enregistre la photo avec sa semaine.

    Raises:
        LimitExceeded: `MAX_PHOTOS_PER_CHICK` atteint.
        StorageError: Type/taille refusés ou écriture impossible.
    """
    coll = await get_collection(CHICK_PHOTOS)
    if await coll.count_documents({"chick_id": chick["_id"]}) >= MAX_PHOTOS_PER_CHICK:
        raise LimitExceeded(f"Maximum of {MAX_PHOTOS_PER_CHICK} photos per chick")

    uploaded = await storage.upload_chick_photo(str(chick["_id"]), data, content_type)
    photo = ChickPhoto(
        chick_id=chick["_id"],
        image_url=uploaded.image_url,
        thumbnail_url=uploaded.thumbnail_url,
        taken_at=now or utcnow(),
        week_number=photo_week_number(flock, now),
    )
    res = await coll.insert_one(dump_mongo(photo, exclude_none=False))
    photo.id = res.inserted_id
    logger_main.info(f"Photo added id={photo.id} chick={chick['_id']}")
    return photo


async def delete_photo(photo: dict[str, Any], storage: PhotoStorage) -> None:
    """Supprime les blobs d’une photo (best-effort), puis son enregistrement."""
    await storage.delete_photos([photo["image_url"], photo["thumbnail_url"]])
    coll = await get_collection(CHICK_PHOTOS)
    await coll.delete_one({"_id": photo["_id"]})


# --- Notes ---


async def list_notes(chick: dict[str, Any]) -> list[dict[str, Any]]:
    coll = await get_collection(CHICK_NOTES)
    return await coll.find({"chick_id": chick["_id"]}, sort=[("created_at", -1), ("_id", -1)]).to_list(length=None)


async def add_note(chick: dict[str, Any], payload: NoteIn) -> ChickNote:
    """Ajoute une note.

    Raises:
        LimitExceeded: `MAX_NOTES_PER_CHICK` atteint.
    """
    coll = await get_collection(CHICK_NOTES)
    if await coll.count_documents({"chick_id": chick["_id"]}) >= MAX_NOTES_PER_CHICK:
        raise LimitExceeded(f"Maximum of {MAX_NOTES_PER_CHICK} notes per chick")

    note = ChickNote(chick_id=chick["_id"], content=payload.content, week_number=payload.week_number)
    res = await coll.insert_one(dump_mongo(note, exclude_none=False))
    note.id = res.inserted_id
    return note


async def update_note(note: dict[str, Any], content: str) -> dict[str, Any]:
    coll = await get_collection(CHICK_NOTES)
    return await coll.find_one_and_update(
        {"_id": note["_id"]},
        {"$set": {"content": content, "updated_at": utcnow()}},
        return_document=ReturnDocument.AFTER,
    )


async def delete_note(note: dict[str, Any]) -> None:
    coll = await get_collection(CHICK_NOTES)
    await coll.delete_one({"_id": note["_id"]})
