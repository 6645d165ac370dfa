# backend/chickcare/api/routes/chick_notes.py
# Notes de journal d'un poussin : liste, ajout, modification, suppression.

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Path, status

from chickcare.api.deps import FlockChick
from chickcare.core.security import get_current_user
from chickcare.models.chick_dto import NoteIn, NoteOut, NotePatchIn
from chickcare.models.flock_dto import DeleteResponse
from chickcare.services.chicks import add_note, delete_note, list_notes, update_note
from chickcare.services.ownership import get_chick_note

router = APIRouter(
    prefix="/flocks/{flock_id}/chicks/{chick_id}/notes",
    tags=["chick-notes"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=list[NoteOut], summary="Notes d’un poussin")
async def list_all(chick: FlockChick):
    return await list_notes(chick)


@router.post(
    "",
    response_model=NoteOut,
    status_code=status.HTTP_201_CREATED,
    summary="Ajouter une note",
    description="Contenu requis (≤ 1000 caractères). Maximum 50 notes par poussin.",
)
async def create(chick: FlockChick, payload: NoteIn = Body(...)):
    return await add_note(chick, payload)


@router.patch("/{note_id}", response_model=NoteOut, summary="Modifier une note")
async def patch(
    chick: FlockChick,
    payload: NotePatchIn = Body(...),
    note_id: str = Path(..., description="Identifiant de la note."),
):
    note = await get_chick_note(chick, note_id)
    return await update_note(note, payload.content)


@router.delete("/{note_id}", response_model=DeleteResponse, summary="Supprimer une note")
async def delete(chick: FlockChick, note_id: str = Path(..., description="Identifiant de la note.")):
    note = await get_chick_note(chick, note_id)
    await delete_note(note)
    return {"success": True, "deleted": {"notes": 1}}
