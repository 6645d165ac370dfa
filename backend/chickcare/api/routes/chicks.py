# backend/chickcare/api/routes/chicks.py
# Routes poussins d'un élevage : galerie, création, détail, patch et suppression.

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status

from chickcare.api.deps import FlockChick, OwnedFlock, Storage
from chickcare.core.security import get_current_user
from chickcare.models.chick_dto import ChickCreateIn, ChickDetailOut, ChickListItemOut, ChickOut, ChickPatchIn
from chickcare.models.flock_dto import DeleteResponse
from chickcare.services.chicks import create_chick, delete_chick, get_chick_detail, list_chicks, update_chick

router = APIRouter(
    prefix="/flocks/{flock_id}/chicks",
    tags=["chicks"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "",
    response_model=list[ChickListItemOut],
    summary="Galerie des poussins",
    description="Poussins de l’élevage (ordre de création), chacun avec sa photo la plus récente.",
)
async def list_all(flock: OwnedFlock):
    return await list_chicks(flock)


@router.post(
    "",
    response_model=ChickOut,
    status_code=status.HTTP_201_CREATED,
    summary="Ajouter un poussin",
    description="Nom requis (≤ 50 caractères). Maximum 50 poussins par élevage.",
)
async def create(flock: OwnedFlock, payload: ChickCreateIn = Body(...)):
    """Ajouter un poussin.

    Args:
        payload (ChickCreateIn): Nom, race, date d’éclosion, description.

    Returns:
        ChickOut: Poussin créé.
    """
    return await create_chick(flock, payload)


@router.get(
    "/{chick_id}",
    response_model=ChickDetailOut,
    summary="Détail d’un poussin",
    description="Poussin avec ses photos et ses notes (plus récentes d’abord).",
)
async def get_one(chick: FlockChick):
    return await get_chick_detail(chick)


@router.patch(
    "/{chick_id}",
    response_model=ChickOut,
    summary="Modifier un poussin",
    description="Seuls les champs envoyés sont modifiés ; une valeur vide efface un champ optionnel.",
)
async def patch(chick: FlockChick, payload: ChickPatchIn = Body(...)):
    return await update_chick(chick, payload)


@router.delete(
    "/{chick_id}",
    response_model=DeleteResponse,
    summary="Supprimer un poussin",
    description="Blobs photo supprimés d’abord (best-effort), puis photos, notes et le poussin.",
)
async def delete(chick: FlockChick, storage: Storage):
    deleted = await delete_chick(chick, storage)
    return {"success": True, "deleted": deleted}
