# backend/chickcare/api/routes/flocks.py
# Routes élevages : création, listing, détail, patch (start / graduate / champs) et suppression en cascade.

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status

from chickcare.api.deps import OwnedFlock, Storage
from chickcare.core.security import CurrentUserId, get_current_user
from chickcare.models.flock_dto import DeleteResponse, FlockCreateIn, FlockOut, FlockPatchIn
from chickcare.services.flocks import create_flock, delete_flock, list_flocks, patch_flock

router = APIRouter(
    prefix="/flocks",
    tags=["flocks"],
    dependencies=[Depends(get_current_user)],
)


@router.post(
    "",
    response_model=FlockOut,
    status_code=status.HTTP_201_CREATED,
    summary="Créer un élevage",
    description=(
        "Crée un élevage pour l’utilisateur courant.\n\n"
        "- Sans `start_date` : statut `preparing`, semaine 0\n"
        "- Avec `start_date` : statut `active`, semaine 1\n"
        "- Nom par défaut : « My Flock »"
    ),
)
async def create(
    user_id: CurrentUserId,
    payload: FlockCreateIn | None = Body(default=None),
):
    """Créer un élevage.

    Args:
        payload (FlockCreateIn | None): Nom et date de départ optionnels (corps facultatif).

    Returns:
        FlockOut: Élevage créé.
    """
    payload = payload or FlockCreateIn()
    return await create_flock(user_id, payload.name, payload.start_date)


@router.get(
    "",
    response_model=list[FlockOut],
    summary="Lister mes élevages",
    description="Élevages de l’utilisateur courant, plus récents d’abord.",
)
async def list_mine(user_id: CurrentUserId):
    return await list_flocks(user_id)


@router.get(
    "/{flock_id}",
    response_model=FlockOut,
    summary="Détail d’un élevage",
)
async def get_one(flock: OwnedFlock):
    return flock


@router.patch(
    "/{flock_id}",
    response_model=FlockOut,
    summary="Modifier un élevage",
    description=(
        "Applique une action ou une mise à jour de champs.\n\n"
        "- `{\"action\": \"start\", \"start_date\"?}` : preparing → active (409 sinon)\n"
        "- `{\"action\": \"graduate\"}` ou `{\"status\": \"graduated\"}` : active → graduated\n"
        "- `name` : renommage (1–50 caractères)\n"
        "- `current_week`, `start_date` : élevage actif uniquement"
    ),
)
async def patch(flock: OwnedFlock, payload: FlockPatchIn = Body(...)):
    """Patch d’un élevage.

    Args:
        payload (FlockPatchIn): Action ou champs à modifier.

    Returns:
        FlockOut: Élevage mis à jour.
    """
    return await patch_flock(flock, payload)


@router.delete(
    "/{flock_id}",
    response_model=DeleteResponse,
    summary="Supprimer un élevage",
    description=(
        "Supprime l’élevage et tout ce qui en dépend.\n\n"
        "- Blobs photo supprimés d’abord (best-effort, échecs journalisés)\n"
        "- Puis photos, notes, poussins, complétions et l’élevage"
    ),
)
async def delete(flock: OwnedFlock, storage: Storage):
    deleted = await delete_flock(flock, storage)
    return {"success": True, "deleted": deleted}
