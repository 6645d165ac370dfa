# backend/chickcare/api/deps.py
# Dépendances FastAPI partagées : élevage possédé, poussin de l'élevage, stockage photo.

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, Path

from chickcare.core.security import CurrentUserId
from chickcare.models.flock import Flock
from chickcare.services.ownership import get_flock_chick, get_owned_flock
from chickcare.services.photo_storage import PhotoStorage, get_photo_storage


async def owned_flock(
    user_id: CurrentUserId,
    flock_id: str = Path(..., description="Identifiant de l’élevage."),
) -> Flock:
    """Élevage du chemin, après contrôle de propriété (404 / 403)."""
    return await get_owned_flock(user_id, flock_id)


async def flock_chick(
    flock: Annotated[Flock, Depends(owned_flock)],
    chick_id: str = Path(..., description="Identifiant du poussin."),
) -> dict[str, Any]:
    """Poussin du chemin, rattaché à l’élevage possédé (404 sinon)."""
    return await get_flock_chick(flock, chick_id)


OwnedFlock = Annotated[Flock, Depends(owned_flock)]
FlockChick = Annotated[dict, Depends(flock_chick)]
Storage = Annotated[PhotoStorage, Depends(get_photo_storage)]
