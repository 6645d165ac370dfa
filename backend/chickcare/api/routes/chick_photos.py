# backend/chickcare/api/routes/chick_photos.py
# Journal photo d'un poussin : liste, upload (multipart) et suppression.

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Path, UploadFile, status

from chickcare.api.deps import FlockChick, OwnedFlock, Storage
from chickcare.core.security import get_current_user
from chickcare.models.chick_dto import PhotoOut
from chickcare.models.flock_dto import DeleteResponse
from chickcare.services.chicks import add_photo, delete_photo, list_photos
from chickcare.services.ownership import get_chick_photo

router = APIRouter(
    prefix="/flocks/{flock_id}/chicks/{chick_id}/photos",
    tags=["chick-photos"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "",
    response_model=list[PhotoOut],
    summary="Photos d’un poussin",
)
async def list_all(chick: FlockChick):
    return await list_photos(chick)


@router.post(
    "",
    response_model=PhotoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Ajouter une photo",
    description=(
        "Upload multipart (`file`).\n\n"
        "- JPEG, PNG ou WebP, 5 Mo maximum\n"
        "- Stockée en image optimisée (≤ 800 px) + vignette 200×200\n"
        "- `week_number` déduit de la date de départ de l’élevage\n"
        "- Maximum 100 photos par poussin"
    ),
)
async def upload(
    flock: OwnedFlock,
    chick: FlockChick,
    storage: Storage,
    file: UploadFile = File(..., description="Image (JPEG, PNG, WebP)."),
):
    """Upload d’une photo.

    Args:
        file (UploadFile): Fichier image.

    Returns:
        PhotoOut: Photo enregistrée.
    """
    data = await file.read()
    return await add_photo(flock, chick, data, file.content_type, storage)


@router.delete(
    "/{photo_id}",
    response_model=DeleteResponse,
    summary="Supprimer une photo",
    description="Supprime les blobs (best-effort) puis l’enregistrement.",
)
async def delete(
    chick: FlockChick,
    storage: Storage,
    photo_id: str = Path(..., description="Identifiant de la photo."),
):
    photo = await get_chick_photo(chick, photo_id)
    await delete_photo(photo, storage)
    return {"success": True, "deleted": {"photos": 1}}
