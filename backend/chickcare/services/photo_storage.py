# backend/chickcare/services/photo_storage.py
# Stockage des photos de poussins : validation, redimensionnement (Pillow) et blobs sur disque.

from __future__ import annotations

import io
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi.concurrency import run_in_threadpool
from PIL import Image, ImageOps, UnidentifiedImageError

from chickcare.core.errors import StorageError
from chickcare.core.logging_config import get_loggers
from chickcare.core.settings import get_settings

ALLOWED_TYPES = ("image/jpeg", "image/png", "image/webp")
OPTIMIZED_MAX_WIDTH = 800
THUMBNAIL_SIZE = 200


@dataclass
class UploadResult:
    image_url: str
    thumbnail_url: str


class PhotoStorage:
    """Service de stockage des blobs photo.

    Description:
        Écrit l’image optimisée (≤ 800 px de large, JPEG q85) et une vignette carrée
        (200×200, recadrage centré, JPEG q80) sous `uploads_dir`, et renvoie leurs URLs
        publiques. La suppression est « best-effort » : les échecs sont journalisés,
        jamais propagés.
    """

    def __init__(self, uploads_dir: Path | None = None, base_url: str | None = None, max_bytes: int | None = None):
        settings = get_settings()
        self.uploads_dir = (uploads_dir or Path(settings.uploads_dir)).resolve()
        self.base_url = (base_url or settings.uploads_base_url).rstrip("/")
        self.max_bytes = max_bytes or settings.max_upload_bytes

    def validate(self, data: bytes, content_type: str | None) -> None:
        """Contrôle le type et la taille.

        Raises:
            StorageError: `INVALID_TYPE` ou `FILE_TOO_LARGE`.
        """
        if content_type not in ALLOWED_TYPES:
            raise StorageError("Invalid file type. Allowed types: JPEG, PNG, WebP", code="INVALID_TYPE")
        if len(data) > self.max_bytes:
            raise StorageError(
                f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB", code="FILE_TOO_LARGE"
            )

    def process(self, data: bytes) -> tuple[bytes, bytes]:
        """Produit (image optimisée, vignette) en JPEG."""
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise StorageError("File is not a readable image", code="INVALID_TYPE") from e

        image = ImageOps.exif_transpose(image).convert("RGB")

        optimized = image.copy()
        if optimized.width > OPTIMIZED_MAX_WIDTH:
            ratio = OPTIMIZED_MAX_WIDTH / optimized.width
            optimized = optimized.resize((OPTIMIZED_MAX_WIDTH, max(1, round(optimized.height * ratio))))
        thumbnail = ImageOps.fit(image, (THUMBNAIL_SIZE, THUMBNAIL_SIZE), centering=(0.5, 0.5))

        optimized_buf, thumb_buf = io.BytesIO(), io.BytesIO()
        optimized.save(optimized_buf, format="JPEG", quality=85)
        thumbnail.save(thumb_buf, format="JPEG", quality=80)
        return optimized_buf.getvalue(), thumb_buf.getvalue()

    def _write(self, relative: str, payload: bytes) -> str:
        path = self.uploads_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
        return f"{self.base_url}/{relative}"

    def _path_for_url(self, url: str) -> Path | None:
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return None
        path = (self.uploads_dir / url[len(prefix):]).resolve()
        # Pas de sortie du répertoire d’uploads
        try:
            path.relative_to(self.uploads_dir)
        except ValueError:
            return None
        return path

    def _save(self, chick_id: str, data: bytes, content_type: str | None) -> UploadResult:
        self.validate(data, content_type)
        optimized, thumbnail = self.process(data)
        base = f"chicks/{chick_id}/{time.time_ns()}"
        try:
            image_url = self._write(f"{base}.jpg", optimized)
            thumbnail_url = self._write(f"{base}-thumb.jpg", thumbnail)
        except OSError as e:
            raise StorageError("Failed to store photo") from e
        return UploadResult(image_url=image_url, thumbnail_url=thumbnail_url)

    async def upload_chick_photo(self, chick_id: str, data: bytes, content_type: str | None) -> UploadResult:
        """Valide, redimensionne et stocke une photo ; renvoie les deux URLs."""
        return await run_in_threadpool(self._save, chick_id, data, content_type)

    def _delete(self, urls: list[str]) -> int:
        _, error_logger, _ = get_loggers()
        deleted = 0
        for url in urls:
            path = self._path_for_url(url)
            if path is None:
                error_logger.error(f"Failed to delete blob (unknown location): {url}")
                continue
            try:
                path.unlink(missing_ok=True)
                deleted += 1
            except OSError as e:
                error_logger.error(f"Failed to delete blob: {url} ({e})")
        return deleted

    async def delete_photos(self, urls: list[str]) -> int:
        """Supprime des blobs (best-effort). Renvoie le nombre de suppressions réussies."""
        if not urls:
            return 0
        return await run_in_threadpool(self._delete, urls)

    def check(self) -> str:
        """Health check : répertoire d’uploads accessible en écriture."""
        try:
            self.uploads_dir.mkdir(parents=True, exist_ok=True)
            probe = self.uploads_dir / ".healthcheck"
            probe.write_bytes(b"ok")
            probe.unlink()
            return "ok"
        except OSError as e:
            return f"error: {e}"


_storage: PhotoStorage | None = None


def get_photo_storage() -> PhotoStorage:
    """Dépendance FastAPI : instance partagée du stockage (surchargée dans les tests)."""
    global _storage
    if _storage is None:
        _storage = PhotoStorage()
    return _storage
