# backend/chickcare/core/health_checks.py
# Vérifications de santé des dépendances (base MongoDB, répertoire des photos).

import logging

from fastapi.concurrency import run_in_threadpool

from chickcare.services.photo_storage import PhotoStorage

logger = logging.getLogger(__name__)


async def check_mongodb() -> str:
    """
    Vérifie la connexion MongoDB

    Returns:
        "ok" si connecté, message d'erreur sinon
    """
    try:
        from chickcare.db import mongodb

        await mongodb.db.command("ping")
        return "ok"

    except Exception as e:
        logger.error(f"MongoDB health check failed: {e}")
        return f"error: {str(e)}"


async def check_storage(storage: PhotoStorage) -> str:
    """
    Vérifie que le répertoire des photos est accessible en écriture

    Returns:
        "ok" si accessible, message d'erreur sinon
    """
    result = await run_in_threadpool(storage.check)
    if result != "ok":
        logger.error(f"Storage health check failed: {result}")
    return result
