# backend/chickcare/core/errors.py
# Exceptions métier : chaque classe porte son code HTTP et un code machine pour l'enveloppe d'erreur.

from __future__ import annotations

from typing import Any


class ChickCareError(Exception):
    """Base des erreurs métier.

    Description:
        Levée par les services, traduite en réponse JSON par
        `register_exception_handlers`. Jamais retentée automatiquement.

    Attributes:
        status_code (int): Code HTTP renvoyé au client.
        code (str): Code machine (ex. `NOT_FOUND`).
        message (str): Message lisible.
        details (Any): Détails optionnels (ex. champ fautif).
    """

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, *, code: str | None = None, details: Any = None):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        self.details = details
        super().__init__(self.message)

    def to_detail(self) -> dict[str, Any]:
        detail: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            detail["details"] = self.details
        return detail


# --- 400 ---
class ValidationFailed(ChickCareError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class LimitExceeded(ChickCareError):
    status_code = 400
    code = "LIMIT_EXCEEDED"
    default_message = "Limit exceeded"


class StorageError(ChickCareError):
    """Échec du collaborateur de stockage photo (type, taille, écriture)."""

    status_code = 400
    code = "STORAGE_ERROR"
    default_message = "Photo storage failed"


# --- 403 ---
class ForbiddenError(ChickCareError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Forbidden"


# --- 404 ---
class NotFoundError(ChickCareError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Not found"


class FlockNotFound(NotFoundError):
    default_message = "Flock not found"


class ChickNotFound(NotFoundError):
    default_message = "Chick not found"


class PhotoNotFound(NotFoundError):
    default_message = "Photo not found"


class NoteNotFound(NotFoundError):
    default_message = "Note not found"


class TaskNotFound(NotFoundError):
    default_message = "Task not found"


class CompletionNotFound(NotFoundError):
    default_message = "No completion recorded for this task and day"


# --- 409 ---
class InvalidTransition(ChickCareError):
    status_code = 409
    code = "INVALID_TRANSITION"
    default_message = "Invalid status transition"
