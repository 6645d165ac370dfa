# backend/chickcare/api/dto/response_format.py
# Enveloppe d'erreur commune à toute l'API : {"success": false, "error": {code, message, details?}}.

from typing import Any, Union

from pydantic import BaseModel, Field


class ErrorBody(BaseModel):
    """Corps d'erreur : code machine (`NOT_FOUND`, `INVALID_TRANSITION`, …), message lisible, détails éventuels."""

    code: str = Field(..., examples=["INVALID_TRANSITION"])
    message: str = Field(..., examples=["Flock is not in 'preparing' status"])
    details: Any | None = None


class ErrorResponse(BaseModel):
    """Format standardisé pour les réponses d'erreur."""

    success: bool = False
    error: ErrorBody

    @classmethod
    def from_detail(cls, detail: Union[str, dict[str, Any]], code: str = "VALIDATION_ERROR") -> "ErrorResponse":
        """Construit l'enveloppe depuis un message seul ou un dict `{code, message, details?}`."""
        if isinstance(detail, str):
            return cls(error=ErrorBody(code=code, message=detail))
        return cls(error=ErrorBody(**{"code": code, **detail}))

    def to_content(self) -> dict[str, Any]:
        """Contenu JSON de la réponse ; `details` omis quand absent."""
        return self.model_dump(mode="json", exclude_none=True)
