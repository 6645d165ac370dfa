# backend/chickcare/models/base/health.py
# Réponse de /health : statut global, version, état de la base et du stockage photo.

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from chickcare.core.utils import utcnow


class HealthCheck(BaseModel):
    """Statut global (`degraded` dès qu'une dépendance échoue) et détail par dépendance."""

    status: Literal["ok", "degraded"]
    service: str = "ChickCare"
    timestamp: datetime = Field(default_factory=utcnow)
    version: str
    checks: dict[Literal["database", "storage"], str] = Field(
        ..., description="'ok' ou 'error: <raison>' par dépendance"
    )

    @property
    def healthy(self) -> bool:
        return self.status == "ok"

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "degraded",
                "service": "ChickCare",
                "timestamp": "2026-03-02T10:30:00Z",
                "version": "0.1.0",
                "checks": {"database": "ok", "storage": "error: uploads directory not writable"},
            }
        }
    )
