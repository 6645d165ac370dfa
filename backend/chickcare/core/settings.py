# backend/chickcare/core/settings.py
# Configuration applicative (pydantic-settings, fichier .env), exposée via `get_settings()`.

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === App settings ===
    app_name: str = "ChickCare"
    environment: str = "development"  # or "production"
    api_version: str = "0.1.0"

    # === MongoDB ===
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "chickcare"

    # === JWT ===
    jwt_secret_key: str = "dev-only-change-me"
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 60 * 24  # 1 day

    # === SCHEDULING ===
    reference_timezone: str = "America/Los_Angeles"
    curriculum_weeks: int = 8

    # === OWNERSHIP ===
    # True: une ressource d'un autre utilisateur est signalée en 404 (pas de 403)
    hide_foreign_resources: bool = False

    # === UPLOAD / PHOTOS ===
    uploads_dir: str = "../uploads/photos"
    uploads_base_url: str = "/uploads/photos"
    one_mb: int = 1024 * 1024
    max_upload_mb: int = 5

    # === LOGGING ===
    logs_dir: str = "logs"
    log_to_file: bool = True

    # === SEED ===
    seed_on_startup: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * self.one_mb


@lru_cache
def get_settings() -> Settings:
    """Instance unique des settings (cache process)."""
    return Settings()
