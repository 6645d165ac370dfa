# backend/chickcare/main.py

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from chickcare.api.routes import routers
from chickcare.core.exception_handlers import register_exception_handlers
from chickcare.core.logging_config import get_loggers
from chickcare.core.middleware import MaxBodySizeMiddleware
from chickcare.core.settings import get_settings
from chickcare.db.seed_data import seed_tasks
from chickcare.db.seed_indexes import ensure_indexes

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- startup ---
    logger_main, _, _ = get_loggers()
    await ensure_indexes()

    if settings.seed_on_startup:
        await seed_tasks()  # idempotent (version du catalogue)

    logger_main.info(f"{settings.app_name} API started ({settings.environment})")
    yield


app = FastAPI(title=f"{settings.app_name} API", version=settings.api_version, lifespan=lifespan)
# Limite de taille des corps de requête (uploads photo)
app.add_middleware(
    MaxBodySizeMiddleware,
    max_body_size=settings.max_upload_bytes + settings.one_mb,  # marge pour l’enveloppe multipart
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

for r in routers:
    app.include_router(r)

# Blobs photo servis en statique (répertoire créé au premier upload)
app.mount(
    settings.uploads_base_url,
    StaticFiles(directory=Path(settings.uploads_dir), check_dir=False),
    name="uploads",
)
