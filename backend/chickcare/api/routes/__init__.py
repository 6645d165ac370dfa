# backend/chickcare/api/routes/__init__.py

from .base import router as base_router
from .health import router as health_router
from .auth import router as auth_router
from .flocks import router as flocks_router
from .flock_tasks import router as flock_tasks_router
from .completions import router as completions_router
from .tasks import router as tasks_router
from .chicks import router as chicks_router
from .chick_photos import router as chick_photos_router
from .chick_notes import router as chick_notes_router
from .guides import router as guides_router

routers = [
    base_router,
    health_router,
    auth_router,
    flocks_router,
    flock_tasks_router,
    completions_router,
    tasks_router,
    chicks_router,
    chick_photos_router,
    chick_notes_router,
    guides_router,
]
