# backend/chickcare/core/exception_handlers.py
# Gestionnaires d'exceptions globaux : erreurs métier, HTTP, validation et erreurs inattendues → enveloppe commune.

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chickcare.api.dto.response_format import ErrorResponse
from chickcare.core.errors import ChickCareError
from chickcare.core.logging_config import get_loggers


def register_exception_handlers(app: FastAPI):
    """Enregistre les gestionnaires d'exceptions globaux pour standardiser les réponses."""

    @app.exception_handler(ChickCareError)
    async def domain_exception_handler(request: Request, exc: ChickCareError):
        """Erreurs métier : code HTTP et code machine portés par l'exception."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse.from_detail(exc.to_detail()).to_content(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Gestionnaire pour les exceptions HTTP standards."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse.from_detail(
                {"code": f"HTTP_{exc.status_code}", "message": str(exc.detail)}
            ).to_content(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Gestionnaire pour les erreurs de validation Pydantic."""
        errors = []
        for error in exc.errors():
            errors.append(
                {
                    "field": " -> ".join(str(loc) for loc in error["loc"]),
                    "message": error["msg"],
                    "type": error["type"],
                }
            )

        return JSONResponse(
            status_code=422,
            content=ErrorResponse.from_detail(
                {"code": "VALIDATION_ERROR", "message": "Validation failed", "details": errors}
            ).to_content(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Exceptions non capturées : journalisées, message générique côté client."""
        _, error_logger, _ = get_loggers()
        error_logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc!r}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse.from_detail(
                {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"}
            ).to_content(),
        )
