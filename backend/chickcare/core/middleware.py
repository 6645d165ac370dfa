# backend/chickcare/core/middleware.py
# Rejet précoce des corps de requête trop volumineux (uploads photo).

from collections.abc import Sequence

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from chickcare.api.dto.response_format import ErrorResponse
from chickcare.core.settings import get_settings

settings = get_settings()


class MaxBodySizeMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, max_body_size: int, exclude_paths: Sequence[str] = ()):
        super().__init__(app)
        self.max_body_size = max_body_size
        self.exclude_paths = exclude_paths

    async def dispatch(self, request, call_next):
        for p in self.exclude_paths:
            if request.url.path.startswith(p):
                return await call_next(request)

        cl = request.headers.get("content-length")
        if cl is not None:
            try:
                if int(cl) > self.max_body_size:
                    body = ErrorResponse.from_detail(
                        {
                            "code": "FILE_TOO_LARGE",
                            "message": f"Request body too large (>{self.max_body_size // settings.one_mb} MB).",
                        }
                    )
                    return JSONResponse(body.to_content(), status_code=413)
            except ValueError:
                # Content-Length invalide : la route fait le contrôle
                pass
        return await call_next(request)
