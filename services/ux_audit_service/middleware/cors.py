from datetime import datetime, timezone
from typing import Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from config.logging_config import get_logger

logger = get_logger(__name__)


class OriginAllowListMiddleware(BaseHTTPMiddleware):
    """Rejects cross-origin calls from origins outside the allow-list before routing."""

    def __init__(self, app, allowed_origins: list[str]):
        super().__init__(app)
        self.allow_all = "*" in allowed_origins
        self.allowed_origins = set(allowed_origins)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        origin = request.headers.get("origin")
        if origin and not self.allow_all and origin not in self.allowed_origins:
            logger.warning("Rejected cross-origin request", extra={"origin": origin, "path": request.url.path})
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={
                    "error": "Origin not allowed",
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                },
            )
        return await call_next(request)


def setup_cors(app: FastAPI, origins: list[str]) -> None:
    app.add_middleware(OriginAllowListMiddleware, allowed_origins=origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
        max_age=3600
    )
