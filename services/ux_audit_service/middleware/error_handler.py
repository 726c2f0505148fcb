from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.logging_config import get_logger
from services.ux_audit_service.errors import InvalidInput, UxAuditError

logger = get_logger(__name__)

GENERIC_ERROR = UxAuditError.public_message


def error_body(request: Request, message: str) -> dict:
    return {
        "error": message,
        "request_id": getattr(request.state, "request_id", "unknown"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def setup_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(UxAuditError)
    async def audit_error_handler(request: Request, exc: UxAuditError):
        extra = {
            "request_id": getattr(request.state, "request_id", "unknown"),
            "kind": exc.kind,
            "error": str(exc),
            "detail": exc.detail,
            "path": request.url.path,
        }
        if exc.status_code < 500:
            logger.warning("Audit request rejected", extra=extra)
        else:
            logger.error("Audit failed", extra=extra)

        return JSONResponse(status_code=exc.status_code, content=error_body(request, exc.public_message))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        logger.warning(
            "Validation error",
            extra={
                "request_id": getattr(request.state, "request_id", "unknown"),
                "kind": InvalidInput.kind,
                "errors": errors,
                "path": request.url.path,
            }
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(request, InvalidInput.public_message),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            "HTTP exception",
            extra={
                "request_id": getattr(request.state, "request_id", "unknown"),
                "status_code": exc.status_code,
                "detail": exc.detail,
                "path": request.url.path,
            }
        )
        return JSONResponse(status_code=exc.status_code, content=error_body(request, str(exc.detail)))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            extra={
                "request_id": getattr(request.state, "request_id", "unknown"),
                "error": str(exc),
                "error_type": type(exc).__name__,
                "path": request.url.path,
            },
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(request, GENERIC_ERROR),
        )
