from services.ux_audit_service.middleware.cors import setup_cors
from services.ux_audit_service.middleware.logging import LoggingMiddleware
from services.ux_audit_service.middleware.error_handler import setup_error_handlers

__all__ = ["setup_cors", "LoggingMiddleware", "setup_error_handlers"]
