from services.ux_audit_service.routes.audit import router as audit_router
from services.ux_audit_service.routes.health import router as health_router

__all__ = ["audit_router", "health_router"]
