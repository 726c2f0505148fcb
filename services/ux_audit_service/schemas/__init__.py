from services.ux_audit_service.schemas.audit import (
    AnalyzeRequest,
    AnalyzeResponse,
    AuditRecord,
    AuditResult,
    ChecklistEntry,
    PageType,
    SECTION_NAMES,
)

__all__ = [
    "AnalyzeRequest",
    "AnalyzeResponse",
    "AuditRecord",
    "AuditResult",
    "ChecklistEntry",
    "PageType",
    "SECTION_NAMES",
]
