import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from services.ux_audit_service.db.models import UxAuditResult
from services.ux_audit_service.errors import PersistenceFailure
from services.ux_audit_service.schemas.audit import AuditRecord

logger = logging.getLogger(__name__)


class AuditStore:
    """Append-only store for completed audits. Records are inserted once and never updated."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self._sessionmaker = sessionmaker

    async def save(self, record: AuditRecord) -> None:
        row = UxAuditResult(
            audit_id=record.audit_id,
            url=record.url,
            page_type=record.page_type,
            score=record.score,
            page_speed=record.page_speed,
            created_at=record.created_at,
            sections=dict(record.sections),
            checklist=[entry.model_dump() for entry in record.checklist],
        )
        try:
            async with self._sessionmaker() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"could not persist audit {record.audit_id}", detail=str(e)) from e
        logger.info("Audit persisted", extra={"audit_id": record.audit_id, "url": record.url})
