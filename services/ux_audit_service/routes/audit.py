from fastapi import APIRouter, Depends, Request

from config.logging_config import get_logger
from services.ux_audit_service.audit_pipeline import UxAuditPipeline
from services.ux_audit_service.errors import UxAuditError
from services.ux_audit_service.schemas.audit import AnalyzeRequest, AnalyzeResponse

logger = get_logger(__name__)
router = APIRouter(tags=["Audit"])


def get_pipeline(request: Request) -> UxAuditPipeline:
    return request.app.state.pipeline


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    payload: AnalyzeRequest,
    request: Request,
    pipeline: UxAuditPipeline = Depends(get_pipeline),
) -> AnalyzeResponse:
    try:
        record = await pipeline.run(payload)
    except UxAuditError:
        raise
    except Exception as e:
        logger.error(
            "Unexpected audit failure",
            extra={"request_id": getattr(request.state, "request_id", "unknown"), "error_type": type(e).__name__},
            exc_info=True,
        )
        raise UxAuditError(f"unexpected failure: {type(e).__name__}", detail=str(e)) from e

    return AnalyzeResponse.from_record(record)
