from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health(request: Request) -> dict:
    return {
        "status": "ok",
        "service": request.app.title,
        "ts": datetime.now(timezone.utc).isoformat(),
    }
