# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""System endpoints — health, readiness, metrics."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from member_directory.core.config import settings
from member_directory.core.dependencies import get_member_store
from member_directory.repositories.base import MemberStore

router = APIRouter(tags=["System"])


@router.get("/health")
async def health_check():
    return {"status": "ok", "service": settings.SERVICE_NAME, "version": settings.SERVICE_VERSION}


@router.get("/health/ready")
def readiness_check(store: MemberStore = Depends(get_member_store)):
    try:
        count = store.verify_connection()
        return {"status": "ok", "service": settings.SERVICE_NAME, "members_in_store": count}
    except Exception as exc:
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "service": settings.SERVICE_NAME, "detail": str(exc)},
        )


@router.get("/metrics")
async def prometheus_metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
