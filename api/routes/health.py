"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
import platform

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from api.dependencies import get_session_factory
from hostflow_sdk.utils.datetime import utc_now


router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns system health status.
    """
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": "hostflow",
        "version": "1.0.0",
        "python_version": platform.python_version(),
    }


@router.get("/health/ready")
async def readiness_check(session_factory=Depends(get_session_factory)):
    """
    Readiness check endpoint.

    Returns 503 while the database is unreachable.
    """
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as exc:
        database = f"error: {exc.__class__.__name__}"

    body = {
        "status": "ready" if database == "ok" else "not_ready",
        "timestamp": utc_now().isoformat(),
        "checks": {"api": "ok", "database": database},
    }
    return JSONResponse(status_code=200 if database == "ok" else 503, content=body)
