"""System API routes (health, logs)"""

from typing import Dict, List

from fastapi import APIRouter, HTTPException, Query, Request

from ..services.log_service import log_service

router = APIRouter(prefix="/api/system", tags=["system"])

LOG_TYPES = ("error", "info", "fetch")


@router.get("/health")
async def health(request: Request) -> Dict:
    """Health check endpoint"""
    sessions = getattr(request.app.state, "sessions", None)
    return {
        "status": "healthy",
        "tmdb_configured": getattr(request.app.state, "tmdb", None) is not None,
        "sessions": len(sessions) if sessions is not None else 0,
    }


@router.get("/logs")
async def get_logs(
    log_type: str = Query("error"), limit: int = Query(100, ge=1, le=1000)
) -> List[str]:
    """Read the tail of a log file"""
    if log_type not in LOG_TYPES:
        raise HTTPException(status_code=400, detail=f"Unknown log type: {log_type}")
    return log_service.get_logs(log_type, limit)
