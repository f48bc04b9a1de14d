# aet_portal/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + upload directory.
"""

import os

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from aet_portal.database import get_db
from aet_portal.config import settings
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Whether the upload directory is writable
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "uploads": "unknown",
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    if os.path.isdir(settings.UPLOAD_DIR) and os.access(settings.UPLOAD_DIR, os.W_OK):
        result["uploads"] = "ok"
    else:
        result["uploads"] = "not writable"
        result["status"] = "degraded"

    return result
