# aet_portal/routers/dashboard.py
"""User dashboard — counters and recent activity."""

from typing import Optional

from fastapi import APIRouter, Depends

from aet_portal.dependencies import get_current_user, get_store
from aet_portal.models.user import User
from aet_portal.schemas.activity import ActivityOut
from aet_portal.schemas.stats import UserStatsOut
from aet_portal.services.activity_service import list_recent_activities
from aet_portal.services.dashboard_service import user_stats
from aet_portal.services.store import Store

router = APIRouter()


@router.get("/dashboard/stats", response_model=UserStatsOut, summary="My license and vehicle counters")
def get_stats(store: Store = Depends(get_store), user: User = Depends(get_current_user)):
    return user_stats(store, user.id)


@router.get("/dashboard/activities", response_model=list[ActivityOut], summary="My recent activity")
def get_activities(limit: Optional[int] = None, store: Store = Depends(get_store),
                   user: User = Depends(get_current_user)):
    """Newest first. Defaults to DEFAULT_ACTIVITY_LIMIT entries; limit=0 returns everything."""
    return list_recent_activities(store, user.id, limit)
