# aet_portal/services/activity_service.py
"""
Shared activity-feed writer.
Used by license_service and vehicle_service; never commits on its own, so the
entry lands in the same transaction as the change it describes.
"""

from typing import Optional
from aet_portal.config import settings
from aet_portal.services.store import Store
from aet_portal.utils.logger import get_logger

logger = get_logger(__name__)


def record_activity(store: Store, description: str, user_id: int,
                    license_id: Optional[int] = None, vehicle_id: Optional[int] = None):
    """Append one activity entry for user_id and return it."""
    activity = store.activities.create(
        description=description,
        user_id=user_id,
        license_id=license_id,
        vehicle_id=vehicle_id,
    )
    logger.info(f"[ACTIVITY] user={user_id} license={license_id} vehicle={vehicle_id} | {description}")
    return activity


def list_recent_activities(store: Store, user_id: int, limit: Optional[int] = None) -> list:
    """Newest first. limit=None returns the configured dashboard default; 0 returns everything."""
    if limit is None:
        limit = settings.DEFAULT_ACTIVITY_LIMIT
    if limit < 0:
        limit = 0
    return store.activities.list_by_user(user_id, limit or None)
