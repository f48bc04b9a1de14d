# aet_portal/services/dashboard_service.py
"""
Dashboard counters. Recomputed from the tables on every call — no caching.
"""

from aet_portal.models.choices import (
    LICENSE_STATUSES, STATUS_AGENCY_REVIEW, STATUS_PENDING_REGISTRATION, STATUS_PENDING_RELEASE,
    STATUS_REGISTRATION_IN_PROGRESS, STATUS_RELEASED,
)
from aet_portal.services.store import Store


def user_stats(store: Store, user_id: int) -> dict:
    submitted = store.licenses.list_by_owner(user_id, is_draft=False)
    completed = sum(1 for lic in submitted if lic.status == STATUS_RELEASED)
    return {
        "license_count": completed,
        "pending_licenses": len(submitted) - completed,
        "vehicle_count": store.vehicles.count(user_id),
    }


def admin_stats(store: Store) -> dict:
    by_status = {status: 0 for status in LICENSE_STATUSES}
    licenses = store.licenses.list_all()
    for lic in licenses:
        by_status[lic.status] = by_status.get(lic.status, 0) + 1

    return {
        "total_licenses": len(licenses),
        "by_status": by_status,
        "pending": by_status[STATUS_PENDING_REGISTRATION] + by_status[STATUS_REGISTRATION_IN_PROGRESS],
        "in_analysis": by_status[STATUS_AGENCY_REVIEW] + by_status[STATUS_PENDING_RELEASE],
        "issued": by_status[STATUS_RELEASED],
        "total_users": len(store.users.list_all()),
        "total_vehicles": store.vehicles.count(),
    }
