# aet_portal/schemas/stats.py
from pydantic import BaseModel


class UserStatsOut(BaseModel):
    license_count: int        # issued ("Liberada")
    pending_licenses: int     # submitted, not yet issued
    vehicle_count: int


class AdminStatsOut(BaseModel):
    total_licenses: int
    by_status: dict[str, int]
    pending: int
    in_analysis: int
    issued: int
    total_users: int
    total_vehicles: int
