# aet_portal/schemas/activity.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class ActivityOut(BaseModel):
    id: int
    description: str
    license_id: Optional[int]
    vehicle_id: Optional[int]
    user_id: int
    created_at: datetime

    class Config:
        from_attributes = True
