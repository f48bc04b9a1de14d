# aet_portal/models/activity.py
"""
Append-only activity feed shown on the user dashboard.
Written by activity_service as a side effect of vehicle and license changes.
References are nulled (not cascaded) when the vehicle or license row goes away.
"""

from sqlalchemy import Column, Integer, DateTime, Text, ForeignKey
from aet_portal.database import Base


class Activity(Base):
    __tablename__ = "activities"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    description = Column(Text, nullable=False)
    license_id = Column(Integer, ForeignKey("licenses.id", ondelete="SET NULL"))
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="SET NULL"))
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<Activity {self.id} user={self.user_id} license={self.license_id}>"
