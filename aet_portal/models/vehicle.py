# aet_portal/models/vehicle.py
"""
Registered vehicles (tractor units, trailers, dollies, flatbeds).
Plates are unique regardless of case; vehicle_service checks this before
insert and the functional index below backs it up at the DB level.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, func
from aet_portal.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    license_plate = Column(String(20), nullable=False)
    vehicle_type = Column(String(50), nullable=False)      # see choices.VEHICLE_TYPES
    weight = Column(Integer, nullable=False)               # tare, kg
    document_year = Column(Integer, nullable=False)        # CRLV year
    document_url = Column(String(500))                     # /uploads/... (nullable)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Vehicle {self.id} plate={self.license_plate} type={self.vehicle_type}>"


Index("ix_vehicles_plate_lower", func.lower(Vehicle.license_plate), unique=True)
