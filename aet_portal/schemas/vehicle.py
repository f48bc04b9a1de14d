# aet_portal/schemas/vehicle.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from aet_portal.models.choices import VEHICLE_TYPES


def _check_vehicle_type(value):
    if value is not None and value not in VEHICLE_TYPES:
        raise ValueError(f"vehicle_type must be one of: {', '.join(VEHICLE_TYPES)}")
    return value


def _clean_plate(value):
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("license_plate must not be blank")
    return value


class VehicleCreate(BaseModel):
    license_plate: str
    vehicle_type: str
    weight: int = Field(gt=0)                 # tare, kg
    document_year: int = Field(ge=1900)       # CRLV year

    validate_plate = field_validator("license_plate")(_clean_plate)
    validate_vehicle_type = field_validator("vehicle_type")(_check_vehicle_type)


class VehicleUpdate(BaseModel):
    """Partial update — unset fields keep their stored value."""
    license_plate: Optional[str] = None
    vehicle_type: Optional[str] = None
    weight: Optional[int] = Field(default=None, gt=0)
    document_year: Optional[int] = Field(default=None, ge=1900)

    validate_plate = field_validator("license_plate")(_clean_plate)
    validate_vehicle_type = field_validator("vehicle_type")(_check_vehicle_type)


class VehicleOut(BaseModel):
    id: int
    license_plate: str
    vehicle_type: str
    weight: int
    document_year: int
    document_url: Optional[str]
    user_id: int
    created_at: datetime

    class Config:
        from_attributes = True
