# aet_portal/schemas/license.py
from pydantic import BaseModel, field_validator
from datetime import datetime, timezone
from typing import Optional

from aet_portal.models.choices import LICENSE_SET_TYPES, LICENSE_STATUSES, STATES
from aet_portal.models.license import LicenseStage


def _check_set_type(value):
    if value is not None and value not in LICENSE_SET_TYPES:
        raise ValueError(f"set_type must be one of: {', '.join(LICENSE_SET_TYPES)}")
    return value


def _check_status(value):
    if value is not None and value not in LICENSE_STATUSES:
        raise ValueError(f"status must be one of: {', '.join(LICENSE_STATUSES)}")
    return value


def _check_states(value):
    if value is None:
        return value
    unknown = [s for s in value if s not in STATES]
    if unknown:
        raise ValueError(f"unknown state codes: {', '.join(unknown)}")
    return list(dict.fromkeys(value))   # de-duplicate, keep order


def _check_set_length(value):
    if value is None:
        return value
    value = value.strip()
    try:
        length = float(value.replace(",", "."))
    except ValueError:
        raise ValueError("set_length must be a number, e.g. 19,80")
    if length <= 0:
        raise ValueError("set_length must be positive")
    return value


def _empty_role_to_none(value):
    # The request form sends 0 / "" for roles left blank
    if value in (0, "", "0"):
        return None
    return value


class LicenseCreate(BaseModel):
    set_type: str
    primary_vehicle_id: int
    first_trailer_id: Optional[int] = None
    dolly_id: Optional[int] = None
    second_trailer_id: Optional[int] = None
    set_length: str
    states: list[str] = []
    is_draft: bool = True
    status: Optional[str] = None

    validate_set_type = field_validator("set_type")(_check_set_type)
    validate_status = field_validator("status")(_check_status)
    validate_states = field_validator("states")(_check_states)
    validate_set_length = field_validator("set_length")(_check_set_length)
    validate_roles = field_validator("first_trailer_id", "dolly_id", "second_trailer_id", mode="before")(_empty_role_to_none)


class LicenseUpdate(BaseModel):
    """Partial update — only fields present in the request body are applied."""
    set_type: Optional[str] = None
    primary_vehicle_id: Optional[int] = None
    first_trailer_id: Optional[int] = None
    dolly_id: Optional[int] = None
    second_trailer_id: Optional[int] = None
    set_length: Optional[str] = None
    states: Optional[list[str]] = None
    is_draft: Optional[bool] = None
    status: Optional[str] = None

    validate_set_type = field_validator("set_type")(_check_set_type)
    validate_status = field_validator("status")(_check_status)
    validate_states = field_validator("states")(_check_states)
    validate_set_length = field_validator("set_length")(_check_set_length)
    validate_roles = field_validator("first_trailer_id", "dolly_id", "second_trailer_id", mode="before")(_empty_role_to_none)


class LicenseStatusUpdate(BaseModel):
    status: str     # checked against LICENSE_STATUSES by license_service.set_status


class LicenseIssue(BaseModel):
    """Optional metadata sent with the issued license file."""
    license_number: Optional[str] = None
    issue_date: Optional[datetime] = None
    expiration_date: Optional[datetime] = None

    @field_validator("license_number", mode="before")
    @classmethod
    def blank_number_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @field_validator("issue_date", "expiration_date", mode="before")
    @classmethod
    def blank_date_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("issue_date", "expiration_date")
    @classmethod
    def as_naive_utc(cls, value):
        # Columns are naive UTC
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class LicenseOut(BaseModel):
    id: int
    license_number: Optional[str]
    is_draft: bool
    stage: LicenseStage
    set_type: str
    primary_vehicle_id: int
    first_trailer_id: Optional[int]
    dolly_id: Optional[int]
    second_trailer_id: Optional[int]
    set_length: str
    states: list[str]
    status: str
    license_file_url: Optional[str]
    issue_date: Optional[datetime]
    expiration_date: Optional[datetime]
    user_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
