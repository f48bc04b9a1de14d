# aet_portal/models/license.py
"""
AET license requests.

A row moves through three stages:
  draft      is_draft=True, no license_number, freely editable/deletable
  submitted  is_draft=False, license_number assigned, status free-form
  issued     status "Liberada" with license_file_url + issue/expiration dates

license_service is the only writer of is_draft, license_number, status and
the issuance columns, and keeps them consistent with these stages.
"""

import enum

from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, JSON
from aet_portal.database import Base
from aet_portal.models.choices import STATUS_PENDING_REGISTRATION, STATUS_RELEASED


class LicenseStage(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    ISSUED = "issued"


class License(Base):
    __tablename__ = "licenses"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    license_number = Column(String(50), unique=True)                # AET-<year>-<id:04>
    is_draft = Column(Boolean, default=True, nullable=False, index=True)
    set_type = Column(String(50), nullable=False)                   # see choices.LICENSE_SET_TYPES
    primary_vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    first_trailer_id = Column(Integer, ForeignKey("vehicles.id"))
    dolly_id = Column(Integer, ForeignKey("vehicles.id"))
    second_trailer_id = Column(Integer, ForeignKey("vehicles.id"))
    set_length = Column(String(20), nullable=False)                 # metres, as typed
    states = Column(JSON, nullable=False, default=list)             # ["SP", "MG", ...]
    status = Column(String(100), default=STATUS_PENDING_REGISTRATION, nullable=False, index=True)
    license_file_url = Column(String(500))
    issue_date = Column(DateTime)
    expiration_date = Column(DateTime)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    @property
    def stage(self) -> LicenseStage:
        if self.is_draft:
            return LicenseStage.DRAFT
        if self.status == STATUS_RELEASED and self.license_file_url:
            return LicenseStage.ISSUED
        return LicenseStage.SUBMITTED

    @property
    def vehicle_ids(self) -> list:
        """Every vehicle id this license references, primary first."""
        ids = [self.primary_vehicle_id, self.first_trailer_id, self.dolly_id, self.second_trailer_id]
        return [vid for vid in ids if vid is not None]

    def __repr__(self):
        return f"<License {self.id} number={self.license_number} draft={self.is_draft} status={self.status}>"
