# aet_portal/schemas/user.py
from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional


class UserCreate(BaseModel):
    email: str
    password: str       # opaque credential produced by the auth gateway
    full_name: str
    phone: str

    @field_validator("email")
    @classmethod
    def normalise_email(cls, value):
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("email must contain '@'")
        return value

    @field_validator("password", "full_name", "phone")
    @classmethod
    def not_blank(cls, value):
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class AdminSetup(BaseModel):
    setup_password: str
    email: str
    password: str
    phone: Optional[str] = None


class UserOut(BaseModel):
    id: int
    email: str
    full_name: str
    phone: str
    is_admin: bool
    created_at: datetime

    class Config:
        from_attributes = True
