# aet_portal/services/store.py
"""
Data-access layer: one repository per table, all sharing the request's session.

Repositories never check business rules (unique plates, ownership, draft-only
deletes); services do that before calling them. Unknown ids are signalled
with None/False, never with an exception.

Writes are flushed, not committed. Wrap a service operation in
`with store.atomic():` so everything it wrote lands in one transaction.
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from aet_portal.models.activity import Activity
from aet_portal.models.license import License
from aet_portal.models.user import User
from aet_portal.models.vehicle import Vehicle


class Repository:
    model = None

    def __init__(self, db: Session):
        self.db = db

    def get(self, entity_id: int):
        return self.db.get(self.model, entity_id)

    def list_by_owner(self, user_id: int) -> list:
        return (
            self.db.query(self.model)
            .filter(self.model.user_id == user_id)
            .order_by(self.model.id)
            .all()
        )

    def create(self, **data):
        entity = self.model(**data)
        if getattr(entity, "created_at", None) is None:
            entity.created_at = datetime.utcnow()
        self.db.add(entity)
        self.db.flush()
        return entity

    def update(self, entity_id: int, changes: dict):
        entity = self.get(entity_id)
        if entity is None:
            return None
        for key, value in changes.items():
            setattr(entity, key, value)
        self.db.flush()
        return entity

    def delete(self, entity_id: int) -> bool:
        entity = self.get(entity_id)
        if entity is None:
            return False
        self.db.delete(entity)
        self.db.flush()
        return True


class UserRepository(Repository):
    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def list_admins(self) -> list:
        return self.db.query(User).filter(User.is_admin.is_(True)).order_by(User.id).all()

    def list_all(self) -> list:
        return self.db.query(User).order_by(User.id).all()


class VehicleRepository(Repository):
    model = Vehicle

    def get_by_plate(self, license_plate: str) -> Optional[Vehicle]:
        """Case-insensitive plate lookup across all owners."""
        return (
            self.db.query(Vehicle)
            .filter(func.lower(Vehicle.license_plate) == license_plate.strip().lower())
            .first()
        )

    def list_by_type(self, vehicle_type: str, user_id: int) -> list:
        return (
            self.db.query(Vehicle)
            .filter(Vehicle.vehicle_type == vehicle_type, Vehicle.user_id == user_id)
            .order_by(Vehicle.id)
            .all()
        )

    def count(self, user_id: Optional[int] = None) -> int:
        q = self.db.query(func.count(Vehicle.id))
        if user_id is not None:
            q = q.filter(Vehicle.user_id == user_id)
        return q.scalar() or 0

    def is_referenced(self, vehicle_id: int) -> bool:
        """True if any license (any owner, draft or not) uses the vehicle in a role."""
        return self.db.query(License.id).filter(or_(
            License.primary_vehicle_id == vehicle_id,
            License.first_trailer_id == vehicle_id,
            License.dolly_id == vehicle_id,
            License.second_trailer_id == vehicle_id,
        )).first() is not None


class LicenseRepository(Repository):
    model = License

    def create(self, **data):
        now = datetime.utcnow()
        data.setdefault("created_at", now)
        data.setdefault("updated_at", now)
        return super().create(**data)

    def list_by_owner(self, user_id: int, is_draft: Optional[bool] = None) -> list:
        q = self.db.query(License).filter(License.user_id == user_id)
        if is_draft is not None:
            q = q.filter(License.is_draft.is_(is_draft))
        return q.order_by(License.id).all()

    def list_all(self, status: Optional[str] = None, include_drafts: bool = False) -> list:
        q = self.db.query(License)
        if not include_drafts:
            q = q.filter(License.is_draft.is_(False))
        if status:
            q = q.filter(License.status == status)
        return q.order_by(License.updated_at.desc(), License.id.desc()).all()


class ActivityRepository(Repository):
    model = Activity

    def list_by_user(self, user_id: int, limit: Optional[int] = None) -> list:
        q = (
            self.db.query(Activity)
            .filter(Activity.user_id == user_id)
            .order_by(Activity.created_at.desc(), Activity.id.desc())
        )
        if limit:
            q = q.limit(limit)
        return q.all()

    def update(self, entity_id: int, changes: dict):
        raise TypeError("activities are append-only")

    def delete(self, entity_id: int) -> bool:
        raise TypeError("activities are append-only")


class Store:
    """All repositories bound to one SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.vehicles = VehicleRepository(db)
        self.licenses = LicenseRepository(db)
        self.activities = ActivityRepository(db)

    @contextmanager
    def atomic(self):
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
