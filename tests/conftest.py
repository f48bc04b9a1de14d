# tests/conftest.py
"""Shared fixtures: in-memory SQLite database, store, users and vehicles."""

import sys
import os
import tempfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before aet_portal.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="aet-uploads-")
os.environ["SETUP_PASSWORD"] = "install-me"
os.environ["API_KEY"] = ""
os.environ["ADMIN_EMAIL"] = ""
os.environ["ADMIN_PASSWORD"] = ""
os.environ["LOG_DIR"] = ""

import pytest
from aet_portal.database import SessionLocal, create_tables, drop_tables
from aet_portal.schemas.license import LicenseCreate
from aet_portal.schemas.user import UserCreate
from aet_portal.schemas.vehicle import VehicleCreate
from aet_portal.services.license_service import create_license
from aet_portal.services.store import Store
from aet_portal.services.user_service import register_user
from aet_portal.services.vehicle_service import create_vehicle


@pytest.fixture
def tables():
    create_tables()
    yield
    drop_tables()


@pytest.fixture
def db(tables):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return Store(db)


def _user(store, email, is_admin=False):
    return register_user(store, UserCreate(
        email=email, password="opaque-hash", full_name=email.split("@")[0].title(), phone="11999990000",
    ), is_admin=is_admin)


@pytest.fixture
def owner(store):
    return _user(store, "owner@transportes.com.br")


@pytest.fixture
def other_user(store):
    return _user(store, "other@logistica.com.br")


@pytest.fixture
def admin(store):
    return _user(store, "admin@aet.gov.br", is_admin=True)


@pytest.fixture
def make_vehicle(store, owner):
    counter = iter(range(1, 1000))

    def _make(vehicle_type="Unidade Tratora (Cavalo)", plate=None, user=None):
        plate = plate or f"TST{next(counter):04d}"
        body = VehicleCreate(license_plate=plate, vehicle_type=vehicle_type, weight=8500, document_year=2024)
        return create_vehicle(store, body, (user or owner).id)

    return _make


@pytest.fixture
def tractor(make_vehicle):
    return make_vehicle()


@pytest.fixture
def make_license(store, owner, tractor):
    def _make(is_draft=True, states=("SP", "MG"), set_type="Prancha", user=None, **extra):
        body = LicenseCreate(
            set_type=set_type,
            primary_vehicle_id=extra.pop("primary_vehicle_id", tractor.id),
            set_length="19,80",
            states=list(states),
            is_draft=is_draft,
            **extra,
        )
        return create_license(store, body, (user or owner).id)

    return _make
