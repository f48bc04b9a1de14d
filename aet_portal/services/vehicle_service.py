# aet_portal/services/vehicle_service.py
"""
Vehicle registration and management for license owners.
Plates are unique across the whole portal, compared case-insensitively.
A vehicle used by any license (draft or not) cannot be deleted.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from aet_portal.exceptions import Forbidden, InvalidInput, InvalidState, NotFound
from aet_portal.models.vehicle import Vehicle
from aet_portal.schemas.vehicle import VehicleCreate, VehicleUpdate
from aet_portal.services.activity_service import record_activity
from aet_portal.services.store import Store
from aet_portal.utils.logger import get_logger

logger = get_logger(__name__)

DUPLICATE_PLATE = "Veículo com esta placa já cadastrado"


def check_plate_free(store: Store, license_plate: str, vehicle_id: Optional[int] = None):
    existing = store.vehicles.get_by_plate(license_plate)
    if existing and existing.id != vehicle_id:
        logger.warning(f"[VEHICLE] Duplicate plate rejected: {license_plate}")
        raise InvalidInput(DUPLICATE_PLATE)


def _owned_vehicle(store: Store, vehicle_id: int, user_id: int) -> Vehicle:
    vehicle = store.vehicles.get(vehicle_id)
    if vehicle is None:
        raise NotFound("Veículo não encontrado")
    if vehicle.user_id != user_id:
        raise Forbidden("Acesso negado")
    return vehicle


def list_vehicles(store: Store, user_id: int, vehicle_type: Optional[str] = None) -> list:
    if vehicle_type:
        return store.vehicles.list_by_type(vehicle_type, user_id)
    return store.vehicles.list_by_owner(user_id)


def get_vehicle(store: Store, vehicle_id: int, user_id: int) -> Vehicle:
    return _owned_vehicle(store, vehicle_id, user_id)


def create_vehicle(store: Store, data: VehicleCreate, owner_id: int,
                   document_url: Optional[str] = None) -> Vehicle:
    check_plate_free(store, data.license_plate)

    try:
        with store.atomic():
            vehicle = store.vehicles.create(user_id=owner_id, document_url=document_url, **data.model_dump())
            record_activity(store, f"Novo veículo cadastrado - {vehicle.vehicle_type} {vehicle.license_plate}",
                            user_id=owner_id, vehicle_id=vehicle.id)
    except IntegrityError:
        # lost a race on the plate index
        logger.warning(f"[VEHICLE] Duplicate plate rejected by the database: {data.license_plate}")
        raise InvalidInput(DUPLICATE_PLATE)

    logger.info(f"[VEHICLE] Registered {vehicle.license_plate} id={vehicle.id} owner={owner_id}")
    return vehicle


def update_vehicle(store: Store, vehicle_id: int, data: VehicleUpdate, user_id: int,
                   document_url: Optional[str] = None) -> Vehicle:
    _owned_vehicle(store, vehicle_id, user_id)
    changes = {key: value for key, value in data.model_dump(exclude_unset=True).items() if value is not None}
    if "license_plate" in changes:
        check_plate_free(store, changes["license_plate"], vehicle_id)
    if document_url:
        changes["document_url"] = document_url

    try:
        with store.atomic():
            vehicle = store.vehicles.update(vehicle_id, changes)
    except IntegrityError:
        logger.warning(f"[VEHICLE] Duplicate plate rejected by the database: {changes.get('license_plate')}")
        raise InvalidInput(DUPLICATE_PLATE)

    logger.info(f"[VEHICLE] Updated id={vehicle_id} fields={sorted(changes)}")
    return vehicle


def delete_vehicle(store: Store, vehicle_id: int, user_id: int) -> bool:
    vehicle = _owned_vehicle(store, vehicle_id, user_id)
    if store.vehicles.is_referenced(vehicle_id):
        logger.warning(f"[VEHICLE] Refused delete of {vehicle.license_plate}: used by a license")
        raise InvalidState("Veículo está em uso em uma ou mais licenças e não pode ser excluído")

    with store.atomic():
        deleted = store.vehicles.delete(vehicle_id)
    logger.info(f"[VEHICLE] Deleted id={vehicle_id} owner={user_id}")
    return deleted
