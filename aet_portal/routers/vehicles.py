# aet_portal/routers/vehicles.py
"""Vehicle registry — CRUD for the caller's own vehicles (multipart, optional CRLV document)."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from aet_portal.dependencies import get_current_user, get_store
from aet_portal.exceptions import AetError
from aet_portal.models.user import User
from aet_portal.schemas.vehicle import VehicleCreate, VehicleOut, VehicleUpdate
from aet_portal.services import vehicle_service
from aet_portal.services.store import Store
from aet_portal.services.upload_service import discard_upload, save_upload

router = APIRouter()


@router.get("/vehicles", response_model=list[VehicleOut], summary="List my vehicles")
def list_vehicles(vehicle_type: Optional[str] = None, store: Store = Depends(get_store),
                  user: User = Depends(get_current_user)):
    return vehicle_service.list_vehicles(store, user.id, vehicle_type)


@router.get("/vehicles/type/{vehicle_type}", response_model=list[VehicleOut], summary="List my vehicles of one type")
def list_vehicles_by_type(vehicle_type: str, store: Store = Depends(get_store),
                          user: User = Depends(get_current_user)):
    return vehicle_service.list_vehicles(store, user.id, vehicle_type)


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Get one of my vehicles")
def get_vehicle(vehicle_id: int, store: Store = Depends(get_store), user: User = Depends(get_current_user)):
    return vehicle_service.get_vehicle(store, vehicle_id, user.id)


@router.post("/vehicles", response_model=VehicleOut, status_code=status.HTTP_201_CREATED,
             summary="Register a vehicle")
async def create_vehicle(
    license_plate: str = Form(...),
    vehicle_type: str = Form(...),
    weight: int = Form(...),
    document_year: int = Form(...),
    document: Optional[UploadFile] = File(default=None),
    store: Store = Depends(get_store),
    user: User = Depends(get_current_user),
):
    """Form fields plus an optional `document` file (PDF or image of the CRLV)."""
    body = VehicleCreate(license_plate=license_plate, vehicle_type=vehicle_type,
                         weight=weight, document_year=document_year)
    vehicle_service.check_plate_free(store, body.license_plate)
    document_url = await save_upload(document, "document") if document and document.filename else None
    try:
        return vehicle_service.create_vehicle(store, body, user.id, document_url)
    except AetError:
        discard_upload(document_url)
        raise


@router.put("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Update a vehicle")
async def update_vehicle(
    vehicle_id: int,
    license_plate: Optional[str] = Form(default=None),
    vehicle_type: Optional[str] = Form(default=None),
    weight: Optional[int] = Form(default=None),
    document_year: Optional[int] = Form(default=None),
    document: Optional[UploadFile] = File(default=None),
    store: Store = Depends(get_store),
    user: User = Depends(get_current_user),
):
    """Only the fields sent are changed. A new `document` replaces the stored one."""
    sent = {"license_plate": license_plate, "vehicle_type": vehicle_type,
            "weight": weight, "document_year": document_year}
    body = VehicleUpdate(**{key: value for key, value in sent.items() if value is not None})
    vehicle_service.get_vehicle(store, vehicle_id, user.id)
    if body.license_plate:
        vehicle_service.check_plate_free(store, body.license_plate, vehicle_id)
    document_url = await save_upload(document, "document") if document and document.filename else None
    try:
        return vehicle_service.update_vehicle(store, vehicle_id, body, user.id, document_url)
    except AetError:
        discard_upload(document_url)
        raise


@router.delete("/vehicles/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove a vehicle")
def delete_vehicle(vehicle_id: int, store: Store = Depends(get_store), user: User = Depends(get_current_user)):
    vehicle_service.delete_vehicle(store, vehicle_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
