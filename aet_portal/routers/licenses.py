# aet_portal/routers/licenses.py
"""AET license requests — drafts, submission and tracking for the caller's own licenses."""

from fastapi import APIRouter, Depends, Response, status

from aet_portal.dependencies import get_current_user, get_store
from aet_portal.models.user import User
from aet_portal.schemas.license import LicenseCreate, LicenseOut, LicenseUpdate
from aet_portal.services import license_service
from aet_portal.services.store import Store

router = APIRouter()


@router.get("/licenses/drafts", response_model=list[LicenseOut], summary="My draft licenses")
def list_drafts(store: Store = Depends(get_store), user: User = Depends(get_current_user)):
    return license_service.list_drafts(store, user.id)


@router.get("/licenses/in-progress", response_model=list[LicenseOut], summary="My submitted, not yet issued licenses")
def list_in_progress(store: Store = Depends(get_store), user: User = Depends(get_current_user)):
    return license_service.list_in_progress(store, user.id)


@router.get("/licenses/completed", response_model=list[LicenseOut], summary="My issued licenses")
def list_completed(store: Store = Depends(get_store), user: User = Depends(get_current_user)):
    return license_service.list_completed(store, user.id)


@router.get("/licenses/{license_id}", response_model=LicenseOut, summary="Get one license")
def get_license(license_id: int, store: Store = Depends(get_store), user: User = Depends(get_current_user)):
    return license_service.get_license(store, license_id, user)


@router.post("/licenses", response_model=LicenseOut, status_code=status.HTTP_201_CREATED,
             summary="Save a draft or request a license")
def create_license(body: LicenseCreate, store: Store = Depends(get_store), user: User = Depends(get_current_user)):
    """`is_draft=false` submits immediately: states are required and a license number is assigned."""
    return license_service.create_license(store, body, user.id)


@router.put("/licenses/{license_id}", response_model=LicenseOut, summary="Edit or submit a license")
def update_license(license_id: int, body: LicenseUpdate, store: Store = Depends(get_store),
                   user: User = Depends(get_current_user)):
    """Partial update. Sending `is_draft=false` on a draft submits it."""
    return license_service.update_license(store, license_id, body, user.id)


@router.delete("/licenses/{license_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a draft")
def delete_license(license_id: int, store: Store = Depends(get_store), user: User = Depends(get_current_user)):
    license_service.delete_license(store, license_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
