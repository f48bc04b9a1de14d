# aet_portal/routers/admin.py
"""
Administration endpoints — license review, status changes, issuance and users.
Everything except /setup-admin requires an admin caller.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from aet_portal.dependencies import get_store, require_admin
from aet_portal.exceptions import AetError, InvalidInput
from aet_portal.models.user import User
from aet_portal.schemas.license import LicenseIssue, LicenseOut, LicenseStatusUpdate
from aet_portal.schemas.stats import AdminStatsOut
from aet_portal.schemas.user import AdminSetup, UserOut
from aet_portal.services import license_service
from aet_portal.services.dashboard_service import admin_stats
from aet_portal.services.store import Store
from aet_portal.services.upload_service import discard_upload, save_upload
from aet_portal.services.user_service import list_users, setup_admin

router = APIRouter()


@router.post("/setup-admin", response_model=UserOut, status_code=status.HTTP_201_CREATED,
             summary="Create the first administrator")
def create_first_admin(body: AdminSetup, store: Store = Depends(get_store)):
    """Works once, with the installation password from SETUP_PASSWORD."""
    return setup_admin(store, body)


@router.get("/admin/licenses", response_model=list[LicenseOut], summary="All submitted licenses")
def get_all_licenses(status: Optional[str] = None, store: Store = Depends(get_store),
                     admin: User = Depends(require_admin)):
    """Drafts are never listed. Filter by one status value."""
    return license_service.list_all(store, status)


@router.get("/admin/status-options", response_model=list[str], summary="License status values")
def get_status_options(admin: User = Depends(require_admin)):
    return license_service.list_status_options()


@router.put("/admin/licenses/{license_id}/status", response_model=LicenseOut, summary="Change a license status")
def change_status(license_id: int, body: LicenseStatusUpdate, store: Store = Depends(get_store),
                  admin: User = Depends(require_admin)):
    return license_service.set_status(store, license_id, body.status, admin.id)


@router.put("/admin/licenses/{license_id}/file", response_model=LicenseOut, summary="Issue a license file")
async def upload_license_file(
    license_id: int,
    license_file: Optional[UploadFile] = File(default=None),
    license_number: Optional[str] = Form(default=None),
    issue_date: Optional[str] = Form(default=None),
    expiration_date: Optional[str] = Form(default=None),
    store: Store = Depends(get_store),
    admin: User = Depends(require_admin),
):
    """
    Attach the issued AET document and mark the license "Liberada".
    issue_date defaults to now, expiration_date to issue_date + 1 year.
    """
    metadata = LicenseIssue(license_number=license_number, issue_date=issue_date,
                            expiration_date=expiration_date)
    license_service.check_issuable(store, license_id, metadata)
    if license_file is None or not license_file.filename:
        raise InvalidInput("Nenhum arquivo enviado")
    file_path = await save_upload(license_file, "license_file")
    try:
        return license_service.issue_file(store, license_id, file_path, metadata, admin.id)
    except AetError:
        discard_upload(file_path)
        raise


@router.get("/admin/users", response_model=list[UserOut], summary="All users")
def get_users(store: Store = Depends(get_store), admin: User = Depends(require_admin)):
    return list_users(store)


@router.get("/admin/stats", response_model=AdminStatsOut, summary="Global license counters")
def get_admin_stats(store: Store = Depends(get_store), admin: User = Depends(require_admin)):
    return admin_stats(store)
