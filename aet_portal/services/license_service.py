# aet_portal/services/license_service.py
"""
AET license lifecycle: drafts, submission, status changes and issuance.

Stages (see models/license.py):
  draft ──submit──▶ submitted ──issue_file──▶ issued ("Liberada", terminal)

  - Submission (is_draft True → False) happens once and assigns
    license_number = AET-<year>-<id:04>. It never reverts.
  - Inside "submitted" the status moves freely between the non-final values.
  - "Liberada" is only reachable through issue_file, which writes the file,
    the dates and the status in one transaction.

Every operation runs inside store.atomic(); the activity entries it records
are committed together with the license change or not at all.
"""

from datetime import datetime
from typing import Optional

from aet_portal.config import settings
from aet_portal.exceptions import Forbidden, InvalidInput, InvalidState, NotFound
from aet_portal.models.choices import (
    LICENSE_STATUSES, ROLE_FIELDS, STATUS_PENDING_REGISTRATION, STATUS_RELEASED, allowed_roles,
)
from aet_portal.models.license import License, LicenseStage
from aet_portal.models.user import User
from aet_portal.schemas.license import LicenseCreate, LicenseIssue, LicenseUpdate
from aet_portal.services.activity_service import record_activity
from aet_portal.services.store import Store
from aet_portal.utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("set_type", "primary_vehicle_id", "set_length", "states")


def format_license_number(license_id: int, year: Optional[int] = None) -> str:
    year = year or datetime.utcnow().year
    return f"{settings.LICENSE_NUMBER_PREFIX}-{year}-{license_id:04d}"


def _label(license: License) -> str:
    return license.license_number or str(license.id)


def add_one_year(moment: datetime) -> datetime:
    try:
        return moment.replace(year=moment.year + 1)
    except ValueError:
        # 29 Feb rolls over to 1 Mar
        return moment.replace(year=moment.year + 1, month=3, day=1)


# ── Validation ───────────────────────────────────────────────────────────────

def _check_vehicles(store: Store, fields: dict, owner_id: int):
    """Vehicles must exist, belong to the owner and fill roles the set type uses."""
    allowed = allowed_roles(fields["set_type"])
    for role in ROLE_FIELDS:
        if fields.get(role) is not None and role not in allowed:
            raise InvalidInput(f"O conjunto {fields['set_type']} não utiliza o campo {role}")

    for role in ("primary_vehicle_id",) + ROLE_FIELDS:
        vehicle_id = fields.get(role)
        if vehicle_id is None:
            continue
        vehicle = store.vehicles.get(vehicle_id)
        if vehicle is None or vehicle.user_id != owner_id:
            raise InvalidInput(f"Veículo {vehicle_id} ({role}) não encontrado entre seus veículos")


def _check_submittable(fields: dict):
    if not fields.get("states"):
        raise InvalidInput("Selecione ao menos um estado antes de enviar a licença")


def _check_status_write(license: Optional[License], new_status: str):
    if new_status == STATUS_RELEASED:
        raise InvalidState("A licença só é liberada com a emissão do arquivo")
    if license is not None and license.stage == LicenseStage.ISSUED:
        raise InvalidState(f"Licença {_label(license)} já foi emitida")


# ── Owner operations ─────────────────────────────────────────────────────────

def create_license(store: Store, data: LicenseCreate, owner_id: int) -> License:
    fields = data.model_dump()
    fields["status"] = fields.get("status") or STATUS_PENDING_REGISTRATION
    _check_status_write(None, fields["status"])
    _check_vehicles(store, fields, owner_id)
    if not fields["is_draft"]:
        _check_submittable(fields)

    with store.atomic():
        license = store.licenses.create(user_id=owner_id, **fields)
        if not license.is_draft:
            license.license_number = format_license_number(license.id)
            record_activity(store, f"Nova licença solicitada - {license.set_type}",
                            user_id=owner_id, license_id=license.id)
        store.db.flush()

    logger.info(f"[LICENSE] Created id={license.id} owner={owner_id} draft={license.is_draft} "
                f"number={license.license_number}")
    return license


def get_license(store: Store, license_id: int, user: User) -> License:
    license = store.licenses.get(license_id)
    if license is None:
        raise NotFound("Licença não encontrada")
    if license.user_id != user.id and not user.is_admin:
        raise Forbidden("Acesso negado")
    return license


def update_license(store: Store, license_id: int, data: LicenseUpdate, requesting_user_id: int) -> License:
    license = store.licenses.get(license_id)
    if license is None:
        raise NotFound("Licença não encontrada")
    if license.user_id != requesting_user_id:
        raise Forbidden("Acesso negado")

    changes = data.model_dump(exclude_unset=True)
    for key in REQUIRED_FIELDS:
        if key in changes and changes[key] is None:
            raise InvalidInput(f"O campo {key} não pode ser removido")

    submitting = changes.pop("is_draft", None) is False and license.is_draft
    if data.is_draft is True and not license.is_draft:
        raise InvalidState(f"Licença {_label(license)} já foi enviada e não pode voltar a rascunho")

    new_status = changes.get("status")
    status_changed = new_status is not None and new_status != license.status
    if not status_changed:
        changes.pop("status", None)
    else:
        _check_status_write(license, new_status)

    merged = {key: getattr(license, key) for key in ("set_type", "primary_vehicle_id", "states") + ROLE_FIELDS}
    merged.update(changes)
    if any(key in changes for key in ("set_type", "primary_vehicle_id") + ROLE_FIELDS):
        _check_vehicles(store, merged, license.user_id)
    if submitting or (not license.is_draft and "states" in changes):
        _check_submittable(merged)

    label = _label(license)
    with store.atomic():
        if submitting:
            changes["is_draft"] = False
            changes["license_number"] = license.license_number or format_license_number(license.id)
            record_activity(store, f"Licença {license.set_type} enviada para processamento",
                            user_id=requesting_user_id, license_id=license.id)
        if status_changed:
            record_activity(store, f"Licença {label} mudou de status para: {new_status}",
                            user_id=requesting_user_id, license_id=license.id)
        changes["updated_at"] = datetime.utcnow()
        license = store.licenses.update(license_id, changes)

    if submitting:
        logger.info(f"[LICENSE] Submitted id={license.id} number={license.license_number}")
    if status_changed:
        logger.info(f"[LICENSE] id={license.id} status → {new_status}")
    return license


def delete_license(store: Store, license_id: int, requesting_user_id: int) -> bool:
    license = store.licenses.get(license_id)
    if license is None:
        raise NotFound("Licença não encontrada")
    if license.user_id != requesting_user_id:
        raise Forbidden("Acesso negado")
    if not license.is_draft:
        logger.warning(f"[LICENSE] Refused delete of submitted license {_label(license)}")
        raise InvalidState("Apenas licenças em rascunho podem ser excluídas")

    with store.atomic():
        deleted = store.licenses.delete(license_id)
    logger.info(f"[LICENSE] Deleted draft id={license_id} owner={requesting_user_id}")
    return deleted


# ── Read projections ─────────────────────────────────────────────────────────

def list_drafts(store: Store, owner_id: int) -> list:
    return store.licenses.list_by_owner(owner_id, is_draft=True)


def list_in_progress(store: Store, owner_id: int) -> list:
    return [lic for lic in store.licenses.list_by_owner(owner_id, is_draft=False)
            if lic.status != STATUS_RELEASED]


def list_completed(store: Store, owner_id: int) -> list:
    return [lic for lic in store.licenses.list_by_owner(owner_id, is_draft=False)
            if lic.status == STATUS_RELEASED]


def list_all(store: Store, status: Optional[str] = None) -> list:
    """Admin view of every submitted license, optionally filtered by status. Drafts never show."""
    if status and status not in LICENSE_STATUSES:
        raise InvalidInput("Status inválido")
    return store.licenses.list_all(status=status)


def list_status_options() -> list:
    return list(LICENSE_STATUSES)


# ── Admin operations ─────────────────────────────────────────────────────────

def set_status(store: Store, license_id: int, new_status: str, acting_user_id: int) -> License:
    if new_status not in LICENSE_STATUSES:
        raise InvalidInput("Status inválido")
    license = store.licenses.get(license_id)
    if license is None:
        raise NotFound("Licença não encontrada")
    if license.is_draft:
        raise InvalidState("Rascunhos não podem ter o status alterado")
    _check_status_write(license, new_status)

    previous = license.status
    with store.atomic():
        license = store.licenses.update(license_id, {"status": new_status, "updated_at": datetime.utcnow()})
        record_activity(store, f"Status da licença {_label(license)} alterado para: {new_status}",
                        user_id=acting_user_id, license_id=license.id)

    logger.info(f"[ADMIN] License {_label(license)}: {previous} → {new_status} (by user {acting_user_id})")
    return license


def _issue_dates(metadata: LicenseIssue) -> tuple:
    issue_date = metadata.issue_date or datetime.utcnow()
    expiration_date = metadata.expiration_date or add_one_year(issue_date)
    if expiration_date <= issue_date:
        raise InvalidInput("A data de validade deve ser posterior à data de emissão")
    return issue_date, expiration_date


def check_issuable(store: Store, license_id: int, metadata: LicenseIssue) -> License:
    """Everything issue_file checks except the file itself. Run it before storing the upload."""
    license = store.licenses.get(license_id)
    if license is None:
        raise NotFound("Licença não encontrada")
    if license.is_draft:
        raise InvalidState("Rascunhos não podem ser emitidos; a licença precisa ser enviada primeiro")
    _issue_dates(metadata)
    return license


def issue_file(store: Store, license_id: int, file_path: str, metadata: LicenseIssue,
               acting_user_id: int) -> License:
    """Attach the issued document and release the license. All fields are written together."""
    license = check_issuable(store, license_id, metadata)
    if not file_path:
        raise InvalidInput("Nenhum arquivo enviado")
    issue_date, expiration_date = _issue_dates(metadata)

    changes = {
        "license_file_url": file_path,
        "status": STATUS_RELEASED,
        "issue_date": issue_date,
        "expiration_date": expiration_date,
        "updated_at": datetime.utcnow(),
    }
    if not license.license_number:
        changes["license_number"] = metadata.license_number or format_license_number(license.id)
    elif metadata.license_number and metadata.license_number != license.license_number:
        logger.warning(f"[ADMIN] Ignoring license number {metadata.license_number}: "
                       f"license {license.id} already numbered {license.license_number}")

    with store.atomic():
        license = store.licenses.update(license_id, changes)
        record_activity(store, f"Licença {_label(license)} emitida e disponibilizada",
                        user_id=acting_user_id, license_id=license.id)

    logger.info(f"[ADMIN] Issued {_label(license)} file={file_path} "
                f"valid {issue_date:%Y-%m-%d} → {expiration_date:%Y-%m-%d}")
    return license
