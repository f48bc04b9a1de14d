# tests/test_license_service.py
"""Unit tests for the license lifecycle: drafts, submission, numbering, projections."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime

import pytest
from aet_portal.exceptions import Forbidden, InvalidInput, InvalidState, NotFound
from aet_portal.models.license import LicenseStage
from aet_portal.schemas.license import LicenseCreate, LicenseIssue, LicenseUpdate
from aet_portal.services import license_service


def current_number(license_id):
    return f"AET-{datetime.utcnow().year}-{license_id:04d}"


class TestCreateLicense:
    def test_draft_defaults(self, make_license, store, owner):
        license = make_license()
        assert license.is_draft is True
        assert license.status == "Pendente Cadastro"
        assert license.license_number is None
        assert license.stage == LicenseStage.DRAFT
        assert store.activities.list_by_user(owner.id) != []  # vehicle registration only
        assert all(a.license_id is None for a in store.activities.list_by_user(owner.id))

    def test_draft_may_have_no_states(self, make_license):
        license = make_license(states=())
        assert license.states == []

    def test_submission_requires_states(self, make_license):
        with pytest.raises(InvalidInput):
            make_license(is_draft=False, states=())

    def test_direct_submission_numbers_and_logs(self, make_license, store, owner):
        license = make_license(is_draft=False)
        assert license.license_number == current_number(license.id)
        assert license.stage == LicenseStage.SUBMITTED
        activity = store.activities.list_by_user(owner.id, limit=1)[0]
        assert activity.description == "Nova licença solicitada - Prancha"
        assert activity.license_id == license.id

    def test_cannot_create_as_released(self, make_license):
        with pytest.raises(InvalidState):
            make_license(status="Liberada")

    def test_vehicle_must_belong_to_owner(self, make_license, make_vehicle, other_user):
        foreign = make_vehicle(user=other_user)
        with pytest.raises(InvalidInput):
            make_license(primary_vehicle_id=foreign.id)

    def test_unknown_vehicle_rejected(self, make_license):
        with pytest.raises(InvalidInput):
            make_license(primary_vehicle_id=999)

    def test_role_not_used_by_set_type_rejected(self, make_license, make_vehicle):
        dolly = make_vehicle("Dolly")
        with pytest.raises(InvalidInput):
            make_license(set_type="Bitrem 7 eixos", dolly_id=dolly.id)

    def test_rodotrem_accepts_all_roles(self, make_license, make_vehicle):
        trailer = make_vehicle("Semirreboque")
        dolly = make_vehicle("Dolly")
        trailer2 = make_vehicle("Semirreboque")
        license = make_license(set_type="Rodotrem 9 eixos", first_trailer_id=trailer.id,
                               dolly_id=dolly.id, second_trailer_id=trailer2.id)
        assert license.dolly_id == dolly.id

    def test_states_are_deduplicated(self):
        body = LicenseCreate(set_type="Prancha", primary_vehicle_id=1, set_length="22",
                             states=["SP", "MG", "SP"])
        assert body.states == ["SP", "MG"]

    def test_unknown_state_rejected_by_schema(self):
        with pytest.raises(ValueError):
            LicenseCreate(set_type="Prancha", primary_vehicle_id=1, set_length="22", states=["XX"])

    def test_blank_roles_become_none(self):
        body = LicenseCreate(set_type="Prancha", primary_vehicle_id=1, set_length="22",
                             first_trailer_id=0, dolly_id="")
        assert body.first_trailer_id is None
        assert body.dolly_id is None


class TestSubmitScenario:
    def test_draft_then_submit(self, store, owner, make_vehicle):
        vehicle = make_vehicle()
        draft = license_service.create_license(store, LicenseCreate(
            set_type="Prancha", primary_vehicle_id=vehicle.id, set_length="19,80", states=[],
        ), owner.id)
        assert draft.id == 1

        with pytest.raises(InvalidInput):
            license_service.update_license(store, draft.id, LicenseUpdate(is_draft=False), owner.id)
        assert store.licenses.get(draft.id).is_draft is True

        license_service.update_license(store, draft.id, LicenseUpdate(states=["SP", "MG"]), owner.id)
        submitted = license_service.update_license(store, draft.id, LicenseUpdate(is_draft=False), owner.id)

        assert submitted.is_draft is False
        assert submitted.license_number == f"AET-{datetime.utcnow().year}-0001"
        latest = store.activities.list_by_user(owner.id, limit=1)[0]
        assert latest.description == "Licença Prancha enviada para processamento"
        assert latest.license_id == draft.id
        assert latest.user_id == owner.id

    def test_number_stable_after_later_updates(self, store, owner, make_license):
        license = make_license()
        license_service.update_license(store, license.id, LicenseUpdate(is_draft=False), owner.id)
        number = store.licenses.get(license.id).license_number

        license_service.update_license(store, license.id, LicenseUpdate(is_draft=False), owner.id)
        license_service.update_license(store, license.id, LicenseUpdate(set_length="20,10"), owner.id)
        license_service.update_license(store, license.id,
                                       LicenseUpdate(status="Cadastro em Andamento"), owner.id)
        assert store.licenses.get(license.id).license_number == number

    def test_second_submit_logs_nothing(self, store, owner, make_license):
        license = make_license(is_draft=False)
        before = len(store.activities.list_by_user(owner.id))
        license_service.update_license(store, license.id, LicenseUpdate(is_draft=False), owner.id)
        assert len(store.activities.list_by_user(owner.id)) == before

    def test_cannot_revert_to_draft(self, store, owner, make_license):
        license = make_license(is_draft=False)
        with pytest.raises(InvalidState):
            license_service.update_license(store, license.id, LicenseUpdate(is_draft=True), owner.id)

    def test_cannot_empty_states_after_submission(self, store, owner, make_license):
        license = make_license(is_draft=False)
        with pytest.raises(InvalidInput):
            license_service.update_license(store, license.id, LicenseUpdate(states=[]), owner.id)


class TestUpdateLicense:
    def test_unknown_license(self, store, owner):
        with pytest.raises(NotFound):
            license_service.update_license(store, 404, LicenseUpdate(set_length="10"), owner.id)

    def test_other_user_forbidden(self, store, other_user, make_license):
        license = make_license()
        with pytest.raises(Forbidden):
            license_service.update_license(store, license.id, LicenseUpdate(set_length="10"), other_user.id)

    def test_status_change_logged_with_number(self, store, owner, make_license):
        license = make_license(is_draft=False)
        license_service.update_license(store, license.id, LicenseUpdate(status="Análise do Órgão"), owner.id)
        latest = store.activities.list_by_user(owner.id, limit=1)[0]
        assert latest.description == f"Licença {license.license_number} mudou de status para: Análise do Órgão"

    def test_same_status_not_logged(self, store, owner, make_license):
        license = make_license(is_draft=False)
        before = len(store.activities.list_by_user(owner.id))
        license_service.update_license(store, license.id, LicenseUpdate(status="Pendente Cadastro"), owner.id)
        assert len(store.activities.list_by_user(owner.id)) == before

    def test_release_only_through_issuance(self, store, owner, make_license):
        license = make_license(is_draft=False)
        with pytest.raises(InvalidState):
            license_service.update_license(store, license.id, LicenseUpdate(status="Liberada"), owner.id)
        assert store.licenses.get(license.id).status == "Pendente Cadastro"

    def test_required_field_cannot_be_cleared(self, store, owner, make_license):
        license = make_license()
        with pytest.raises(InvalidInput):
            license_service.update_license(store, license.id, LicenseUpdate(set_type=None), owner.id)

    def test_updated_at_moves(self, store, owner, make_license):
        license = make_license()
        created = license.updated_at
        updated = license_service.update_license(store, license.id, LicenseUpdate(set_length="21"), owner.id)
        assert updated.updated_at >= created
        assert updated.set_length == "21"

    def test_changing_set_type_revalidates_roles(self, store, owner, make_license, make_vehicle):
        trailer = make_vehicle("Semirreboque")
        dolly = make_vehicle("Dolly")
        license = make_license(set_type="Rodotrem 9 eixos", first_trailer_id=trailer.id, dolly_id=dolly.id)
        with pytest.raises(InvalidInput):
            license_service.update_license(store, license.id, LicenseUpdate(set_type="Prancha"), owner.id)
        switched = license_service.update_license(
            store, license.id, LicenseUpdate(set_type="Prancha", dolly_id=None), owner.id)
        assert switched.set_type == "Prancha"
        assert switched.dolly_id is None


class TestDeleteLicense:
    def test_draft_can_be_deleted(self, store, owner, make_license):
        license = make_license()
        assert license_service.delete_license(store, license.id, owner.id) is True
        assert store.licenses.get(license.id) is None

    def test_submitted_cannot_be_deleted(self, store, owner, make_license):
        license = make_license(is_draft=False)
        with pytest.raises(InvalidState):
            license_service.delete_license(store, license.id, owner.id)
        assert store.licenses.get(license.id) is not None

    def test_other_user_forbidden(self, store, other_user, make_license):
        license = make_license()
        with pytest.raises(Forbidden):
            license_service.delete_license(store, license.id, other_user.id)

    def test_unknown_license(self, store, owner):
        with pytest.raises(NotFound):
            license_service.delete_license(store, 31, owner.id)


class TestProjections:
    def test_partition_of_owner_licenses(self, store, owner, admin, make_license):
        drafts = [make_license(), make_license(states=())]
        in_progress = [make_license(is_draft=False), make_license(is_draft=False)]
        released = make_license(is_draft=False)
        license_service.issue_file(store, released.id, "/uploads/x.pdf", LicenseIssue(), admin.id)

        draft_ids = {lic.id for lic in license_service.list_drafts(store, owner.id)}
        progress_ids = {lic.id for lic in license_service.list_in_progress(store, owner.id)}
        completed_ids = {lic.id for lic in license_service.list_completed(store, owner.id)}
        all_ids = {lic.id for lic in store.licenses.list_by_owner(owner.id)}

        assert draft_ids == {lic.id for lic in drafts}
        assert progress_ids == {lic.id for lic in in_progress}
        assert completed_ids == {released.id}
        assert draft_ids | progress_ids | completed_ids == all_ids
        assert not (draft_ids & progress_ids or draft_ids & completed_ids or progress_ids & completed_ids)

    def test_projections_are_per_owner(self, store, other_user, make_license):
        make_license(is_draft=False)
        assert license_service.list_in_progress(store, other_user.id) == []

    def test_admin_list_excludes_drafts(self, store, make_license):
        make_license()
        submitted = make_license(is_draft=False)
        assert [lic.id for lic in license_service.list_all(store)] == [submitted.id]

    def test_admin_list_filters_by_status(self, store, admin, make_license):
        first = make_license(is_draft=False)
        make_license(is_draft=False)
        license_service.set_status(store, first.id, "Análise do Órgão", admin.id)
        assert [lic.id for lic in license_service.list_all(store, "Análise do Órgão")] == [first.id]

    def test_admin_list_rejects_unknown_status(self, store):
        with pytest.raises(InvalidInput):
            license_service.list_all(store, "Aprovada")

    def test_get_license_owner_or_admin(self, store, owner, other_user, admin, make_license):
        license = make_license()
        assert license_service.get_license(store, license.id, owner).id == license.id
        assert license_service.get_license(store, license.id, admin).id == license.id
        with pytest.raises(Forbidden):
            license_service.get_license(store, license.id, other_user)
        with pytest.raises(NotFound):
            license_service.get_license(store, 999, owner)


class TestHelpers:
    def test_license_number_format(self):
        assert license_service.format_license_number(7, 2026) == "AET-2026-0007"
        assert license_service.format_license_number(12345, 2026) == "AET-2026-12345"

    def test_add_one_year(self):
        assert license_service.add_one_year(datetime(2026, 3, 10, 9, 30)) == datetime(2027, 3, 10, 9, 30)
        assert license_service.add_one_year(datetime(2028, 2, 29)) == datetime(2029, 3, 1)


class TestSubmitWithStatus:
    def test_status_activity_uses_label_before_submission(self, store, owner, make_license):
        draft = make_license()
        license = license_service.update_license(
            store, draft.id, LicenseUpdate(is_draft=False, status="Cadastro em Andamento"), owner.id)

        assert license.license_number == current_number(draft.id)
        descriptions = [a.description for a in store.activities.list_by_user(owner.id, limit=2)]
        assert f"Licença {draft.id} mudou de status para: Cadastro em Andamento" in descriptions
        assert "Licença Prancha enviada para processamento" in descriptions
