import pytest
from datetime import date
import uuid
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConstraintViolationError, RowAccessDeniedError
from app.core.permissions import CallerHasRole, Operation, Role, default_policy_set, policy
from app.domain.analytics.repository import HistoricalSurgicalDataRepository, seed_historical_data
from app.domain.clinical.models import CaseStatus
from app.domain.clinical.repository import (
    PatientDetailsRepository,
    SurgeonDetailsRepository,
    SurgicalCaseRepository,
    SurgicalHistoryRepository,
    VitalSignsRepository,
)
from app.domain.profiles.repository import ProfileRepository


def vitals_for(patient_id, **overrides):
    values = {
        "patient_id": patient_id,
        "heart_rate": 70,
        "systolic_bp": 118,
        "diastolic_bp": 76,
        "body_temperature_celsius": 36.6,
        "respiratory_rate": 14,
    }
    values.update(overrides)
    return values


@pytest.mark.integration
@pytest.mark.rbac
class TestProfileAccess:
    """Policy-filtered profile access."""

    async def test_patient_lists_only_self(self, db_session: AsyncSession, patient, other_patient, surgeon) -> None:
        profiles = await ProfileRepository(db_session, patient).list()
        assert [p.id for p in profiles] == [patient.user_id]

    async def test_surgeon_lists_everyone(self, db_session: AsyncSession, patient, other_patient, surgeon) -> None:
        profiles = await ProfileRepository(db_session, surgeon).list()
        assert {p.id for p in profiles} == {patient.user_id, other_patient.user_id, surgeon.user_id}

    async def test_list_by_role(self, db_session: AsyncSession, patient, surgeon, admin) -> None:
        surgeons = await ProfileRepository(db_session, admin).list_by_role(Role.SURGEON)
        assert [p.id for p in surgeons] == [surgeon.user_id]

    async def test_hidden_row_looks_missing(self, db_session: AsyncSession, patient, other_patient) -> None:
        repo = ProfileRepository(db_session, patient)

        assert await repo.get(other_patient.user_id) is None
        with pytest.raises(RowAccessDeniedError) as hidden:
            await repo.update(other_patient.user_id, {"full_name": "Changed"})
        with pytest.raises(RowAccessDeniedError) as missing:
            await repo.update(uuid.uuid4(), {"full_name": "Changed"})

        assert hidden.value.status_code == missing.value.status_code == 404
        assert hidden.value.error_code == missing.value.error_code
        assert hidden.value.message == missing.value.message

    async def test_patient_updates_own_profile(self, db_session: AsyncSession, patient) -> None:
        profile = await ProfileRepository(db_session, patient).update(
            patient.user_id, {"full_name": "Renamed Patient"}
        )
        assert profile.full_name == "Renamed Patient"

    async def test_surgeon_cannot_update_visible_profile(self, db_session: AsyncSession, patient, surgeon) -> None:
        repo = ProfileRepository(db_session, surgeon)
        assert await repo.get(patient.user_id) is not None

        with pytest.raises(RowAccessDeniedError):
            await repo.update(patient.user_id, {"full_name": "Nope"})

    async def test_primary_key_is_immutable(self, db_session: AsyncSession, patient) -> None:
        with pytest.raises(ConstraintViolationError) as exc_info:
            await ProfileRepository(db_session, patient).update(patient.user_id, {"id": uuid.uuid4()})
        assert exc_info.value.field == "id"

    async def test_invalid_role_is_a_constraint_error(self, db_session: AsyncSession, admin, patient) -> None:
        with pytest.raises(ConstraintViolationError) as exc_info:
            await ProfileRepository(db_session, admin).update(patient.user_id, {"role": "superuser"})
        assert exc_info.value.field == "role"
        assert exc_info.value.details["field"] == "role"

    async def test_unknown_column_rejected(self, db_session: AsyncSession, patient) -> None:
        with pytest.raises(ConstraintViolationError) as exc_info:
            await ProfileRepository(db_session, patient).update(patient.user_id, {"nickname": "P"})
        assert exc_info.value.field == "nickname"

    async def test_restrictive_policy_applies_to_queries(self, db_session: AsyncSession, patient, surgeon, admin) -> None:
        admins_only = policy(
            "Only admins browse profiles", "profiles", (Operation.SELECT,),
            CallerHasRole(Role.ADMIN), restrictive=True
        )
        policies = default_policy_set.with_policies(admins_only)

        assert await ProfileRepository(db_session, surgeon, policies).list() == []
        assert len(await ProfileRepository(db_session, admin, policies).list()) == 3


@pytest.mark.integration
@pytest.mark.rbac
class TestClinicalAccess:
    """Policy-filtered access to clinical tables."""

    async def test_patient_details_lifecycle(self, db_session: AsyncSession, patient, other_patient, surgeon) -> None:
        repo = PatientDetailsRepository(db_session, patient)
        details = await repo.create({
            "user_id": patient.user_id,
            "physical_info": {"height_cm": 170, "blood_type": "O+"},
        })
        assert details.personal_info == {}

        assert await PatientDetailsRepository(db_session, surgeon).get(patient.user_id) is not None
        assert await PatientDetailsRepository(db_session, other_patient).get(patient.user_id) is None

        with pytest.raises(RowAccessDeniedError):
            await PatientDetailsRepository(db_session, other_patient).create({"user_id": patient.user_id})

    async def test_patient_records_own_vitals_only(self, db_session: AsyncSession, patient, other_patient) -> None:
        repo = VitalSignsRepository(db_session, patient)
        vitals = await repo.create(vitals_for(patient.user_id))

        with pytest.raises(RowAccessDeniedError):
            await repo.create(vitals_for(other_patient.user_id))
        with pytest.raises(RowAccessDeniedError):
            await repo.update(vitals.id, {"heart_rate": 60})

        assert [v.id for v in await repo.list_for_patient(patient.user_id)] == [vitals.id]
        assert await VitalSignsRepository(db_session, other_patient).list_for_patient() == []

    async def test_missing_required_column(self, db_session: AsyncSession, patient) -> None:
        values = vitals_for(patient.user_id)
        del values["heart_rate"]

        with pytest.raises(ConstraintViolationError) as exc_info:
            await VitalSignsRepository(db_session, patient).create(values)
        assert exc_info.value.field == "heart_rate"

    async def test_missing_reference(self, db_session: AsyncSession, surgeon) -> None:
        with pytest.raises(ConstraintViolationError) as exc_info:
            await VitalSignsRepository(db_session, surgeon).create(vitals_for(uuid.uuid4()))
        assert exc_info.value.field == "patient_id"

    async def test_denied_insert_ignores_missing_reference(self, db_session: AsyncSession, patient) -> None:
        with pytest.raises(RowAccessDeniedError):
            await VitalSignsRepository(db_session, patient).create(vitals_for(uuid.uuid4()))

    async def test_denied_update_ignores_missing_reference(
        self, db_session: AsyncSession, patient, surgeon, other_surgeon
    ) -> None:
        case = await SurgicalCaseRepository(db_session, other_surgeon).create({
            "patient_id": patient.user_id,
            "surgeon_id": other_surgeon.user_id,
            "procedure_name": "Carpal tunnel release",
            "status": "proposed",
        })

        with pytest.raises(RowAccessDeniedError):
            await SurgicalCaseRepository(db_session, surgeon).update(case.id, {"surgeon_id": uuid.uuid4()})

    async def test_providers_list_vitals_of_every_patient(
        self, db_session: AsyncSession, patient, other_patient, surgeon, admin
    ) -> None:
        own = await VitalSignsRepository(db_session, patient).create(vitals_for(patient.user_id))
        other = await VitalSignsRepository(db_session, other_patient).create(
            vitals_for(other_patient.user_id, heart_rate=88)
        )

        for provider in (surgeon, admin):
            rows = await VitalSignsRepository(db_session, provider).list()
            assert {v.id for v in rows} == {own.id, other.id}

        assert [v.id for v in await VitalSignsRepository(db_session, patient).list()] == [own.id]
        assert [v.id for v in await VitalSignsRepository(db_session, other_patient).list()] == [other.id]

    async def test_surgeon_directory_visible_to_anonymous(self, db_session: AsyncSession, surgeon) -> None:
        from app.core.permissions import ANONYMOUS

        await SurgeonDetailsRepository(db_session, surgeon).create({
            "user_id": surgeon.user_id,
            "specialty": "Cardiac Surgery",
            "hospital_affiliation": "City Hospital",
        })

        public = await SurgeonDetailsRepository(db_session, ANONYMOUS).list_by_specialty("Cardiac Surgery")
        assert [s.user_id for s in public] == [surgeon.user_id]
        assert public[0].years_of_experience == 0

    async def test_case_status_checked_before_authorization(self, db_session: AsyncSession, patient, surgeon) -> None:
        case = await SurgicalCaseRepository(db_session, surgeon).create({
            "patient_id": patient.user_id,
            "surgeon_id": surgeon.user_id,
            "procedure_name": "Knee arthroscopy",
            "status": CaseStatus.PROPOSED,
        })

        # The patient may not update cases, but the bad value is reported first
        with pytest.raises(ConstraintViolationError) as exc_info:
            await SurgicalCaseRepository(db_session, patient).update(case.id, {"status": "done"})
        assert exc_info.value.field == "status"

        with pytest.raises(RowAccessDeniedError):
            await SurgicalCaseRepository(db_session, patient).update_status(case.id, CaseStatus.CANCELLED)

    async def test_surgeon_cannot_hand_case_to_colleague(
        self, db_session: AsyncSession, patient, surgeon, other_surgeon
    ) -> None:
        repo = SurgicalCaseRepository(db_session, surgeon)
        case = await repo.create({
            "patient_id": patient.user_id,
            "surgeon_id": surgeon.user_id,
            "procedure_name": "Appendectomy",
            "status": "scheduled",
            "priority": "high",
        })

        # The new row would fall outside the surgeon's own policy
        with pytest.raises(RowAccessDeniedError):
            await repo.update(case.id, {"surgeon_id": other_surgeon.user_id})

        updated = await repo.update_status(case.id, CaseStatus.IN_PROGRESS)
        assert updated.status == "in_progress"

        assert await SurgicalCaseRepository(db_session, other_surgeon).search() == []
        patient_cases = await SurgicalCaseRepository(db_session, patient).search(status=CaseStatus.IN_PROGRESS)
        assert [c.id for c in patient_cases] == [case.id]

    async def test_surgeon_cannot_open_case_for_colleague(
        self, db_session: AsyncSession, patient, surgeon, other_surgeon
    ) -> None:
        with pytest.raises(RowAccessDeniedError):
            await SurgicalCaseRepository(db_session, surgeon).create({
                "patient_id": patient.user_id,
                "surgeon_id": other_surgeon.user_id,
                "procedure_name": "Hip replacement",
                "status": "proposed",
            })

    async def test_profile_delete_cascades(self, db_session: AsyncSession, patient, surgeon, admin) -> None:
        await PatientDetailsRepository(db_session, patient).create({"user_id": patient.user_id})
        await VitalSignsRepository(db_session, patient).create(vitals_for(patient.user_id))
        history = await SurgicalHistoryRepository(db_session, surgeon).create({
            "patient_id": patient.user_id,
            "surgeon_id": surgeon.user_id,
            "procedure_name": "Cholecystectomy",
            "hospital": "General Hospital",
            "surgery_date": date(2022, 5, 17),
        })

        await ProfileRepository(db_session, admin).delete(surgeon.user_id)
        db_session.expire_all()
        history = await SurgicalHistoryRepository(db_session, admin).get(history.id)
        assert history.surgeon_id is None

        await ProfileRepository(db_session, admin).delete(patient.user_id)
        db_session.expire_all()
        assert await PatientDetailsRepository(db_session, admin).list() == []
        assert await VitalSignsRepository(db_session, admin).list() == []
        assert await SurgicalHistoryRepository(db_session, admin).list() == []

    async def test_only_admin_deletes_profiles(self, db_session: AsyncSession, patient) -> None:
        with pytest.raises(RowAccessDeniedError):
            await ProfileRepository(db_session, patient).delete(patient.user_id)


@pytest.mark.integration
@pytest.mark.rbac
class TestHistoricalData:
    """Sample volume data and its policies."""

    async def test_seed_is_loaded_once(self, db_session: AsyncSession) -> None:
        assert await seed_historical_data(db_session) == 20
        assert await seed_historical_data(db_session) == 0

    async def test_surgeon_reads_admin_writes(self, db_session: AsyncSession, surgeon, admin, patient) -> None:
        await seed_historical_data(db_session)

        rows = await HistoricalSurgicalDataRepository(db_session, surgeon).search(hospital_id="HOSP001", year=2023)
        assert [r.week_number for r in rows] == list(range(1, 21))
        assert await HistoricalSurgicalDataRepository(db_session, patient).search() == []

        with pytest.raises(RowAccessDeniedError):
            await HistoricalSurgicalDataRepository(db_session, surgeon).create({
                "hospital_id": "HOSP002", "week_number": 1, "year": 2024, "surgical_volume": 10,
            })

        created = await HistoricalSurgicalDataRepository(db_session, admin).create({
            "hospital_id": "HOSP002", "week_number": 1, "year": 2024, "surgical_volume": 10, "season": "winter",
        })
        assert created.season == "winter"

        repo = HistoricalSurgicalDataRepository(db_session, admin)
        updated = await repo.update(created.id, {"surgical_volume": 12})
        assert updated.surgical_volume == 12

        with pytest.raises(RowAccessDeniedError):
            await HistoricalSurgicalDataRepository(db_session, surgeon).delete(created.id)

        await repo.delete(created.id)
        assert await repo.get(created.id) is None

    async def test_invalid_season(self, db_session: AsyncSession, admin) -> None:
        with pytest.raises(ConstraintViolationError) as exc_info:
            await HistoricalSurgicalDataRepository(db_session, admin).create({
                "hospital_id": "HOSP002", "week_number": 1, "year": 2024, "surgical_volume": 10, "season": "monsoon",
            })
        assert exc_info.value.field == "season"
