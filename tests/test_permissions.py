import pytest
import uuid

from app.core.permissions import (
    ANONYMOUS,
    CallerContext,
    CallerHasRole,
    IsCaller,
    Operation,
    Role,
    accessible,
    default_policy_set,
    policy,
)


def caller(role=None):
    return CallerContext(user_id=uuid.uuid4(), role=role)


@pytest.mark.unit
@pytest.mark.rbac
class TestProfilePolicies:
    """Row-level policies on profiles."""

    def test_user_sees_only_own_profile(self) -> None:
        patient = caller(Role.PATIENT)
        own = {"id": patient.user_id, "role": "patient"}
        other = {"id": uuid.uuid4(), "role": "patient"}

        assert accessible("profiles", Operation.SELECT, patient, own)
        assert not accessible("profiles", Operation.SELECT, patient, other)

    def test_surgeon_sees_other_profiles_but_cannot_update_them(self) -> None:
        surgeon = caller(Role.SURGEON)
        other = {"id": uuid.uuid4(), "role": "patient"}

        assert accessible("profiles", Operation.SELECT, surgeon, other)
        assert not accessible("profiles", Operation.UPDATE, surgeon, other)
        assert not accessible("profiles", Operation.DELETE, surgeon, other)

    def test_admin_has_every_operation(self) -> None:
        admin = caller(Role.ADMIN)
        other = {"id": uuid.uuid4(), "role": "surgeon"}

        for operation in (Operation.SELECT, Operation.INSERT, Operation.UPDATE, Operation.DELETE):
            assert accessible("profiles", operation, admin, other)

    def test_user_cannot_delete_own_profile(self) -> None:
        patient = caller(Role.PATIENT)
        assert not accessible("profiles", Operation.DELETE, patient, {"id": patient.user_id})

    def test_id_comparison_ignores_representation(self) -> None:
        patient = caller(Role.PATIENT)
        assert accessible("profiles", Operation.SELECT, patient, {"id": str(patient.user_id)})

    def test_caller_without_profile_keeps_only_ownership_rules(self) -> None:
        orphan = CallerContext(user_id=uuid.uuid4(), role=None)

        assert accessible("profiles", Operation.SELECT, orphan, {"id": orphan.user_id})
        assert not accessible("profiles", Operation.SELECT, orphan, {"id": uuid.uuid4()})


@pytest.mark.unit
@pytest.mark.rbac
class TestClinicalPolicies:
    """Row-level policies on clinical tables."""

    def test_surgeon_directory_is_public(self) -> None:
        row = {"user_id": uuid.uuid4(), "specialty": "Cardiac"}

        assert accessible("surgeon_details", Operation.SELECT, ANONYMOUS, row)
        assert not accessible("surgeon_details", Operation.INSERT, ANONYMOUS, row)
        assert not accessible("surgeon_details", Operation.UPDATE, caller(Role.SURGEON), row)

    def test_surgeon_manages_own_directory_entry(self) -> None:
        surgeon = caller(Role.SURGEON)
        row = {"user_id": surgeon.user_id}

        assert accessible("surgeon_details", Operation.INSERT, surgeon, row)
        assert accessible("surgeon_details", Operation.DELETE, surgeon, row)

    def test_patient_details_visible_to_providers_only(self) -> None:
        patient = caller(Role.PATIENT)
        row = {"user_id": patient.user_id}

        assert accessible("patient_details", Operation.UPDATE, patient, row)
        assert accessible("patient_details", Operation.SELECT, caller(Role.SURGEON), row)
        assert not accessible("patient_details", Operation.UPDATE, caller(Role.SURGEON), row)
        assert not accessible("patient_details", Operation.SELECT, caller(Role.PATIENT), row)

    def test_patient_can_record_but_not_edit_vitals(self) -> None:
        patient = caller(Role.PATIENT)
        own = {"patient_id": patient.user_id}

        assert accessible("vital_signs", Operation.INSERT, patient, own)
        assert accessible("vital_signs", Operation.SELECT, patient, own)
        assert not accessible("vital_signs", Operation.UPDATE, patient, own)
        assert not accessible("vital_signs", Operation.INSERT, patient, {"patient_id": uuid.uuid4()})

    def test_providers_manage_vitals(self) -> None:
        row = {"patient_id": uuid.uuid4()}
        for role in (Role.SURGEON, Role.ADMIN):
            assert accessible("vital_signs", Operation.UPDATE, caller(role), row)

    def test_surgical_history_written_by_providers(self) -> None:
        patient = caller(Role.PATIENT)
        row = {"patient_id": patient.user_id, "surgeon_id": None}

        assert accessible("surgical_history", Operation.SELECT, patient, row)
        assert not accessible("surgical_history", Operation.INSERT, patient, row)
        assert accessible("surgical_history", Operation.INSERT, caller(Role.SURGEON), row)

    def test_surgeon_manages_only_assigned_cases(self) -> None:
        surgeon = caller(Role.SURGEON)
        assigned = {"patient_id": uuid.uuid4(), "surgeon_id": surgeon.user_id}
        foreign = {"patient_id": uuid.uuid4(), "surgeon_id": uuid.uuid4()}

        assert accessible("surgical_cases", Operation.UPDATE, surgeon, assigned)
        assert not accessible("surgical_cases", Operation.SELECT, surgeon, foreign)
        assert accessible("surgical_cases", Operation.UPDATE, caller(Role.ADMIN), foreign)

    def test_patient_reads_own_cases(self) -> None:
        patient = caller(Role.PATIENT)
        row = {"patient_id": patient.user_id, "surgeon_id": uuid.uuid4()}

        assert accessible("surgical_cases", Operation.SELECT, patient, row)
        assert not accessible("surgical_cases", Operation.UPDATE, patient, row)

    def test_historical_data_access(self) -> None:
        row = {"hospital_id": "HOSP001"}

        assert accessible("historical_surgical_data", Operation.SELECT, caller(Role.SURGEON), row)
        assert not accessible("historical_surgical_data", Operation.INSERT, caller(Role.SURGEON), row)
        assert accessible("historical_surgical_data", Operation.INSERT, caller(Role.ADMIN), row)
        assert not accessible("historical_surgical_data", Operation.SELECT, caller(Role.PATIENT), row)


@pytest.mark.unit
@pytest.mark.rbac
class TestPolicySet:
    """Combination rules of the policy set."""

    def test_unknown_table_denies_everything(self) -> None:
        assert not accessible("billing", Operation.SELECT, caller(Role.ADMIN), {})

    def test_matching_policies_names_admitting_rules(self) -> None:
        admin = caller(Role.ADMIN)
        names = default_policy_set.matching_policies(
            "profiles", Operation.SELECT, admin, {"id": admin.user_id}
        )

        assert "Users can view their own profile" in names
        assert "Admins can view all profiles" in names
        assert "Surgeons can view other profiles" not in names

    def test_restrictive_policy_narrows_permissive_access(self) -> None:
        admins_only = policy(
            "Only admins read history",
            "surgical_history",
            (Operation.SELECT,),
            CallerHasRole(Role.ADMIN),
            restrictive=True
        )
        policies = default_policy_set.with_policies(admins_only)
        row = {"patient_id": uuid.uuid4()}

        assert not policies.accessible("surgical_history", Operation.SELECT, caller(Role.SURGEON), row)
        assert policies.accessible("surgical_history", Operation.SELECT, caller(Role.ADMIN), row)
        # The default set is left untouched
        assert default_policy_set.accessible("surgical_history", Operation.SELECT, caller(Role.SURGEON), row)

    def test_restrictive_policy_alone_grants_nothing(self) -> None:
        only_restrictive = policy(
            "Own rows", "notes", (Operation.ALL,), IsCaller("owner_id"), restrictive=True
        )
        policies = default_policy_set.with_policies(only_restrictive)
        patient = caller(Role.PATIENT)

        assert not policies.accessible("notes", Operation.SELECT, patient, {"owner_id": patient.user_id})

    def test_predicates_combine_with_or(self) -> None:
        predicate = IsCaller("surgeon_id") | CallerHasRole(Role.ADMIN)
        surgeon = caller(Role.SURGEON)

        assert predicate.evaluate(surgeon, {"surgeon_id": surgeon.user_id})
        assert not predicate.evaluate(surgeon, {"surgeon_id": None})
        assert predicate.evaluate(caller(Role.ADMIN), {"surgeon_id": None})

    def test_anonymous_caller_matches_no_ownership_rule(self) -> None:
        assert not IsCaller("id").evaluate(ANONYMOUS, {"id": None})
        assert not accessible("profiles", Operation.SELECT, ANONYMOUS, {"id": uuid.uuid4()})
