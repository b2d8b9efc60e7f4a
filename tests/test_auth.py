"""Identity and role directory."""

import pytest

from carelink.core.security import decode_token, verify_password
from carelink.features.auth.models import Role, User
from carelink.features.auth.schemas import (
    PatientProfile,
    PublicPatientRegisterRequest,
    StaffRegisterRequest,
)
from carelink.features.auth.service import AuthService, describe_auth_error
from carelink.shared.exceptions import (
    BadRequestException,
    ConflictException,
    CredentialsException,
    ForbiddenException,
)
from tests.conftest import HOSPITAL_ID


def staff_request(role: str, email: str, **extra):
    return StaffRegisterRequest(
        email=email, first_name="New", last_name="Hire", role=role,
        password="secret123", confirm_password="secret123", **extra,
    )


def test_describe_auth_error():
    assert "already registered" in describe_auth_error("auth/email-already-in-use")
    assert "valid email" in describe_auth_error("auth/invalid-email")
    assert "at least 6" in describe_auth_error("auth/weak-password")
    assert describe_auth_error("auth/something-new") == "An unexpected error occurred. Please try again."
    assert describe_auth_error("auth/something-new", "Quota exceeded") == "Quota exceeded"


async def test_authenticate_returns_token_for_uid(doctor):
    user, token = await AuthService.authenticate("house@stmarys.org", "secret123")

    assert user.uid == doctor.uid
    payload = decode_token(token)
    assert payload["sub"] == doctor.uid
    assert payload["role"] == "doctor"
    assert payload["hospital_id"] == HOSPITAL_ID


async def test_authenticate_rejects_bad_password_and_inactive_users(doctor):
    with pytest.raises(CredentialsException):
        await AuthService.authenticate("house@stmarys.org", "wrong-password")

    doctor.is_active = False
    await doctor.save()
    with pytest.raises(CredentialsException) as exc:
        await AuthService.authenticate("house@stmarys.org", "secret123")
    assert "deactivated" in exc.value.detail


async def test_staff_ids_use_role_prefix(doctor, pharmacist, nurses):
    assert doctor.staff_id.startswith("DOC")
    assert pharmacist.staff_id.startswith("PHR")
    assert all(n.staff_id.startswith("NUR") for n in nurses)
    assert doctor.patient_id is None


async def test_duplicate_email_is_a_conflict(doctor):
    with pytest.raises(ConflictException):
        await AuthService.create_user("house@stmarys.org", "secret123", Role.NURSE)


async def test_register_patient_issues_temporary_password(receptionist):
    profile = PatientProfile(email="walkin@mail.com", first_name="Walk", last_name="In")

    patient, temp_password = await AuthService.register_patient(receptionist, profile)

    assert patient.patient_id.startswith("PAT")
    assert temp_password == f"temp{patient.patient_id[-6:]}"
    assert patient.is_first_login is True
    assert patient.hospital_id == HOSPITAL_ID
    assert verify_password(temp_password, patient.password_hash)


async def test_first_login_password_change(receptionist):
    profile = PatientProfile(email="walkin@mail.com", first_name="Walk", last_name="In")
    patient, _ = await AuthService.register_patient(receptionist, profile)

    await AuthService.update_first_login_password(patient, "brand-new-pass")

    stored = await User.find_one(User.uid == patient.uid)
    assert stored.is_first_login is False
    assert verify_password("brand-new-pass", stored.password_hash)
    with pytest.raises(BadRequestException):
        await AuthService.update_first_login_password(stored, "another-pass")


async def test_pharmacy_staff_cannot_register_patients(pharmacist):
    profile = PatientProfile(email="walkin@mail.com", first_name="Walk", last_name="In")
    with pytest.raises(ForbiddenException):
        await AuthService.register_patient(pharmacist, profile)


async def test_public_patient_registration(hospital):
    request = PublicPatientRegisterRequest(
        email="self@mail.com", first_name="Self", last_name="Service",
        hospital_id=HOSPITAL_ID, password="secret123", confirm_password="secret123",
    )

    patient = await AuthService.register_public_patient(request)

    assert patient.role == Role.PATIENT
    assert patient.is_first_login is False
    assert patient.patient_id.startswith("PAT")


async def test_hospital_admin_registers_staff_into_own_hospital(admin):
    nurse = await AuthService.register_staff(
        admin, staff_request("nurse", "new.nurse@stmarys.org", hospital_id="HOSP-ELSEWHERE")
    )
    assert nurse.hospital_id == HOSPITAL_ID
    assert nurse.registered_by == admin.uid

    with pytest.raises(ForbiddenException):
        await AuthService.register_staff(admin, staff_request("hospital_admin", "boss@stmarys.org"))


async def test_super_admin_creates_hospital_admin(hospital):
    root = await AuthService.create_user(
        "root@carelink.org", "secret123", Role.SUPER_ADMIN, first_name="Platform", last_name="Root"
    )

    with pytest.raises(BadRequestException):
        await AuthService.register_staff(root, staff_request("hospital_admin", "boss@stmarys.org"))

    boss = await AuthService.register_staff(
        root, staff_request("hospital_admin", "boss@stmarys.org", hospital_id=HOSPITAL_ID)
    )
    assert boss.role == Role.HOSPITAL_ADMIN
    assert boss.staff_id.startswith("HAD")


async def test_doctor_cannot_register_staff(doctor):
    with pytest.raises(ForbiddenException):
        await AuthService.register_staff(doctor, staff_request("nurse", "n@stmarys.org"))


async def test_set_user_active(admin, doctor):
    updated = await AuthService.set_user_active(admin, doctor.uid, False)
    assert updated.is_active is False

    with pytest.raises(BadRequestException):
        await AuthService.set_user_active(admin, admin.uid, False)


async def test_list_staff_excludes_patients(admin, doctor, nurses, patient):
    staff = await AuthService.list_staff(HOSPITAL_ID)
    assert patient.uid not in {u.uid for u in staff}
    assert len(staff) == 4

    only_nurses = await AuthService.list_staff(HOSPITAL_ID, Role.NURSE)
    assert {u.uid for u in only_nurses} == {n.uid for n in nurses}
