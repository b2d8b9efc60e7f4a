"""Patient admissions and bed allocation."""

from datetime import datetime

import pytest

from carelink.data.wards import WARD_TYPES
from carelink.features.auth.models import DeliveryType, Role, User
from carelink.features.patients.models import Admission, AdmissionStatus
from carelink.features.patients.schemas import AdmitPatientRequest
from carelink.features.patients.service import PatientService
from carelink.shared.exceptions import BadRequestException
from tests.conftest import HOSPITAL_ID, make_user


def admit(patient_id: str, admission_type: str = "emergency", ward_type: str = "icu"):
    return AdmitPatientRequest(
        patient_id=patient_id, admission_type=admission_type, ward_type=ward_type,
        admission_reason="Chest pain",
    )


async def occupy(ward_type: str, bed_number: str):
    await Admission(
        admission_id=f"ADM-{bed_number}",
        hospital_id=HOSPITAL_ID,
        patient_id=f"PAT-{bed_number}",
        patient_name="Someone Else",
        admission_type="planned",
        ward_type=ward_type,
        bed_number=bed_number,
        medicine_delivery_type=DeliveryType.BEDSIDE,
        admitted_at=datetime.utcnow(),
    ).insert()


async def test_admit_takes_first_free_bed(receptionist, patient):
    await occupy("icu", "ICU-001")
    await occupy("icu", "ICU-002")
    await occupy("icu", "ICU-003")

    admission = await PatientService.admit_patient(receptionist, admit(patient.patient_id))

    assert admission.bed_number == "ICU-004"
    stored = await User.find_one(User.patient_id == patient.patient_id)
    assert stored.is_admitted is True
    assert stored.current_bed_number == "ICU-004"
    assert stored.current_ward == "icu"
    assert stored.medicine_delivery_type == DeliveryType.BEDSIDE


async def test_outpatient_admission_keeps_pharmacy_delivery(receptionist, patient):
    admission = await PatientService.admit_patient(
        receptionist, admit(patient.patient_id, admission_type="outpatient", ward_type="general")
    )

    assert admission.bed_number == "GEN-001"
    assert admission.medicine_delivery_type == DeliveryType.PHARMACY


async def test_cannot_admit_twice(receptionist, patient):
    await PatientService.admit_patient(receptionist, admit(patient.patient_id))
    with pytest.raises(BadRequestException):
        await PatientService.admit_patient(receptionist, admit(patient.patient_id))


async def test_full_ward_is_rejected(receptionist, patient, monkeypatch):
    monkeypatch.setitem(WARD_TYPES["cardiac"], "capacity", 1)
    await occupy("cardiac", "CAR-001")

    with pytest.raises(BadRequestException) as exc:
        await PatientService.admit_patient(receptionist, admit(patient.patient_id, ward_type="cardiac"))
    assert "No beds available" in exc.value.detail

    stored = await User.find_one(User.patient_id == patient.patient_id)
    assert stored.is_admitted is False


async def test_discharge_frees_bed_and_resets_patient(receptionist, patient):
    await PatientService.admit_patient(receptionist, admit(patient.patient_id))

    admission = await PatientService.discharge_patient(receptionist, patient.patient_id)

    assert admission.status == AdmissionStatus.DISCHARGED
    assert admission.discharged_at is not None
    stored = await User.find_one(User.patient_id == patient.patient_id)
    assert stored.is_admitted is False
    assert stored.current_bed_number is None
    assert stored.medicine_delivery_type == DeliveryType.PHARMACY

    other = await make_user(Role.PATIENT, "next@mail.com", patient_id="PAT000124")
    again = await PatientService.admit_patient(receptionist, admit(other.patient_id))
    assert again.bed_number == "ICU-001"


async def test_ward_occupancy(receptionist, patient):
    await PatientService.admit_patient(receptionist, admit(patient.patient_id))

    occupancy = {w.ward_type: w for w in await PatientService.ward_occupancy(HOSPITAL_ID)}

    assert occupancy["icu"].occupied == 1
    assert occupancy["icu"].available == WARD_TYPES["icu"]["capacity"] - 1
    assert occupancy["general"].occupied == 0
