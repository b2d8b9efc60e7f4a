"""Patient charts."""

from datetime import datetime, timedelta

import pytest

from carelink.features.auth.models import Role
from carelink.features.medical_records.models import RecordType, Vitals
from carelink.features.medical_records.schemas import CreateMedicalRecordRequest
from carelink.features.medical_records.service import MedicalRecordService
from carelink.shared.exceptions import ForbiddenException, NotFoundException
from tests.conftest import make_user


async def write_record(author, patient_id, **fields):
    fields.setdefault("diagnosis", "Viral pharyngitis")
    return await MedicalRecordService.create_medical_record(
        author, CreateMedicalRecordRequest(patient_id=patient_id, **fields)
    )


async def test_doctor_writes_record_with_vitals(doctor, patient):
    record = await write_record(
        doctor, patient.patient_id,
        record_type=RecordType.FOLLOW_UP,
        vitals=Vitals(blood_pressure="120/80", heart_rate="72"),
        follow_up="2024-04-01",
    )

    assert record.record_id.startswith("MR")
    assert record.patient_name == "Jane Doe"
    assert record.doctor_name == "Dr. Gregory House"
    assert record.doctor_id == doctor.staff_id
    assert record.vitals.blood_pressure == "120/80"


async def test_receptionist_cannot_write_records(receptionist, patient):
    with pytest.raises(ForbiddenException):
        await write_record(receptionist, patient.patient_id)


async def test_patient_from_other_hospital_is_not_found(doctor):
    outsider = await make_user(
        Role.PATIENT, "john.roe@mail.com", hospital_id="HOSP00000202", patient_id="PAT000999"
    )
    with pytest.raises(NotFoundException):
        await write_record(doctor, outsider.patient_id)


async def test_patient_history_is_newest_first(doctor, nurses, patient):
    first = await write_record(doctor, patient.patient_id, diagnosis="Influenza")
    second = await write_record(nurses[0], patient.patient_id, diagnosis="Recovering")
    first.created_at = datetime.utcnow() - timedelta(days=3)
    await first.save()

    records = await MedicalRecordService.list_medical_records(doctor, patient.patient_id)
    assert [r.record_id for r in records] == [second.record_id, first.record_id]


async def test_doctor_without_filter_sees_own_records(doctor, nurses, patient):
    mine = await write_record(doctor, patient.patient_id)
    await write_record(nurses[0], patient.patient_id)

    records = await MedicalRecordService.list_medical_records(doctor)
    assert [r.record_id for r in records] == [mine.record_id]

    everything = await MedicalRecordService.list_medical_records(nurses[1])
    assert len(everything) == 2


async def test_patient_only_sees_own_chart(doctor, patient):
    other = await make_user(Role.PATIENT, "john.roe@mail.com", patient_id="PAT000999")
    await write_record(doctor, patient.patient_id)
    theirs = await write_record(doctor, other.patient_id)

    records = await MedicalRecordService.list_medical_records(patient)
    assert [r.patient_id for r in records] == [patient.patient_id]

    with pytest.raises(ForbiddenException):
        await MedicalRecordService.list_medical_records(patient, other.patient_id)
    with pytest.raises(NotFoundException):
        await MedicalRecordService.get_medical_record(patient, theirs.record_id)


async def test_records_are_scoped_to_hospital(doctor, patient):
    record = await write_record(doctor, patient.patient_id)
    other = await make_user(Role.DOCTOR, "er@riverside.org", hospital_id="HOSP00000202")

    assert await MedicalRecordService.list_medical_records(other, patient.patient_id) == []
    with pytest.raises(NotFoundException):
        await MedicalRecordService.get_medical_record(other, record.record_id)
