"""Medication status progression and the pharmacy queue."""

from datetime import datetime

import pytest

from carelink.config import settings
from carelink.features.auth.models import DeliveryType
from carelink.features.deliveries.models import DeliveryTask
from carelink.features.pharmacy.models import NotificationStatus
from carelink.features.pharmacy.service import PharmacyService
from carelink.features.prescriptions.models import MedicationStatus, Prescription
from carelink.features.prescriptions.schemas import CreatePrescriptionRequest
from carelink.features.prescriptions.service import PrescriptionService
from carelink.shared.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    InvalidTransitionException,
)
from tests.conftest import HOSPITAL_ID

AMOXICILLIN = {"name": "Amoxicillin 500mg", "dosage": "500mg", "quantity": "14 capsules", "duration": "7 days"}
IBUPROFEN = {"name": "Ibuprofen 400mg", "dosage": "400mg", "quantity": "10 tablets", "duration": "5 days"}


async def prescribe(doctor, patient, bedside=False):
    if bedside:
        patient.is_admitted = True
        patient.current_bed_number = "ICU-004"
        patient.current_ward = "icu"
        patient.medicine_delivery_type = DeliveryType.BEDSIDE
        await patient.save()

    prescription, _, notification, _ = await PrescriptionService.create_prescription_with_billing(
        doctor,
        CreatePrescriptionRequest(patient_id=patient.patient_id, medications=[AMOXICILLIN, IBUPROFEN]),
    )
    return prescription, notification


async def test_advance_only_touches_target_line(pharmacist, doctor, patient):
    prescription, _ = await prescribe(doctor, patient)
    when = datetime(2024, 3, 4, 10, 0)

    updated = await PharmacyService.advance_medication_status(
        pharmacist, prescription.prescription_id, 1, MedicationStatus.READY, now=when
    )

    assert [m.status for m in updated.medications] == [MedicationStatus.PRESCRIBED, MedicationStatus.READY]
    assert updated.medications[1].status_updated_at == when
    stored = await Prescription.find_one(Prescription.prescription_id == prescription.prescription_id)
    assert stored.medications[1].status == MedicationStatus.READY
    assert stored.medications[1].quantity.count == 10


async def test_sold_medication_never_moves_back(pharmacist, doctor, patient):
    prescription, _ = await prescribe(doctor, patient)
    pid = prescription.prescription_id

    await PharmacyService.advance_medication_status(pharmacist, pid, 0, MedicationStatus.READY)
    await PharmacyService.advance_medication_status(pharmacist, pid, 0, MedicationStatus.SOLD)

    for target in (MedicationStatus.PRESCRIBED, MedicationStatus.READY):
        with pytest.raises(InvalidTransitionException):
            await PharmacyService.advance_medication_status(pharmacist, pid, 0, target)


async def test_same_status_is_a_no_op(pharmacist, doctor, patient):
    prescription, _ = await prescribe(doctor, patient)
    pid = prescription.prescription_id

    first = await PharmacyService.advance_medication_status(pharmacist, pid, 0, MedicationStatus.READY)
    again = await PharmacyService.advance_medication_status(pharmacist, pid, 0, MedicationStatus.READY)

    assert again.medications[0].status == MedicationStatus.READY
    assert again.medications[0].status_updated_at == first.medications[0].status_updated_at


async def test_non_emergency_may_skip_to_sold(pharmacist, doctor, patient):
    prescription, _ = await prescribe(doctor, patient)

    updated = await PharmacyService.advance_medication_status(
        pharmacist, prescription.prescription_id, 0, MedicationStatus.SOLD
    )
    assert updated.medications[0].status == MedicationStatus.SOLD


async def test_emergency_medication_is_never_sold(pharmacist, doctor, patient):
    prescription, _ = await prescribe(doctor, patient, bedside=True)
    pid = prescription.prescription_id
    assert prescription.is_emergency is True

    with pytest.raises(BadRequestException):
        await PharmacyService.advance_medication_status(pharmacist, pid, 0, MedicationStatus.SOLD)

    await PharmacyService.advance_medication_status(pharmacist, pid, 0, MedicationStatus.READY)
    with pytest.raises(BadRequestException):
        await PharmacyService.advance_medication_status(pharmacist, pid, 0, MedicationStatus.SOLD)


async def test_bad_index_and_role(pharmacist, doctor, patient):
    prescription, _ = await prescribe(doctor, patient)

    with pytest.raises(BadRequestException):
        await PharmacyService.advance_medication_status(
            pharmacist, prescription.prescription_id, 5, MedicationStatus.READY
        )
    with pytest.raises(ForbiddenException):
        await PharmacyService.advance_medication_status(
            doctor, prescription.prescription_id, 0, MedicationStatus.READY
        )


async def test_stale_read_does_not_revert_sibling_line(pharmacist, doctor, patient, monkeypatch):
    prescription, _ = await prescribe(doctor, patient)
    pid = prescription.prescription_id
    stale = await Prescription.find_one(Prescription.prescription_id == pid)

    await PharmacyService.advance_medication_status(pharmacist, pid, 0, MedicationStatus.READY)
    await PharmacyService.advance_medication_status(pharmacist, pid, 0, MedicationStatus.SOLD)

    # Second pharmacist works from the copy read before line 0 moved
    original_find_one = Prescription.find_one

    def find_one(*args, **kwargs):
        if args and isinstance(args[0], dict):
            return original_find_one(*args, **kwargs)

        async def stale_copy():
            return stale
        return stale_copy()

    monkeypatch.setattr(Prescription, "find_one", find_one)
    updated = await PharmacyService.advance_medication_status(pharmacist, pid, 1, MedicationStatus.READY)
    monkeypatch.undo()

    assert [m.status for m in updated.medications] == [MedicationStatus.SOLD, MedicationStatus.READY]
    stored = await Prescription.find_one(Prescription.prescription_id == pid)
    assert [m.status for m in stored.medications] == [MedicationStatus.SOLD, MedicationStatus.READY]
    assert stored.medications[0].quantity.count == 14


async def test_pending_queue_lists_emergencies_first(pharmacist, doctor, patient):
    _, routine = await prescribe(doctor, patient)
    _, urgent = await prescribe(doctor, patient, bedside=True)

    queue = await PharmacyService.list_pending_notifications(HOSPITAL_ID)

    assert [n.notification_id for n in queue] == [urgent.notification_id, routine.notification_id]


async def test_process_notification_once(pharmacist, doctor, patient):
    _, notification = await prescribe(doctor, patient)

    processed = await PharmacyService.process_notification(pharmacist, notification.notification_id)
    assert processed.status == NotificationStatus.PROCESSED
    assert processed.processed_by == pharmacist.uid

    with pytest.raises(ConflictException):
        await PharmacyService.process_notification(pharmacist, notification.notification_id)
    assert await PharmacyService.list_pending_notifications(HOSPITAL_ID) == []


async def test_peak_status_counts_workload(pharmacist, doctor, patient, monkeypatch):
    monkeypatch.setattr(settings, "PEAK_WORKLOAD_THRESHOLD", 2)
    await prescribe(doctor, patient)
    await prescribe(doctor, patient, bedside=True)
    late_monday = datetime(2024, 3, 4, 21, 0)

    status = await PharmacyService.get_peak_status(HOSPITAL_ID, now=late_monday)

    assert status.pending_notifications == 2
    assert status.assigned_deliveries == await DeliveryTask.count() == 1
    assert status.workload == 3
    assert status.in_peak_window is False
    assert status.is_peak is True
