"""Emergency department waiting list."""

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from carelink.features.auth.models import Role
from carelink.features.emergency_slots.models import EmergencySlot, EmergencySlotStatus, Urgency
from carelink.features.emergency_slots.schemas import CreateEmergencySlotRequest
from carelink.features.emergency_slots.service import EmergencySlotService
from carelink.shared.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidTransitionException,
    NotFoundException,
)
from tests.conftest import make_user


async def open_slot(actor, **fields):
    fields.setdefault("complaint", "Chest pain")
    return await EmergencySlotService.create_emergency_slot(actor, CreateEmergencySlotRequest(**fields))


def test_slot_needs_a_patient():
    with pytest.raises(ValidationError):
        CreateEmergencySlotRequest(complaint="Fall", patient_name="  ")


async def test_registered_patient_slot_takes_chart_name(receptionist, patient):
    slot = await open_slot(receptionist, patient_id=patient.patient_id, urgency=Urgency.CRITICAL)

    assert slot.slot_id.startswith("EMG")
    assert slot.patient_name == "Jane Doe"
    assert slot.status == EmergencySlotStatus.WAITING
    assert slot.created_by == receptionist.staff_id


async def test_walk_in_defaults_to_medium_urgency(nurses):
    slot = await open_slot(nurses[0], patient_name="Unknown male, approx. 40")
    assert slot.urgency == Urgency.MEDIUM
    assert slot.patient_id is None


async def test_unknown_patient_is_rejected(receptionist):
    with pytest.raises(NotFoundException):
        await open_slot(receptionist, patient_id="PAT999999999")


async def test_pharmacy_cannot_open_slots(pharmacist):
    with pytest.raises(ForbiddenException):
        await open_slot(pharmacist, patient_name="John Roe")


async def test_list_is_newest_first_and_scoped_to_hospital(receptionist):
    first = await open_slot(receptionist, patient_name="First In")
    second = await open_slot(receptionist, patient_name="Second In")
    first.created_at = datetime.utcnow() - timedelta(minutes=10)
    await first.save()

    other = await make_user(Role.RECEPTIONIST, "desk@riverside.org", hospital_id="HOSP00000202")
    await open_slot(other, patient_name="Elsewhere")

    slots = await EmergencySlotService.list_emergency_slots(receptionist.hospital_id)
    assert [s.slot_id for s in slots] == [second.slot_id, first.slot_id]


async def test_status_moves_forward_only(doctor, receptionist):
    slot = await open_slot(receptionist, patient_name="John Roe")

    with pytest.raises(InvalidTransitionException):
        await EmergencySlotService.update_emergency_slot_status(
            doctor, slot.slot_id, EmergencySlotStatus.COMPLETED
        )

    treated = await EmergencySlotService.update_emergency_slot_status(
        doctor, slot.slot_id, EmergencySlotStatus.IN_TREATMENT
    )
    assert treated.status == EmergencySlotStatus.IN_TREATMENT

    done = await EmergencySlotService.update_emergency_slot_status(
        doctor, slot.slot_id, EmergencySlotStatus.COMPLETED
    )
    assert done.status == EmergencySlotStatus.COMPLETED

    waiting = await EmergencySlotService.list_emergency_slots(
        receptionist.hospital_id, EmergencySlotStatus.WAITING
    )
    assert waiting == []


async def test_concurrent_status_change_is_a_conflict(doctor, receptionist, monkeypatch):
    slot = await open_slot(receptionist, patient_name="John Roe")
    stale = slot.model_copy()

    await EmergencySlotService.update_emergency_slot_status(
        doctor, slot.slot_id, EmergencySlotStatus.IN_TREATMENT
    )

    # Second clinician works from the copy read before the first change
    original_find_one = EmergencySlot.find_one
    reads = []

    def find_one(*args, **kwargs):
        reads.append(args)
        if len(reads) > 1:
            return original_find_one(*args, **kwargs)

        async def stale_copy():
            return stale
        return stale_copy()

    monkeypatch.setattr(EmergencySlot, "find_one", find_one)

    with pytest.raises(ConflictException):
        await EmergencySlotService.update_emergency_slot_status(
            doctor, slot.slot_id, EmergencySlotStatus.IN_TREATMENT
        )


async def test_other_hospital_cannot_update_slot(receptionist):
    slot = await open_slot(receptionist, patient_name="John Roe")
    other = await make_user(Role.DOCTOR, "er@riverside.org", hospital_id="HOSP00000202")

    with pytest.raises(NotFoundException):
        await EmergencySlotService.update_emergency_slot_status(
            other, slot.slot_id, EmergencySlotStatus.IN_TREATMENT
        )


async def test_board_counts_open_slots_by_urgency(doctor, receptionist):
    await open_slot(receptionist, patient_name="A", urgency=Urgency.CRITICAL)
    await open_slot(receptionist, patient_name="B", urgency=Urgency.CRITICAL)
    done = await open_slot(receptionist, patient_name="C", urgency=Urgency.LOW)
    await EmergencySlotService.update_emergency_slot_status(doctor, done.slot_id, EmergencySlotStatus.IN_TREATMENT)
    await EmergencySlotService.update_emergency_slot_status(doctor, done.slot_id, EmergencySlotStatus.COMPLETED)

    board = await EmergencySlotService.emergency_board(receptionist.hospital_id)

    assert len(board.slots) == 2
    assert board.by_urgency == {"Critical": 2}
    assert board.by_status == {"Waiting": 2, "Completed": 1}
