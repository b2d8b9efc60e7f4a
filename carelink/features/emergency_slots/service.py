# Emergency Slots - Service

from typing import List, Optional
from datetime import datetime
from beanie import UpdateResponse
from carelink.features.auth.models import User, Role
from carelink.features.emergency_slots.models import (
    EmergencySlot,
    EmergencySlotStatus,
    EMERGENCY_SLOT_TRANSITIONS,
)
from carelink.features.emergency_slots.schemas import (
    CreateEmergencySlotRequest,
    EmergencySlotResponse,
    EmergencyBoard,
)
from carelink.features.patients.service import PatientService
from carelink.core.realtime import RealtimeHub, hospital_room
from carelink.shared.exceptions import (
    NotFoundException,
    ConflictException,
    ForbiddenException,
    InvalidTransitionException,
)
from carelink.shared.ids import generate_id
from carelink.core.logging import logger


TRIAGE_ROLES = {Role.DOCTOR, Role.NURSE, Role.RECEPTIONIST, Role.HOSPITAL_ADMIN}


class EmergencySlotService:
    """Emergency department waiting list."""

    @staticmethod
    def to_response(slot: EmergencySlot) -> EmergencySlotResponse:
        return EmergencySlotResponse(
            slot_id=slot.slot_id,
            hospital_id=slot.hospital_id,
            patient_id=slot.patient_id,
            patient_name=slot.patient_name,
            urgency=slot.urgency,
            complaint=slot.complaint,
            notes=slot.notes,
            status=slot.status,
            created_by=slot.created_by,
            created_by_name=slot.created_by_name,
            created_at=slot.created_at,
            updated_at=slot.updated_at,
        )

    @staticmethod
    def check_role(actor: User) -> None:
        if actor.role not in TRIAGE_ROLES:
            raise ForbiddenException("You are not allowed to manage emergency slots")

    @staticmethod
    async def create_emergency_slot(actor: User, request: CreateEmergencySlotRequest) -> EmergencySlot:
        """Add a patient to the emergency waiting list with status Waiting."""
        EmergencySlotService.check_role(actor)

        patient_name = request.patient_name.strip()
        if request.patient_id:
            patient = await PatientService.get_patient(request.patient_id, actor.hospital_id)
            patient_name = patient.full_name

        slot = EmergencySlot(
            slot_id=generate_id("EMG", 2),
            hospital_id=actor.hospital_id,
            patient_id=request.patient_id,
            patient_name=patient_name,
            urgency=request.urgency,
            complaint=request.complaint,
            notes=request.notes,
            created_by=actor.staff_id,
            created_by_name=actor.full_name,
        )
        await slot.insert()

        logger.info(f"Emergency slot {slot.slot_id} ({slot.urgency.value}) opened by {actor.staff_id}")

        await RealtimeHub.publish(
            "emergency_slots",
            slot.model_dump(mode="json", exclude={"id", "revision_id"}),
            hospital_room(slot.hospital_id),
        )
        return slot

    @staticmethod
    async def list_emergency_slots(
        hospital_id: str,
        status: Optional[EmergencySlotStatus] = None,
    ) -> List[EmergencySlot]:
        """Newest first."""
        query = EmergencySlot.find(EmergencySlot.hospital_id == hospital_id)
        if status is not None:
            query = query.find(EmergencySlot.status == status)
        return await query.sort(-EmergencySlot.created_at).to_list()

    @staticmethod
    async def emergency_board(hospital_id: str) -> EmergencyBoard:
        slots = await EmergencySlotService.list_emergency_slots(hospital_id)

        by_urgency = {}
        by_status = {}
        for slot in slots:
            by_status[slot.status.value] = by_status.get(slot.status.value, 0) + 1
            if slot.status != EmergencySlotStatus.COMPLETED:
                by_urgency[slot.urgency.value] = by_urgency.get(slot.urgency.value, 0) + 1

        return EmergencyBoard(
            slots=[
                EmergencySlotService.to_response(s)
                for s in slots if s.status != EmergencySlotStatus.COMPLETED
            ],
            by_urgency=by_urgency,
            by_status=by_status,
        )

    @staticmethod
    async def update_emergency_slot_status(
        actor: User,
        slot_id: str,
        status: EmergencySlotStatus,
        now: Optional[datetime] = None,
    ) -> EmergencySlot:
        """Move a slot along Waiting -> In Treatment -> Completed."""
        EmergencySlotService.check_role(actor)

        slot = await EmergencySlot.find_one(
            EmergencySlot.slot_id == slot_id,
            EmergencySlot.hospital_id == actor.hospital_id,
        )
        if not slot:
            raise NotFoundException("Emergency slot not found")

        if status not in EMERGENCY_SLOT_TRANSITIONS[slot.status]:
            raise InvalidTransitionException("emergency slot", slot.status.value, status.value)

        updated = await EmergencySlot.find_one(
            EmergencySlot.slot_id == slot_id,
            EmergencySlot.status == slot.status,
        ).update(
            {"$set": {"status": status.value, "updated_at": now or datetime.utcnow()}},
            response_type=UpdateResponse.NEW_DOCUMENT,
        )
        if updated is None:
            raise ConflictException("Emergency slot was updated by someone else, please refresh")

        logger.info(f"Emergency slot {slot_id}: {slot.status.value} -> {status.value}")

        await RealtimeHub.publish(
            "emergency_slots",
            updated.model_dump(mode="json", exclude={"id", "revision_id"}),
            hospital_room(updated.hospital_id),
        )
        return updated
