# Emergency Slots - Router

from typing import List, Optional
from fastapi import APIRouter, Depends, status
from carelink.features.auth.dependencies import get_current_user, require_hospital
from carelink.features.auth.models import User
from carelink.features.emergency_slots.models import EmergencySlotStatus
from carelink.features.emergency_slots.schemas import (
    CreateEmergencySlotRequest,
    UpdateEmergencySlotStatusRequest,
    EmergencySlotResponse,
    EmergencyBoard,
)
from carelink.features.emergency_slots.service import EmergencySlotService

router = APIRouter(prefix="/emergency-slots", tags=["Emergency"])


@router.post("", response_model=EmergencySlotResponse, status_code=status.HTTP_201_CREATED)
async def create_emergency_slot(
    request: CreateEmergencySlotRequest,
    current_user: User = Depends(get_current_user),
):
    """
    Add a patient to the emergency waiting list.

    - **urgency**: Critical, High, Medium or Low
    """
    slot = await EmergencySlotService.create_emergency_slot(current_user, request)
    return EmergencySlotService.to_response(slot)


@router.get("", response_model=List[EmergencySlotResponse])
async def list_emergency_slots(
    status: Optional[EmergencySlotStatus] = None,
    hospital_id: str = Depends(require_hospital),
):
    slots = await EmergencySlotService.list_emergency_slots(hospital_id, status)
    return [EmergencySlotService.to_response(s) for s in slots]


@router.get("/board", response_model=EmergencyBoard)
async def emergency_board(hospital_id: str = Depends(require_hospital)):
    return await EmergencySlotService.emergency_board(hospital_id)


@router.patch("/{slot_id}/status", response_model=EmergencySlotResponse)
async def update_emergency_slot_status(
    slot_id: str,
    request: UpdateEmergencySlotStatusRequest,
    current_user: User = Depends(get_current_user),
):
    slot = await EmergencySlotService.update_emergency_slot_status(current_user, slot_id, request.status)
    return EmergencySlotService.to_response(slot)
