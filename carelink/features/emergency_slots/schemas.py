# Emergency Slots - Schemas

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, model_validator
from carelink.features.emergency_slots.models import Urgency, EmergencySlotStatus


class CreateEmergencySlotRequest(BaseModel):
    """Registered patients are referenced by id; walk-ins by name."""
    patient_id: Optional[str] = None
    patient_name: str = Field("", max_length=200)
    urgency: Urgency = Urgency.MEDIUM
    complaint: str = Field(..., min_length=1, max_length=500)
    notes: str = Field("", max_length=2000)

    @model_validator(mode='after')
    def patient_is_identified(self):
        if not self.patient_id and not self.patient_name.strip():
            raise ValueError('Either patient_id or patient_name is required')
        return self


class UpdateEmergencySlotStatusRequest(BaseModel):
    status: EmergencySlotStatus


class EmergencySlotResponse(BaseModel):
    slot_id: str
    hospital_id: str
    patient_id: Optional[str] = None
    patient_name: str
    urgency: Urgency
    complaint: str
    notes: str = ""
    status: EmergencySlotStatus
    created_by: Optional[str] = None
    created_by_name: str = ""
    created_at: datetime
    updated_at: datetime


class EmergencyBoard(BaseModel):
    """Open slots plus counts for the emergency department board."""
    slots: List[EmergencySlotResponse]
    by_urgency: Dict[str, int]
    by_status: Dict[str, int]
