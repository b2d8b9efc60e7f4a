# Emergency Slots - Models

from enum import Enum
from typing import Optional
from beanie import Document, Indexed
from carelink.shared.models import TimestampMixin


class Urgency(str, Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class EmergencySlotStatus(str, Enum):
    WAITING = "Waiting"
    IN_TREATMENT = "In Treatment"
    COMPLETED = "Completed"


EMERGENCY_SLOT_TRANSITIONS = {
    EmergencySlotStatus.WAITING: {EmergencySlotStatus.IN_TREATMENT},
    EmergencySlotStatus.IN_TREATMENT: {EmergencySlotStatus.COMPLETED},
    EmergencySlotStatus.COMPLETED: set(),
}


class EmergencySlot(Document, TimestampMixin):
    """A walk-in waiting for emergency treatment."""
    
    slot_id: Indexed(str, unique=True)
    hospital_id: Indexed(str)
    patient_id: Optional[str] = None
    patient_name: str
    urgency: Urgency = Urgency.MEDIUM
    complaint: str
    notes: str = ""
    
    status: EmergencySlotStatus = EmergencySlotStatus.WAITING
    created_by: Optional[str] = None
    created_by_name: str = ""
    
    class Settings:
        name = "emergency_slots"
        use_state_management = True
