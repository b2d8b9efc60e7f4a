# Pharmacy - Models

from enum import Enum
from datetime import datetime
from typing import List, Optional
from beanie import Document, Indexed
from pydantic import Field
from carelink.shared.models import TimestampMixin


class NotificationStatus(str, Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    ASSISTANCE_REQUESTED = "assistance_requested"


class PharmacyNotification(Document, TimestampMixin):
    """Created one-to-one with a prescription."""
    
    notification_id: Indexed(str, unique=True)
    hospital_id: Indexed(str)
    prescription_id: Indexed(str)
    patient_id: str
    patient_name: str
    
    is_emergency: bool = False
    priority: str = "normal"  # "high" for emergency prescriptions
    bed_number: Optional[str] = None
    location: Optional[str] = None
    medications: List[dict] = Field(default_factory=list)  # [{name, dosage, quantity}]
    
    status: NotificationStatus = NotificationStatus.PENDING
    processed_at: Optional[datetime] = None
    processed_by: Optional[str] = None
    
    class Settings:
        name = "pharmacy_notifications"
        use_state_management = True
