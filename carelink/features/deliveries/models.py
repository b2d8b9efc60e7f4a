# Deliveries - Models

from enum import Enum
from datetime import datetime
from typing import List, Optional
from beanie import Document, Indexed
from pydantic import Field
from carelink.shared.models import TimestampMixin


class DeliveryTaskStatus(str, Enum):
    ASSIGNED = "assigned"
    ACCEPTED = "accepted"
    COMPLETED = "completed"


EMERGENCY_DELIVERY_EARNING = 100.0
STANDARD_DELIVERY_EARNING = 60.0


class DeliveryTask(Document, TimestampMixin):
    """Bedside delivery of a prescription to an admitted patient."""
    
    task_id: Indexed(str, unique=True)
    hospital_id: Indexed(str)
    prescription_id: str
    patient_id: str
    patient_name: str
    
    bed_number: str
    location: str
    medications: List[dict] = Field(default_factory=list)
    delivery_instructions: str = ""
    is_emergency: bool = True
    priority: str = "emergency"
    
    status: DeliveryTaskStatus = DeliveryTaskStatus.ASSIGNED
    assigned_at: datetime = Field(default_factory=datetime.utcnow)
    accepted_at: Optional[datetime] = None
    accepted_by: Optional[str] = None
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None
    
    class Settings:
        name = "delivery_tasks"
        use_state_management = True


class DeliveryEarning(Document, TimestampMixin):
    """Payout owed to whoever completed a delivery."""
    
    earning_id: Indexed(str, unique=True)
    task_id: str
    hospital_id: str
    patient_id: str
    delivered_by: str
    amount: float
    status: str = "pending_payment"
    
    class Settings:
        name = "delivery_earnings"
        use_state_management = True
