# Deliveries - Schemas

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel
from carelink.features.deliveries.models import DeliveryTaskStatus


class DeliveryTaskResponse(BaseModel):
    task_id: str
    hospital_id: str
    prescription_id: str
    patient_id: str
    patient_name: str
    bed_number: str
    location: str
    medications: List[dict]
    delivery_instructions: str = ""
    is_emergency: bool
    priority: str
    status: DeliveryTaskStatus
    assigned_at: datetime
    accepted_at: Optional[datetime] = None
    accepted_by: Optional[str] = None
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None


class DeliveryEarningResponse(BaseModel):
    earning_id: str
    task_id: str
    hospital_id: str
    patient_id: str
    amount: float
    status: str
    created_at: datetime


class EarningsSummary(BaseModel):
    deliveries: int
    total_amount: float
    earnings: List[DeliveryEarningResponse]
