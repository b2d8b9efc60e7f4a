# Prescriptions - Models

from enum import Enum
from datetime import datetime
from typing import List, Optional
from beanie import Document, Indexed
from pydantic import BaseModel, Field
from carelink.features.auth.models import DeliveryType
from carelink.shared.models import TimestampMixin


class MedicationStatus(str, Enum):
    PRESCRIBED = "prescribed"
    READY = "ready"
    SOLD = "sold"


MEDICATION_STATUS_ORDER = {
    MedicationStatus.PRESCRIBED: 0,
    MedicationStatus.READY: 1,
    MedicationStatus.SOLD: 2,
}


class Quantity(BaseModel):
    count: int = Field(..., ge=1)
    unit: str = "unit"
    
    def __str__(self) -> str:
        return f"{self.count} {self.unit}"


class MedicationLine(BaseModel):
    """One prescribed medicine; pharmacy advances its status independently."""
    name: str
    dosage: str
    quantity: Quantity
    duration: str
    unit_cost: float
    status: MedicationStatus = MedicationStatus.PRESCRIBED
    prescribed_at: datetime = Field(default_factory=datetime.utcnow)
    status_updated_at: Optional[datetime] = None


class Prescription(Document, TimestampMixin):
    """Prescription document model."""
    
    prescription_id: Indexed(str, unique=True)
    hospital_id: Indexed(str)
    patient_id: Indexed(str)
    patient_name: str
    doctor_id: str
    doctor_name: str
    
    medications: List[MedicationLine]
    instructions: str = ""
    
    # Routing captured from the patient record at write time
    is_admitted_patient: bool = False
    is_emergency: bool = False
    medicine_delivery_type: DeliveryType = DeliveryType.PHARMACY
    bed_number: Optional[str] = None
    location: Optional[str] = None
    
    bill_id: str
    
    class Settings:
        name = "prescriptions"
        use_state_management = True
