# Patients - Admission Models

from enum import Enum
from datetime import datetime
from typing import Optional
from beanie import Document, Indexed
from carelink.features.auth.models import DeliveryType
from carelink.shared.models import TimestampMixin


class AdmissionType(str, Enum):
    EMERGENCY = "emergency"
    PLANNED = "planned"
    TRANSFER = "transfer"
    OUTPATIENT = "outpatient"


class AdmissionStatus(str, Enum):
    ACTIVE = "active"
    DISCHARGED = "discharged"


class Admission(Document, TimestampMixin):
    """A patient's stay in a ward bed."""
    
    admission_id: Indexed(str, unique=True)
    hospital_id: Indexed(str)
    patient_id: Indexed(str)
    patient_name: str
    
    admission_type: AdmissionType
    department: str = ""
    ward_type: str
    bed_number: str
    admission_reason: str = ""
    severity: str = "medium"
    admitting_doctor: str = ""
    notes: str = ""
    
    medicine_delivery_type: DeliveryType
    status: AdmissionStatus = AdmissionStatus.ACTIVE
    admitted_at: datetime
    discharged_at: Optional[datetime] = None
    created_by: Optional[str] = None
    
    class Settings:
        name = "admissions"
        use_state_management = True
        indexes = [
            [("hospital_id", 1), ("ward_type", 1), ("status", 1)],
        ]
