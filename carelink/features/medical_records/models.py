# Medical Records - Models

from enum import Enum
from typing import Optional
from beanie import Document, Indexed
from pydantic import BaseModel
from carelink.shared.models import TimestampMixin


class RecordType(str, Enum):
    CONSULTATION = "Consultation"
    FOLLOW_UP = "Follow-up"
    EMERGENCY = "Emergency"
    SURGERY = "Surgery"
    THERAPY = "Therapy"


class Vitals(BaseModel):
    """Free-text readings as charted, e.g. ``120/80`` or ``37.2 C``."""
    blood_pressure: str = ""
    heart_rate: str = ""
    temperature: str = ""
    weight: str = ""
    height: str = ""


class MedicalRecord(Document, TimestampMixin):
    """A clinical note written against a patient's chart."""
    
    record_id: Indexed(str, unique=True)
    hospital_id: Indexed(str)
    patient_id: Indexed(str)
    patient_name: str
    
    record_type: RecordType = RecordType.CONSULTATION
    diagnosis: str
    symptoms: str = ""
    treatment: str = ""
    notes: str = ""
    vitals: Vitals = Vitals()
    follow_up: Optional[str] = None
    
    doctor_id: str
    doctor_name: str
    
    class Settings:
        name = "medical_records"
        use_state_management = True
