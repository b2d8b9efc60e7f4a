# Medical Records - Schemas

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from carelink.features.medical_records.models import RecordType, Vitals


class CreateMedicalRecordRequest(BaseModel):
    patient_id: str
    record_type: RecordType = RecordType.CONSULTATION
    diagnosis: str = Field(..., min_length=1, max_length=500)
    symptoms: str = Field("", max_length=2000)
    treatment: str = Field("", max_length=2000)
    notes: str = Field("", max_length=4000)
    vitals: Vitals = Vitals()
    follow_up: Optional[str] = None


class MedicalRecordResponse(BaseModel):
    record_id: str
    hospital_id: str
    patient_id: str
    patient_name: str
    record_type: RecordType
    diagnosis: str
    symptoms: str = ""
    treatment: str = ""
    notes: str = ""
    vitals: Vitals
    follow_up: Optional[str] = None
    doctor_id: str
    doctor_name: str
    created_at: datetime
