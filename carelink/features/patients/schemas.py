# Patients - Schemas

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from carelink.data.wards import WARD_TYPES
from carelink.features.auth.models import DeliveryType
from carelink.features.patients.models import AdmissionType, AdmissionStatus


class AdmitPatientRequest(BaseModel):
    """Request schema for admitting a patient to a ward."""
    patient_id: str
    admission_type: AdmissionType
    ward_type: str
    department: str = ""
    admission_reason: str = Field("", max_length=500)
    severity: str = "medium"
    admitting_doctor: str = ""
    notes: str = ""

    @field_validator('ward_type')
    @classmethod
    def validate_ward_type(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in WARD_TYPES:
            raise ValueError(f"Unknown ward type '{v}'")
        return v


class AdmissionResponse(BaseModel):
    admission_id: str
    hospital_id: str
    patient_id: str
    patient_name: str
    admission_type: AdmissionType
    department: str
    ward_type: str
    bed_number: str
    admission_reason: str
    severity: str
    admitting_doctor: str
    medicine_delivery_type: DeliveryType
    status: AdmissionStatus
    admitted_at: datetime
    discharged_at: Optional[datetime] = None


class WardOccupancy(BaseModel):
    ward_type: str
    label: str
    capacity: int
    occupied: int
    available: int
