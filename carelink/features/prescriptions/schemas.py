# Prescriptions - Schemas

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from carelink.data.fees import parse_quantity
from carelink.features.auth.models import DeliveryType
from carelink.features.billing.schemas import BillResponse
from carelink.features.prescriptions.models import MedicationLine, MedicationStatus, Quantity


class MedicationInput(BaseModel):
    """
    One medicine as entered by the prescriber.

    ``quantity`` accepts "14 capsules", a bare count, or {count, unit}.
    """
    name: str = Field(..., min_length=1)
    dosage: str = ""
    quantity: Quantity
    duration: str = ""

    @field_validator('quantity', mode='before')
    @classmethod
    def parse_quantity_text(cls, v):
        if isinstance(v, bool):
            raise ValueError('Quantity must be a count or a description')
        if isinstance(v, int):
            return {"count": v, "unit": "unit"}
        if isinstance(v, str):
            count, unit = parse_quantity(v)
            return {"count": count, "unit": unit}
        return v


class CreatePrescriptionRequest(BaseModel):
    patient_id: str
    medications: List[MedicationInput] = Field(..., min_length=1)
    instructions: str = Field("", max_length=2000)


class AdvanceMedicationRequest(BaseModel):
    status: MedicationStatus


class PrescriptionResponse(BaseModel):
    prescription_id: str
    hospital_id: str
    patient_id: str
    patient_name: str
    doctor_id: str
    doctor_name: str
    medications: List[MedicationLine]
    instructions: str = ""
    is_admitted_patient: bool
    is_emergency: bool
    medicine_delivery_type: DeliveryType
    bed_number: Optional[str] = None
    location: Optional[str] = None
    bill_id: str
    created_at: datetime


class CreatedPrescriptionResponse(BaseModel):
    prescription: PrescriptionResponse
    bill: BillResponse
    notification_id: str
    delivery_task_id: Optional[str] = None
