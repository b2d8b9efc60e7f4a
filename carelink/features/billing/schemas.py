# Billing - Schemas

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from carelink.features.billing.models import (
    BillStatus,
    BillSource,
    PaymentMethod,
    ServiceLine,
    MedicationCharge,
)


class RecordPaymentRequest(BaseModel):
    """Payment for one bill. ``amount_paid`` defaults to the bill total."""
    payment_method: PaymentMethod
    amount_paid: Optional[float] = Field(None, gt=0)
    payment_reference: str = Field("", max_length=100)
    payment_notes: str = Field("", max_length=500)


class BillResponse(BaseModel):
    bill_id: str
    hospital_id: str
    patient_id: str
    patient_name: str
    source_type: BillSource
    source_id: str
    services: List[ServiceLine]
    medications: List[MedicationCharge]
    subtotal: float
    tax: float
    discount: float
    total_amount: float
    status: BillStatus
    payment_method: Optional[PaymentMethod] = None
    amount_paid: Optional[float] = None
    payment_reference: str = ""
    payment_date: Optional[datetime] = None
    created_at: datetime


class BillingSummary(BaseModel):
    total_bills: int
    paid_bills: int
    pending_bills: int
    total_revenue: float
    pending_amount: float
