# Billing - Models

from enum import Enum
from datetime import datetime
from typing import List, Optional
from beanie import Document, Indexed
from pydantic import BaseModel, Field
from carelink.shared.models import TimestampMixin


class BillStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    INSURANCE = "insurance"
    CHEQUE = "cheque"


class BillSource(str, Enum):
    APPOINTMENT = "appointment"
    PRESCRIPTION = "prescription"


class ServiceLine(BaseModel):
    name: str
    cost: float


class MedicationCharge(BaseModel):
    """Unit ``cost`` times integer ``quantity`` is the line amount."""
    name: str
    quantity: int
    unit: str
    cost: float


class Bill(Document, TimestampMixin):
    """
    Bill linked to the appointment or prescription that produced it.
    
    ``total_amount`` equals subtotal + tax - discount when the bill is
    written; later edits do not recompute it.
    """
    
    bill_id: Indexed(str, unique=True)
    hospital_id: Indexed(str)
    patient_id: Indexed(str)
    patient_name: str
    
    source_type: BillSource
    source_id: str
    
    services: List[ServiceLine] = Field(default_factory=list)
    medications: List[MedicationCharge] = Field(default_factory=list)
    subtotal: float
    tax: float
    discount: float = 0.0
    total_amount: float
    
    status: BillStatus = BillStatus.PENDING
    payment_method: Optional[PaymentMethod] = None
    amount_paid: Optional[float] = None
    payment_reference: str = ""
    payment_notes: str = ""
    payment_date: Optional[datetime] = None
    received_by: Optional[str] = None
    
    class Settings:
        name = "bills"
        use_state_management = True
