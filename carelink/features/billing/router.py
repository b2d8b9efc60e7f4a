# Billing - Router

from typing import List, Optional
from fastapi import APIRouter, Depends
from carelink.features.auth.dependencies import get_current_user, require_roles, require_hospital
from carelink.features.auth.models import User, Role
from carelink.features.billing.models import BillStatus
from carelink.features.billing.schemas import RecordPaymentRequest, BillResponse, BillingSummary
from carelink.features.billing.service import BillingService

router = APIRouter(prefix="/bills", tags=["Billing"])


@router.get("", response_model=List[BillResponse])
async def list_bills(
    status: Optional[BillStatus] = None,
    patient_id: Optional[str] = None,
    current_user: User = Depends(get_current_user),
):
    """
    Bills in the current user's scope.

    Patients see their own bills; staff see their hospital's bills.
    """
    bills = await BillingService.list_bills(current_user, status, patient_id)
    return [BillingService.to_response(b) for b in bills]


@router.get("/summary", response_model=BillingSummary)
async def billing_summary(
    hospital_id: str = Depends(require_hospital),
    current_user: User = Depends(require_roles(Role.RECEPTIONIST, Role.HOSPITAL_ADMIN)),
):
    return await BillingService.billing_summary(hospital_id)


@router.get("/{bill_id}", response_model=BillResponse)
async def get_bill(bill_id: str, current_user: User = Depends(get_current_user)):
    bill = await BillingService.get_bill(bill_id, current_user)
    return BillingService.to_response(bill)


@router.post("/{bill_id}/payment", response_model=BillResponse)
async def record_payment(
    bill_id: str,
    payment: RecordPaymentRequest,
    current_user: User = Depends(get_current_user),
):
    """
    Record payment for a pending bill.

    - **payment_method**: cash, card, bank_transfer, insurance or cheque
    - **amount_paid**: defaults to the bill total
    """
    bill = await BillingService.record_payment(current_user, bill_id, payment)
    return BillingService.to_response(bill)
