# Billing - Service

from typing import List, Optional
from datetime import datetime
from beanie import UpdateResponse
from carelink.data.fees import compute_bill_totals
from carelink.features.auth.models import User, Role
from carelink.features.billing.models import (
    Bill,
    BillStatus,
    BillSource,
    ServiceLine,
    MedicationCharge,
)
from carelink.features.billing.schemas import RecordPaymentRequest, BillResponse, BillingSummary
from carelink.shared.exceptions import (
    NotFoundException,
    BadRequestException,
    ConflictException,
    ForbiddenException,
)
from carelink.shared.ids import generate_id
from carelink.core.logging import logger


class BillingService:
    """Bills produced by the clinical workflows, and their payment."""

    @staticmethod
    def to_response(bill: Bill) -> BillResponse:
        return BillResponse(
            bill_id=bill.bill_id,
            hospital_id=bill.hospital_id,
            patient_id=bill.patient_id,
            patient_name=bill.patient_name,
            source_type=bill.source_type,
            source_id=bill.source_id,
            services=bill.services,
            medications=bill.medications,
            subtotal=bill.subtotal,
            tax=bill.tax,
            discount=bill.discount,
            total_amount=bill.total_amount,
            status=bill.status,
            payment_method=bill.payment_method,
            amount_paid=bill.amount_paid,
            payment_reference=bill.payment_reference,
            payment_date=bill.payment_date,
            created_at=bill.created_at,
        )

    @staticmethod
    def build_bill(
        hospital_id: str,
        patient_id: str,
        patient_name: str,
        source_type: BillSource,
        source_id: str,
        services: Optional[List[ServiceLine]] = None,
        medications: Optional[List[MedicationCharge]] = None,
        discount: float = 0.0,
    ) -> Bill:
        """Unsaved pending bill with totals computed from its lines."""
        services = services or []
        medications = medications or []
        totals = compute_bill_totals(
            [s.model_dump() for s in services],
            [m.model_dump() for m in medications],
            discount,
        )

        return Bill(
            bill_id=generate_id("BILL", 3),
            hospital_id=hospital_id,
            patient_id=patient_id,
            patient_name=patient_name,
            source_type=source_type,
            source_id=source_id,
            services=services,
            medications=medications,
            subtotal=totals.subtotal,
            tax=totals.tax,
            discount=totals.discount,
            total_amount=totals.total_amount,
        )

    @staticmethod
    async def get_bill(bill_id: str, actor: User) -> Bill:
        """Bill visible to the actor: own bills for patients, hospital bills for staff."""
        bill = await Bill.find_one(Bill.bill_id == bill_id)
        if not bill:
            raise NotFoundException("Bill not found")

        if actor.role == Role.PATIENT:
            if bill.patient_id != actor.patient_id:
                raise NotFoundException("Bill not found")
        elif actor.role != Role.SUPER_ADMIN and bill.hospital_id != actor.hospital_id:
            raise NotFoundException("Bill not found")

        return bill

    @staticmethod
    async def record_payment(
        actor: User,
        bill_id: str,
        payment: RecordPaymentRequest,
        now: Optional[datetime] = None,
    ) -> Bill:
        """
        Mark a pending bill as paid.

        The update only matches while the bill is still pending, so a bill is
        paid exactly once; a second payment gets a conflict.
        """
        if actor.role not in (Role.RECEPTIONIST, Role.HOSPITAL_ADMIN, Role.PATIENT):
            raise ForbiddenException("You are not allowed to record payments")

        bill = await BillingService.get_bill(bill_id, actor)
        if bill.status == BillStatus.PAID:
            raise ConflictException(f"Bill {bill_id} has already been paid")

        amount_paid = payment.amount_paid if payment.amount_paid is not None else bill.total_amount
        if round(amount_paid, 2) < bill.total_amount:
            raise BadRequestException(
                f"Amount paid ({amount_paid:.2f}) is less than the bill total ({bill.total_amount:.2f})"
            )

        now = now or datetime.utcnow()
        updated = await Bill.find_one(
            Bill.bill_id == bill_id,
            Bill.status == BillStatus.PENDING,
        ).update(
            {"$set": {
                "status": BillStatus.PAID.value,
                "payment_method": payment.payment_method.value,
                "amount_paid": round(amount_paid, 2),
                "payment_reference": payment.payment_reference,
                "payment_notes": payment.payment_notes,
                "payment_date": now,
                "received_by": actor.uid,
                "updated_at": now,
            }},
            response_type=UpdateResponse.NEW_DOCUMENT,
        )

        if updated is None:
            raise ConflictException(f"Bill {bill_id} has already been paid")

        logger.info(
            f"Recorded {payment.payment_method.value} payment of {amount_paid:.2f} "
            f"for bill {bill_id} by {actor.reference_id}"
        )
        return updated

    @staticmethod
    async def list_bills(
        actor: User,
        status: Optional[BillStatus] = None,
        patient_id: Optional[str] = None,
    ) -> List[Bill]:
        """Bills in the actor's scope, newest first."""
        if actor.role == Role.PATIENT:
            query = Bill.find(Bill.patient_id == actor.patient_id)
        else:
            query = Bill.find(Bill.hospital_id == actor.hospital_id)
            if patient_id:
                query = query.find(Bill.patient_id == patient_id)

        if status is not None:
            query = query.find(Bill.status == status)

        return await query.sort(-Bill.created_at).to_list()

    @staticmethod
    async def billing_summary(hospital_id: str) -> BillingSummary:
        bills = await Bill.find(Bill.hospital_id == hospital_id).to_list()
        paid = [b for b in bills if b.status == BillStatus.PAID]
        pending = [b for b in bills if b.status == BillStatus.PENDING]

        return BillingSummary(
            total_bills=len(bills),
            paid_bills=len(paid),
            pending_bills=len(pending),
            total_revenue=round(sum(b.total_amount for b in paid), 2),
            pending_amount=round(sum(b.total_amount for b in pending), 2),
        )
