"""Bill payment and billing summaries."""

import asyncio
from datetime import date, timedelta

import pytest

from carelink.features.appointments.schemas import ScheduleAppointmentRequest
from carelink.features.auth.models import Role
from carelink.features.appointments.service import AppointmentService
from carelink.features.billing.models import BillStatus, PaymentMethod
from carelink.features.billing.schemas import RecordPaymentRequest
from carelink.features.billing.service import BillingService
from carelink.shared.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from tests.conftest import HOSPITAL_ID, make_user


async def consultation_bill(receptionist, doctor, patient, department="Cardiology"):
    _, bill = await AppointmentService.schedule_appointment_with_billing(
        receptionist,
        ScheduleAppointmentRequest(
            patient_id=patient.patient_id,
            doctor_id=doctor.staff_id,
            department=department,
            appointment_date=date.today() + timedelta(days=5),
            appointment_time="11:00",
        ),
    )
    return bill


async def test_record_payment_defaults_to_total(receptionist, doctor, patient):
    bill = await consultation_bill(receptionist, doctor, patient)

    paid = await BillingService.record_payment(
        receptionist, bill.bill_id, RecordPaymentRequest(payment_method=PaymentMethod.CARD)
    )

    assert paid.status == BillStatus.PAID
    assert paid.payment_method == PaymentMethod.CARD
    assert paid.amount_paid == 165.0
    assert paid.payment_date is not None
    assert paid.received_by == receptionist.uid


async def test_bill_is_paid_exactly_once(receptionist, doctor, patient):
    bill = await consultation_bill(receptionist, doctor, patient)
    payment = RecordPaymentRequest(payment_method=PaymentMethod.CASH)

    outcomes = await asyncio.gather(
        BillingService.record_payment(receptionist, bill.bill_id, payment),
        BillingService.record_payment(patient, bill.bill_id, payment),
        return_exceptions=True,
    )

    assert sum(isinstance(o, ConflictException) for o in outcomes) == 1
    with pytest.raises(ConflictException):
        await BillingService.record_payment(receptionist, bill.bill_id, payment)


async def test_underpayment_is_rejected(receptionist, doctor, patient):
    bill = await consultation_bill(receptionist, doctor, patient)

    with pytest.raises(BadRequestException):
        await BillingService.record_payment(
            receptionist, bill.bill_id,
            RecordPaymentRequest(payment_method=PaymentMethod.CASH, amount_paid=100.0),
        )


async def test_patients_only_see_their_own_bills(receptionist, doctor, patient, pharmacist):
    bill = await consultation_bill(receptionist, doctor, patient)
    stranger = await make_user(Role.PATIENT, "stranger@mail.com", patient_id="PAT000999")

    assert [b.bill_id for b in await BillingService.list_bills(patient)] == [bill.bill_id]
    assert await BillingService.list_bills(stranger) == []
    with pytest.raises(NotFoundException):
        await BillingService.get_bill(bill.bill_id, stranger)
    with pytest.raises(ForbiddenException):
        await BillingService.record_payment(
            pharmacist, bill.bill_id, RecordPaymentRequest(payment_method=PaymentMethod.CASH)
        )


async def test_billing_summary(receptionist, doctor, patient):
    first = await consultation_bill(receptionist, doctor, patient)
    await consultation_bill(receptionist, doctor, patient, department="Dermatology")
    await BillingService.record_payment(
        receptionist, first.bill_id, RecordPaymentRequest(payment_method=PaymentMethod.INSURANCE)
    )

    summary = await BillingService.billing_summary(HOSPITAL_ID)

    assert summary.total_bills == 2
    assert summary.paid_bills == 1
    assert summary.total_revenue == 165.0
    assert summary.pending_amount == 121.0
    pending = await BillingService.list_bills(receptionist, status=BillStatus.PENDING)
    assert len(pending) == 1
