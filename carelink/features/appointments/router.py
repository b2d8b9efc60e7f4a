# Appointments - Router

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from carelink.features.auth.dependencies import get_current_user
from carelink.features.auth.models import User
from carelink.features.appointments.models import AppointmentStatus
from carelink.features.appointments.schemas import (
    ScheduleAppointmentRequest,
    UpdateAppointmentStatusRequest,
    AppointmentResponse,
    ScheduledAppointmentResponse,
)
from carelink.features.appointments.service import AppointmentService
from carelink.features.billing.service import BillingService

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.post("", response_model=ScheduledAppointmentResponse, status_code=status.HTTP_201_CREATED)
async def schedule_appointment(
    request: ScheduleAppointmentRequest,
    current_user: User = Depends(get_current_user),
):
    """
    Book an appointment and raise its consultation bill.

    - **appointment_date**: must be after tomorrow
    - **type**: Consultation, Follow-up, Check-up, Emergency or Procedure
    """
    appointment, bill = await AppointmentService.schedule_appointment_with_billing(current_user, request)
    return ScheduledAppointmentResponse(
        appointment=AppointmentService.to_response(appointment),
        bill=BillingService.to_response(bill),
        consultation_fee=bill.subtotal,
    )


@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    on_date: Optional[date] = None,
    status: Optional[AppointmentStatus] = None,
    current_user: User = Depends(get_current_user),
):
    appointments = await AppointmentService.list_appointments(current_user, on_date, status)
    return [AppointmentService.to_response(a) for a in appointments]


@router.get("/today", response_model=List[AppointmentResponse])
async def todays_appointments(current_user: User = Depends(get_current_user)):
    appointments = await AppointmentService.todays_appointments(current_user)
    return [AppointmentService.to_response(a) for a in appointments]


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: str,
    request: UpdateAppointmentStatusRequest,
    current_user: User = Depends(get_current_user),
):
    appointment = await AppointmentService.update_appointment_status(
        current_user, appointment_id, request.status
    )
    return AppointmentService.to_response(appointment)
