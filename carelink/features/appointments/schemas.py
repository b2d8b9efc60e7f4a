# Appointments - Schemas

from datetime import date, datetime, timedelta
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from carelink.features.appointments.models import AppointmentType, AppointmentStatus
from carelink.features.billing.schemas import BillResponse


class ScheduleAppointmentRequest(BaseModel):
    """Request schema for booking an appointment."""
    patient_id: str
    doctor_id: str
    department: str = ""
    appointment_date: date
    appointment_time: str = Field(..., pattern=r'^([01]\d|2[0-3]):[0-5]\d$')
    type: AppointmentType = AppointmentType.CONSULTATION
    notes: str = Field("", max_length=1000)

    @field_validator('appointment_date')
    @classmethod
    def validate_appointment_date(cls, v: date) -> date:
        tomorrow = date.today() + timedelta(days=1)
        if v <= tomorrow:
            raise ValueError('Appointments must be booked for a date after tomorrow')
        return v


class UpdateAppointmentStatusRequest(BaseModel):
    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    appointment_id: str
    hospital_id: str
    patient_id: str
    patient_name: str
    doctor_id: str
    doctor_name: str
    department: str
    appointment_date: date
    appointment_time: str
    type: AppointmentType
    status: AppointmentStatus
    notes: str = ""
    bill_id: str
    created_at: datetime


class ScheduledAppointmentResponse(BaseModel):
    appointment: AppointmentResponse
    bill: BillResponse
    consultation_fee: float
