# Appointments - Service

from typing import List, Optional
from datetime import date
from carelink.data.fees import get_consultation_fee
from carelink.features.appointments.models import (
    Appointment,
    AppointmentStatus,
    APPOINTMENT_TRANSITIONS,
)
from carelink.features.appointments.schemas import ScheduleAppointmentRequest, AppointmentResponse
from carelink.features.auth.models import User, Role
from carelink.features.billing.models import Bill, BillSource, ServiceLine
from carelink.features.billing.service import BillingService
from carelink.features.patients.service import PatientService
from carelink.features.workflow import WorkflowCascade
from carelink.core.realtime import RealtimeHub, hospital_room
from carelink.shared.exceptions import (
    NotFoundException,
    BadRequestException,
    ForbiddenException,
    InvalidTransitionException,
)
from carelink.shared.ids import generate_id
from carelink.core.logging import logger


BOOKING_ROLES = {Role.RECEPTIONIST, Role.HOSPITAL_ADMIN, Role.DOCTOR, Role.PATIENT}


class AppointmentService:
    """Appointment scheduling and lifecycle."""

    @staticmethod
    def to_response(appointment: Appointment) -> AppointmentResponse:
        return AppointmentResponse(
            appointment_id=appointment.appointment_id,
            hospital_id=appointment.hospital_id,
            patient_id=appointment.patient_id,
            patient_name=appointment.patient_name,
            doctor_id=appointment.doctor_id,
            doctor_name=appointment.doctor_name,
            department=appointment.department,
            appointment_date=appointment.appointment_date,
            appointment_time=appointment.appointment_time,
            type=appointment.type,
            status=appointment.status,
            notes=appointment.notes,
            bill_id=appointment.bill_id,
            created_at=appointment.created_at,
        )

    @staticmethod
    async def get_doctor(doctor_id: str, hospital_id: str) -> User:
        doctor = await User.find_one(
            User.staff_id == doctor_id,
            User.hospital_id == hospital_id,
            User.role == Role.DOCTOR,
        )
        if not doctor or not doctor.is_active:
            raise NotFoundException(f"Doctor {doctor_id} not found")
        return doctor

    @staticmethod
    async def schedule_appointment_with_billing(
        actor: User,
        request: ScheduleAppointmentRequest,
    ) -> tuple[Appointment, Bill]:
        """
        Book an appointment and raise its consultation bill.

        The fee comes from the (type, department) table. Both documents are
        written in one cascade: if the bill cannot be written the appointment
        is removed again and the error propagates.

        Returns:
            tuple: (appointment, bill)
        """
        if actor.role not in BOOKING_ROLES:
            raise ForbiddenException("You are not allowed to book appointments")
        if actor.role == Role.PATIENT and request.patient_id != actor.patient_id:
            raise ForbiddenException("Patients can only book their own appointments")
        if not actor.hospital_id:
            raise BadRequestException("You must be associated with a hospital to book appointments")

        hospital_id = actor.hospital_id
        patient = await PatientService.get_patient(request.patient_id, hospital_id)
        doctor = await AppointmentService.get_doctor(request.doctor_id, hospital_id)

        department = request.department or doctor.department or "General Medicine"
        fee = get_consultation_fee(request.type.value, department)

        appointment_id = generate_id("APT", 3)
        bill = BillingService.build_bill(
            hospital_id=hospital_id,
            patient_id=patient.patient_id,
            patient_name=patient.full_name,
            source_type=BillSource.APPOINTMENT,
            source_id=appointment_id,
            services=[ServiceLine(name=f"{request.type.value} - {department}", cost=fee)],
        )

        appointment = Appointment(
            appointment_id=appointment_id,
            hospital_id=hospital_id,
            patient_id=patient.patient_id,
            patient_name=patient.full_name,
            doctor_id=doctor.staff_id,
            doctor_name=f"Dr. {doctor.full_name}",
            department=department,
            appointment_date=request.appointment_date,
            appointment_time=request.appointment_time,
            type=request.type,
            notes=request.notes,
            bill_id=bill.bill_id,
            booked_by=actor.uid,
        )

        async with WorkflowCascade("appointment_billing", hospital_id) as cascade:
            await cascade.insert(appointment)
            await cascade.insert(bill)

        logger.info(
            f"Scheduled {appointment_id} for {patient.patient_id} with {doctor.staff_id} "
            f"on {request.appointment_date} {request.appointment_time}, bill {bill.bill_id} "
            f"total {bill.total_amount:.2f}"
        )

        await RealtimeHub.publish(
            "appointments",
            appointment.model_dump(mode="json", exclude={"id", "revision_id"}),
            hospital_room(hospital_id),
        )
        return appointment, bill

    @staticmethod
    async def get_appointment(appointment_id: str, actor: User) -> Appointment:
        appointment = await Appointment.find_one(Appointment.appointment_id == appointment_id)
        if not appointment or appointment.hospital_id != actor.hospital_id:
            raise NotFoundException("Appointment not found")
        if actor.role == Role.PATIENT and appointment.patient_id != actor.patient_id:
            raise NotFoundException("Appointment not found")
        return appointment

    @staticmethod
    async def update_appointment_status(
        actor: User,
        appointment_id: str,
        status: AppointmentStatus,
    ) -> Appointment:
        """
        Move an appointment along Scheduled -> In Progress -> Completed.

        Only a scheduled appointment can be cancelled.
        """
        appointment = await AppointmentService.get_appointment(appointment_id, actor)
        if actor.role == Role.PATIENT and status != AppointmentStatus.CANCELLED:
            raise ForbiddenException("Patients can only cancel appointments")

        if status not in APPOINTMENT_TRANSITIONS[appointment.status]:
            raise InvalidTransitionException("appointment", appointment.status.value, status.value)

        appointment.status = status
        appointment.update_timestamp()
        await appointment.save()

        logger.info(f"Appointment {appointment_id} is now {status.value}")

        await RealtimeHub.publish(
            "appointments",
            appointment.model_dump(mode="json", exclude={"id", "revision_id"}),
            hospital_room(appointment.hospital_id),
        )
        return appointment

    @staticmethod
    async def list_appointments(
        actor: User,
        on_date: Optional[date] = None,
        status: Optional[AppointmentStatus] = None,
    ) -> List[Appointment]:
        """
        Appointments in the actor's scope.

        Patients see their own, doctors see theirs, other staff see the
        whole hospital.
        """
        if actor.role == Role.PATIENT:
            query = Appointment.find(Appointment.patient_id == actor.patient_id)
        elif actor.role == Role.DOCTOR:
            query = Appointment.find(
                Appointment.hospital_id == actor.hospital_id,
                Appointment.doctor_id == actor.staff_id,
            )
        else:
            query = Appointment.find(Appointment.hospital_id == actor.hospital_id)

        if on_date is not None:
            query = query.find(Appointment.appointment_date == on_date)
        if status is not None:
            query = query.find(Appointment.status == status)

        return await query.sort(
            Appointment.appointment_date, Appointment.appointment_time
        ).to_list()

    @staticmethod
    async def todays_appointments(actor: User, today: Optional[date] = None) -> List[Appointment]:
        return await AppointmentService.list_appointments(actor, on_date=today or date.today())
