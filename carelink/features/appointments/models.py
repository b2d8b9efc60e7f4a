# Appointments - Models

from enum import Enum
from datetime import date
from beanie import Document, Indexed
from carelink.shared.models import TimestampMixin


class AppointmentType(str, Enum):
    CONSULTATION = "Consultation"
    FOLLOW_UP = "Follow-up"
    CHECK_UP = "Check-up"
    EMERGENCY = "Emergency"
    PROCEDURE = "Procedure"


class AppointmentStatus(str, Enum):
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


APPOINTMENT_TRANSITIONS = {
    AppointmentStatus.SCHEDULED: {AppointmentStatus.IN_PROGRESS, AppointmentStatus.CANCELLED},
    AppointmentStatus.IN_PROGRESS: {AppointmentStatus.COMPLETED},
    AppointmentStatus.COMPLETED: set(),
    AppointmentStatus.CANCELLED: set(),
}


class Appointment(Document, TimestampMixin):
    """Appointment document model."""
    
    appointment_id: Indexed(str, unique=True)
    hospital_id: Indexed(str)
    patient_id: Indexed(str)
    patient_name: str
    doctor_id: Indexed(str)
    doctor_name: str
    department: str
    
    appointment_date: date
    appointment_time: str  # "HH:MM"
    type: AppointmentType
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: str = ""
    
    bill_id: str
    booked_by: str
    
    class Settings:
        name = "appointments"
        use_state_management = True
        indexes = [
            [("hospital_id", 1), ("appointment_date", 1)],
        ]
