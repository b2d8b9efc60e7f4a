import uuid
from enum import Enum
from beanie import Document, Indexed
from pydantic import EmailStr, Field
from typing import Optional
from carelink.shared.models import TimestampMixin


class Role(str, Enum):
    """Principal roles. A user's role is fixed at registration."""
    PATIENT = "patient"
    DOCTOR = "doctor"
    RECEPTIONIST = "receptionist"
    PHARMACY = "pharmacy"
    NURSE = "nurse"
    HOSPITAL_ADMIN = "hospital_admin"
    DELIVERY_PARTNER = "delivery_partner"
    SUPER_ADMIN = "super_admin"


class DeliveryType(str, Enum):
    """How prescribed medicines reach a patient."""
    BEDSIDE = "bedside"
    PHARMACY = "pharmacy"


STAFF_ID_PREFIXES = {
    Role.DOCTOR: "DOC",
    Role.RECEPTIONIST: "REC",
    Role.PHARMACY: "PHR",
    Role.NURSE: "NUR",
    Role.HOSPITAL_ADMIN: "HAD",
    Role.DELIVERY_PARTNER: "DLV",
    Role.SUPER_ADMIN: "SAD",
}


class User(Document, TimestampMixin):
    """
    One record per principal: staff, patients and delivery partners.

    Patients carry ``patient_id`` and the admission snapshot fields; everyone
    else carries ``staff_id``. Users are deactivated, never deleted.
    """
    
    uid: Indexed(str, unique=True) = Field(default_factory=lambda: uuid.uuid4().hex)
    email: Indexed(EmailStr, unique=True)
    password_hash: str
    role: Role
    
    hospital_id: Optional[str] = None
    patient_id: Optional[str] = None
    staff_id: Optional[str] = None
    
    # Profile
    first_name: str
    last_name: str
    phone_number: str = ""
    department: str = ""
    specialization: str = ""
    license_number: str = ""
    
    # Patient profile
    date_of_birth: Optional[str] = None
    address: str = ""
    emergency_contact: str = ""
    blood_group: str = ""
    allergies: str = ""
    medical_history: str = ""
    
    # Admission snapshot, maintained by admit/discharge
    is_admitted: bool = False
    current_admission_id: Optional[str] = None
    current_bed_number: Optional[str] = None
    current_ward: Optional[str] = None
    medicine_delivery_type: DeliveryType = DeliveryType.PHARMACY
    
    is_active: bool = True
    is_first_login: bool = False
    registered_by: Optional[str] = None
    
    class Settings:
        name = "users"
        use_state_management = True
    
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
    
    @property
    def reference_id(self) -> str:
        """Patient id for patients, staff id for everyone else."""
        return self.patient_id or self.staff_id or self.uid
