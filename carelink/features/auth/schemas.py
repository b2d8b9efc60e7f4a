from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime
from carelink.features.auth.models import Role, DeliveryType


MIN_PASSWORD_LENGTH = 6

STAFF_ROLES = {
    Role.DOCTOR,
    Role.RECEPTIONIST,
    Role.PHARMACY,
    Role.NURSE,
    Role.HOSPITAL_ADMIN,
}


class PasswordConfirmation(BaseModel):
    """Password + confirmation pair, checked before anything is written."""

    password: str = Field(..., max_length=100)
    confirm_password: str

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long')
        return v

    @model_validator(mode='after')
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError('Passwords do not match')
        return self


# Request Schemas
class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str


class StaffRegisterRequest(PasswordConfirmation):
    """Staff registration; ``hospital_id`` is only honoured for super admins."""

    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: Role
    phone_number: str = ""
    department: str = ""
    specialization: str = ""
    license_number: str = ""
    hospital_id: Optional[str] = None

    @field_validator('role')
    @classmethod
    def validate_role(cls, v: Role) -> Role:
        if v not in STAFF_ROLES:
            raise ValueError(f'{v.value} accounts cannot be created through staff registration')
        return v


class PatientProfile(BaseModel):
    """Patient details captured at the front desk."""

    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone_number: str = ""
    date_of_birth: Optional[str] = None
    address: str = ""
    emergency_contact: str = ""
    blood_group: str = ""
    allergies: str = ""
    medical_history: str = ""


class PublicPatientRegisterRequest(PatientProfile, PasswordConfirmation):
    """Self-service patient registration against a hospital."""

    hospital_id: str


class DeliveryPartnerRegisterRequest(PasswordConfirmation):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone_number: str = Field(..., min_length=5, max_length=20)


class FirstLoginPasswordRequest(PasswordConfirmation):
    """New password chosen on a patient's first login."""


class SetActiveRequest(BaseModel):
    is_active: bool


# Response Schemas
class UserResponse(BaseModel):
    """User response schema."""

    uid: str
    email: str
    role: Role
    hospital_id: Optional[str] = None
    patient_id: Optional[str] = None
    staff_id: Optional[str] = None
    first_name: str
    last_name: str
    phone_number: str = ""
    department: str = ""
    specialization: str = ""
    is_active: bool
    is_first_login: bool = False
    is_admitted: bool = False
    current_bed_number: Optional[str] = None
    current_ward: Optional[str] = None
    medicine_delivery_type: DeliveryType = DeliveryType.PHARMACY
    created_at: datetime
    updated_at: datetime


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    is_first_login: bool = False


class PatientRegistrationResponse(BaseModel):
    patient_id: str
    temp_password: str
    patient: UserResponse
