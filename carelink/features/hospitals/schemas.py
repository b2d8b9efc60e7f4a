# Hospital Directory - Schemas

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field
from carelink.features.auth.schemas import PasswordConfirmation, UserResponse
from carelink.features.hospitals.models import HospitalStatus


class HospitalRegisterRequest(PasswordConfirmation):
    """A new hospital together with its first administrator."""
    name: str = Field(..., min_length=2, max_length=200)
    hospital_type: str = "General Hospital"
    address: str = ""
    phone: str = ""
    email: str = ""
    departments: List[str] = Field(default_factory=list)
    services: List[str] = Field(default_factory=list)
    bed_capacity: int = Field(0, ge=0)

    admin_email: EmailStr
    admin_first_name: str = Field(..., min_length=1, max_length=100)
    admin_last_name: str = Field(..., min_length=1, max_length=100)
    admin_phone_number: str = ""


class UpdateHospitalRequest(BaseModel):
    """Settings a hospital admin may change."""
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    hospital_type: Optional[str] = None
    address: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    departments: Optional[List[str]] = None
    services: Optional[List[str]] = None
    bed_capacity: Optional[int] = Field(None, ge=0)


class HospitalStatusRequest(BaseModel):
    status: HospitalStatus


class HospitalResponse(BaseModel):
    hospital_id: str
    name: str
    hospital_type: str
    address: str = ""
    phone: str = ""
    email: str = ""
    departments: List[str] = []
    services: List[str] = []
    bed_capacity: int = 0
    status: HospitalStatus
    admin_uid: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class HospitalRegistrationResponse(BaseModel):
    hospital: HospitalResponse
    admin: UserResponse
