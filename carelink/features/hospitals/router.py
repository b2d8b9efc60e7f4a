# Hospital Directory - Router

from typing import List
from fastapi import APIRouter, Depends, status
from carelink.features.auth.dependencies import get_current_user, require_roles
from carelink.features.auth.models import User, Role
from carelink.features.auth.service import AuthService
from carelink.features.hospitals.schemas import (
    HospitalRegisterRequest,
    HospitalRegistrationResponse,
    UpdateHospitalRequest,
    HospitalStatusRequest,
    HospitalResponse,
)
from carelink.features.hospitals.service import HospitalService
from carelink.shared.exceptions import ForbiddenException

router = APIRouter(prefix="/hospitals", tags=["Hospitals"])


@router.post("/register", response_model=HospitalRegistrationResponse, status_code=status.HTTP_201_CREATED)
async def register_hospital(request: HospitalRegisterRequest):
    """Register a hospital and its first administrator."""
    hospital, admin = await HospitalService.register_hospital(request)
    return HospitalRegistrationResponse(
        hospital=HospitalService.to_response(hospital),
        admin=AuthService.user_to_response(admin),
    )


@router.get("/me", response_model=HospitalResponse)
async def get_my_hospital(current_user: User = Depends(get_current_user)):
    """The current user's hospital."""
    if not current_user.hospital_id:
        raise ForbiddenException("You are not associated with a hospital")
    hospital = await HospitalService.get_hospital(current_user.hospital_id)
    return HospitalService.to_response(hospital)


@router.patch("/me", response_model=HospitalResponse)
async def update_my_hospital(
    update_data: UpdateHospitalRequest,
    current_user: User = Depends(require_roles(Role.HOSPITAL_ADMIN)),
):
    """
    Update the current admin's hospital settings.

    Only provided fields are changed.
    """
    hospital = await HospitalService.update_hospital_settings(current_user, update_data)
    return HospitalService.to_response(hospital)


@router.get("", response_model=List[HospitalResponse])
async def list_hospitals(current_user: User = Depends(require_roles(Role.SUPER_ADMIN))):
    hospitals = await HospitalService.list_hospitals()
    return [HospitalService.to_response(h) for h in hospitals]


@router.patch("/{hospital_id}/status", response_model=HospitalResponse)
async def set_hospital_status(
    hospital_id: str,
    request: HospitalStatusRequest,
    current_user: User = Depends(require_roles(Role.SUPER_ADMIN)),
):
    """Suspend or reactivate a hospital."""
    hospital = await HospitalService.set_hospital_status(hospital_id, request.status)
    return HospitalService.to_response(hospital)
