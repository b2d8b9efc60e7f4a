from typing import List, Optional
from fastapi import APIRouter, Depends, status
from carelink.features.auth.schemas import (
    LoginRequest,
    LoginResponse,
    StaffRegisterRequest,
    PatientProfile,
    PatientRegistrationResponse,
    PublicPatientRegisterRequest,
    DeliveryPartnerRegisterRequest,
    FirstLoginPasswordRequest,
    SetActiveRequest,
    UserResponse,
)
from carelink.features.auth.service import AuthService
from carelink.features.auth.dependencies import get_current_user, require_roles, require_hospital
from carelink.features.auth.models import User, Role
from carelink.shared.schemas import MessageResponse


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(login_data: LoginRequest):
    """
    Authenticate user and return access token.
    
    - **email**: User's email address
    - **password**: User's password
    """
    user, access_token = await AuthService.authenticate(login_data.email, login_data.password)
    
    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        user=AuthService.user_to_response(user),
        is_first_login=user.is_first_login,
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: User = Depends(get_current_user)):
    """
    Logout current user.
    
    With JWT tokens the client discards the token.
    """
    await AuthService.sign_out(current_user)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Current user's profile."""
    return AuthService.user_to_response(current_user)


@router.post("/first-login-password", response_model=UserResponse)
async def set_first_login_password(
    request: FirstLoginPasswordRequest,
    current_user: User = Depends(get_current_user),
):
    """Replace the temporary password issued at registration."""
    user = await AuthService.update_first_login_password(current_user, request.password)
    return AuthService.user_to_response(user)


@router.post("/register/staff", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_staff(
    request: StaffRegisterRequest,
    current_user: User = Depends(require_roles(Role.HOSPITAL_ADMIN, Role.SUPER_ADMIN)),
):
    """
    Register a staff member.
    
    - Hospital admins: doctor, nurse, receptionist, pharmacy in their own hospital
    - Super admins: any staff role, ``hospital_id`` required
    """
    user = await AuthService.register_staff(current_user, request)
    return AuthService.user_to_response(user)


@router.post("/register/patient", response_model=PatientRegistrationResponse, status_code=status.HTTP_201_CREATED)
async def register_patient(
    profile: PatientProfile,
    current_user: User = Depends(get_current_user),
):
    """Front-desk patient registration. Returns the temporary password."""
    patient, temp_password = await AuthService.register_patient(current_user, profile)
    return PatientRegistrationResponse(
        patient_id=patient.patient_id,
        temp_password=temp_password,
        patient=AuthService.user_to_response(patient),
    )


@router.post("/register/public-patient", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_public_patient(request: PublicPatientRegisterRequest):
    """Self-service patient sign-up."""
    user = await AuthService.register_public_patient(request)
    return AuthService.user_to_response(user)


@router.post("/register/delivery-partner", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_delivery_partner(request: DeliveryPartnerRegisterRequest):
    """Delivery partner sign-up."""
    user = await AuthService.register_delivery_partner(request)
    return AuthService.user_to_response(user)


@router.get("/staff", response_model=List[UserResponse])
async def list_staff(
    role: Optional[Role] = None,
    hospital_id: str = Depends(require_hospital),
    current_user: User = Depends(get_current_user),
):
    """Staff of the current user's hospital."""
    users = await AuthService.list_staff(hospital_id, role)
    return [AuthService.user_to_response(u) for u in users]


@router.patch("/users/{uid}/active", response_model=UserResponse)
async def set_user_active(
    uid: str,
    request: SetActiveRequest,
    current_user: User = Depends(require_roles(Role.HOSPITAL_ADMIN, Role.SUPER_ADMIN)),
):
    """Activate or deactivate a user."""
    user = await AuthService.set_user_active(current_user, uid, request.is_active)
    return AuthService.user_to_response(user)
