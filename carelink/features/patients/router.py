# Patients - Router

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from carelink.features.auth.dependencies import get_current_user, require_roles, require_hospital
from carelink.features.auth.models import User, Role
from carelink.features.auth.schemas import UserResponse
from carelink.features.auth.service import AuthService
from carelink.features.patients.schemas import AdmitPatientRequest, AdmissionResponse, WardOccupancy
from carelink.features.patients.service import PatientService

router = APIRouter(prefix="/patients", tags=["Patients"])

ADMISSION_STAFF = (Role.RECEPTIONIST, Role.DOCTOR, Role.NURSE, Role.HOSPITAL_ADMIN)


@router.get("", response_model=List[UserResponse])
async def list_patients(
    search: Optional[str] = Query(None, description="Name or patient id"),
    hospital_id: str = Depends(require_hospital),
    current_user: User = Depends(require_roles(*ADMISSION_STAFF, Role.PHARMACY)),
):
    """Patients registered at the current user's hospital."""
    patients = await PatientService.list_patients(hospital_id, search)
    return [AuthService.user_to_response(p) for p in patients]


@router.get("/admissions", response_model=List[AdmissionResponse])
async def list_admissions(
    active_only: bool = True,
    hospital_id: str = Depends(require_hospital),
    current_user: User = Depends(require_roles(*ADMISSION_STAFF)),
):
    admissions = await PatientService.list_admissions(hospital_id, active_only)
    return [PatientService.admission_to_response(a) for a in admissions]


@router.get("/wards", response_model=List[WardOccupancy])
async def ward_occupancy(
    hospital_id: str = Depends(require_hospital),
    current_user: User = Depends(require_roles(*ADMISSION_STAFF)),
):
    """Bed availability per ward."""
    return await PatientService.ward_occupancy(hospital_id)


@router.post("/admissions", response_model=AdmissionResponse, status_code=status.HTTP_201_CREATED)
async def admit_patient(
    request: AdmitPatientRequest,
    hospital_id: str = Depends(require_hospital),
    current_user: User = Depends(require_roles(*ADMISSION_STAFF)),
):
    """
    Admit a patient.

    - **ward_type**: one of the hospital ward types (icu, general, ...)
    - **admission_type**: emergency, planned and transfer admissions get bedside delivery
    """
    admission = await PatientService.admit_patient(current_user, request)
    return PatientService.admission_to_response(admission)


@router.post("/{patient_id}/discharge", response_model=AdmissionResponse)
async def discharge_patient(
    patient_id: str,
    hospital_id: str = Depends(require_hospital),
    current_user: User = Depends(require_roles(*ADMISSION_STAFF)),
):
    admission = await PatientService.discharge_patient(current_user, patient_id)
    return PatientService.admission_to_response(admission)


@router.get("/{patient_id}", response_model=UserResponse)
async def get_patient(
    patient_id: str,
    hospital_id: str = Depends(require_hospital),
    current_user: User = Depends(get_current_user),
):
    patient = await PatientService.get_patient(patient_id, hospital_id)
    return AuthService.user_to_response(patient)
