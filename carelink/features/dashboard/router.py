# Dashboard Feature - Router

from fastapi import APIRouter, Depends
from carelink.features.auth.models import User, Role
from carelink.features.auth.dependencies import require_roles, require_hospital
from carelink.features.dashboard.schemas import HospitalStatsResponse, PlatformStatsResponse
from carelink.features.dashboard.service import DashboardService


router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=HospitalStatsResponse)
async def get_hospital_stats(
    hospital_id: str = Depends(require_hospital),
    current_user: User = Depends(require_roles(
        Role.HOSPITAL_ADMIN, Role.DOCTOR, Role.RECEPTIONIST, Role.PHARMACY, Role.NURSE
    )),
):
    """
    Get dashboard statistics for the current user's hospital.
    
    Returns:
    - Patients and admitted patients
    - Active staff by role
    - Today's appointments
    - Billing totals
    - Open pharmacy and delivery work
    """
    return await DashboardService.get_hospital_stats(hospital_id)


@router.get("/platform", response_model=PlatformStatsResponse)
async def get_platform_stats(current_user: User = Depends(require_roles(Role.SUPER_ADMIN))):
    return await DashboardService.get_platform_stats()
