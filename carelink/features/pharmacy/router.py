# Pharmacy - Router

from typing import List
from fastapi import APIRouter, Depends
from carelink.features.auth.dependencies import require_roles, require_hospital
from carelink.features.auth.models import User, Role
from carelink.features.pharmacy.schemas import PharmacyNotificationResponse, PeakStatus
from carelink.features.pharmacy.service import PharmacyService

router = APIRouter(prefix="/pharmacy", tags=["Pharmacy"])


@router.get("/notifications", response_model=List[PharmacyNotificationResponse])
async def list_pending_notifications(
    hospital_id: str = Depends(require_hospital),
    current_user: User = Depends(require_roles(Role.PHARMACY, Role.HOSPITAL_ADMIN)),
):
    """Open prescriptions for the pharmacy, emergencies first."""
    notifications = await PharmacyService.list_pending_notifications(hospital_id)
    return [PharmacyService.notification_to_response(n) for n in notifications]


@router.post("/notifications/{notification_id}/process", response_model=PharmacyNotificationResponse)
async def process_notification(
    notification_id: str,
    current_user: User = Depends(require_roles(Role.PHARMACY, Role.HOSPITAL_ADMIN)),
):
    notification = await PharmacyService.process_notification(current_user, notification_id)
    return PharmacyService.notification_to_response(notification)


@router.get("/peak-status", response_model=PeakStatus)
async def peak_status(
    hospital_id: str = Depends(require_hospital),
    current_user: User = Depends(require_roles(Role.PHARMACY, Role.HOSPITAL_ADMIN)),
):
    """Whether the pharmacy is in a peak period and should offer nurse escalation."""
    return await PharmacyService.get_peak_status(hospital_id)
