# Nurse Assistance - Router

from typing import List
from fastapi import APIRouter, Depends
from carelink.features.auth.dependencies import get_current_user, require_roles, require_hospital
from carelink.features.auth.models import User, Role
from carelink.features.nurses.schemas import (
    EscalationRequest,
    EscalationResult,
    NurseRequestResponse,
    NurseNotificationResponse,
)
from carelink.features.nurses.service import NurseService

router = APIRouter(prefix="/nurses", tags=["Nurse Assistance"])


@router.post("/requests", response_model=EscalationResult)
async def escalate_to_nurses(
    context: EscalationRequest,
    current_user: User = Depends(require_roles(Role.PHARMACY, Role.HOSPITAL_ADMIN)),
):
    """
    Broadcast a request for help to every active nurse.

    Returns ``success: false`` when the hospital has no active nurses.
    """
    return await NurseService.escalate_to_nurses(current_user, context)


@router.get("/requests", response_model=List[NurseRequestResponse])
async def list_active_requests(
    hospital_id: str = Depends(require_hospital),
    current_user: User = Depends(require_roles(Role.PHARMACY, Role.NURSE, Role.HOSPITAL_ADMIN)),
):
    requests = await NurseService.list_active_requests(hospital_id)
    return [NurseService.request_to_response(r) for r in requests]


@router.post("/requests/{request_id}/accept", response_model=NurseRequestResponse)
async def accept_nurse_request(
    request_id: str,
    current_user: User = Depends(require_roles(Role.NURSE)),
):
    """First nurse to accept wins; later accepts get 409."""
    request = await NurseService.accept_nurse_request(current_user, request_id)
    return NurseService.request_to_response(request)


@router.post("/requests/{request_id}/complete", response_model=NurseRequestResponse)
async def complete_nurse_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
):
    request = await NurseService.complete_nurse_request(current_user, request_id)
    return NurseService.request_to_response(request)


@router.get("/notifications", response_model=List[NurseNotificationResponse])
async def list_my_notifications(
    include_dismissed: bool = False,
    current_user: User = Depends(require_roles(Role.NURSE)),
):
    notifications = await NurseService.list_nurse_notifications(current_user, include_dismissed)
    return [NurseService.notification_to_response(n) for n in notifications]


@router.post("/notifications/{notification_id}/dismiss", response_model=NurseNotificationResponse)
async def dismiss_nurse_notification(
    notification_id: str,
    current_user: User = Depends(require_roles(Role.NURSE)),
):
    notification = await NurseService.dismiss_nurse_notification(current_user, notification_id)
    return NurseService.notification_to_response(notification)
