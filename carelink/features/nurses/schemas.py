# Nurse Assistance - Schemas

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from carelink.features.nurses.models import NurseRequestStatus, NurseNotificationStatus


class EscalationRequest(BaseModel):
    """Pharmacy request for nurse help, optionally tied to a prescription."""
    reason: str = Field("Pharmacy needs assistance", max_length=500)
    prescription_id: Optional[str] = None
    notification_id: Optional[str] = None


class NurseRequestResponse(BaseModel):
    request_id: str
    hospital_id: str
    requested_by: str
    requested_by_name: str
    reason: str
    prescription_id: Optional[str] = None
    notification_id: Optional[str] = None
    is_peak_hour: bool
    nurses_notified: int
    status: NurseRequestStatus
    accepted_by: Optional[str] = None
    accepted_by_name: Optional[str] = None
    accepted_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime


class NurseNotificationResponse(BaseModel):
    notification_id: str
    request_id: str
    message: str
    status: NurseNotificationStatus
    read: bool
    acted_at: Optional[datetime] = None
    created_at: datetime


class EscalationResult(BaseModel):
    """``success`` is False when no active nurse could be notified."""
    success: bool
    message: str
    nurses_notified: int = 0
    request: Optional[NurseRequestResponse] = None
