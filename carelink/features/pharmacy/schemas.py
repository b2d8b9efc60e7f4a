# Pharmacy - Schemas

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel
from carelink.features.pharmacy.models import NotificationStatus


class PharmacyNotificationResponse(BaseModel):
    notification_id: str
    prescription_id: str
    patient_id: str
    patient_name: str
    is_emergency: bool
    priority: str
    bed_number: Optional[str] = None
    location: Optional[str] = None
    medications: List[dict]
    status: NotificationStatus
    processed_at: Optional[datetime] = None
    processed_by: Optional[str] = None
    created_at: datetime


class PeakStatus(BaseModel):
    is_peak: bool
    in_peak_window: bool
    workload: int
    pending_notifications: int
    assigned_deliveries: int
    threshold: int
    checked_at: datetime
