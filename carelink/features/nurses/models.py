# Nurse Assistance - Models

from enum import Enum
from datetime import datetime
from typing import Optional
from beanie import Document, Indexed
from carelink.shared.models import TimestampMixin


class NurseRequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    COMPLETED = "completed"


class NurseNotificationStatus(str, Enum):
    SENT = "sent"
    ACCEPTED = "accepted"
    DISMISSED = "dismissed"


class NurseRequest(Document, TimestampMixin):
    """
    Hospital-wide request for a nurse to help the pharmacy.
    
    The first nurse whose accept lands while the request is still pending
    wins; ``status`` is the guard for that compare-and-set.
    """
    
    request_id: Indexed(str, unique=True)
    hospital_id: Indexed(str)
    requested_by: str
    requested_by_name: str
    reason: str = ""
    prescription_id: Optional[str] = None
    notification_id: Optional[str] = None
    is_peak_hour: bool = False
    nurses_notified: int = 0
    
    status: NurseRequestStatus = NurseRequestStatus.PENDING
    accepted_by: Optional[str] = None
    accepted_by_name: Optional[str] = None
    accepted_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    
    class Settings:
        name = "nurse_requests"
        use_state_management = True


class NurseNotification(Document, TimestampMixin):
    """Per-nurse copy of a request; each nurse accepts or dismisses their own."""
    
    notification_id: Indexed(str, unique=True)
    request_id: Indexed(str)
    hospital_id: str
    nurse_id: Indexed(str)
    message: str
    
    status: NurseNotificationStatus = NurseNotificationStatus.SENT
    read: bool = False
    acted_at: Optional[datetime] = None
    
    class Settings:
        name = "nurse_notifications"
        use_state_management = True
