# Hospital Directory - Models

from enum import Enum
from typing import List, Optional
from beanie import Document, Indexed
from pydantic import ConfigDict, Field
from carelink.shared.models import TimestampMixin


class HospitalStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


class Hospital(Document, TimestampMixin):
    """Tenant record. Every clinical document carries its ``hospital_id``."""
    
    hospital_id: Indexed(str, unique=True)
    name: str
    hospital_type: str = "General Hospital"
    address: str = ""
    phone: str = ""
    email: str = ""
    
    departments: List[str] = Field(default_factory=list)
    services: List[str] = Field(default_factory=list)
    bed_capacity: int = 0
    
    status: HospitalStatus = HospitalStatus.ACTIVE
    admin_uid: Optional[str] = None
    
    class Settings:
        name = "hospitals"
        use_state_management = True
    
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "hospital_id": "HOSP48291302",
                "name": "St. Mary's General",
                "departments": ["General Medicine", "Emergency Medicine", "Cardiology"],
                "services": ["Laboratory", "Radiology"],
                "bed_capacity": 120,
                "status": "active",
            }
        }
    )
