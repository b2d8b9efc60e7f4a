# Dashboard Feature - Schemas

from typing import Dict
from pydantic import BaseModel, ConfigDict


class HospitalStatsResponse(BaseModel):
    """Response schema for a hospital's dashboard statistics."""
    total_patients: int
    admitted_patients: int
    active_staff: Dict[str, int]
    todays_appointments: int
    pending_bills: int
    pending_amount: float
    total_revenue: float
    pending_pharmacy_notifications: int
    open_delivery_tasks: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "total_patients": 284,
                "admitted_patients": 31,
                "active_staff": {"doctor": 12, "nurse": 20, "pharmacy": 3},
                "todays_appointments": 18,
                "pending_bills": 9,
                "pending_amount": 1420.5,
                "total_revenue": 38210.0,
                "pending_pharmacy_notifications": 4,
                "open_delivery_tasks": 2,
            }
        }
    )


class PlatformStatsResponse(BaseModel):
    """Super admin overview across hospitals."""
    total_hospitals: int
    active_hospitals: int
    users_by_role: Dict[str, int]
