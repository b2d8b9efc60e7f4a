# Deliveries - Router

from typing import List, Optional
from fastapi import APIRouter, Depends
from carelink.features.auth.dependencies import get_current_user
from carelink.features.auth.models import User
from carelink.features.deliveries.models import DeliveryTaskStatus
from carelink.features.deliveries.schemas import DeliveryTaskResponse, EarningsSummary
from carelink.features.deliveries.service import DeliveryService

router = APIRouter(prefix="/deliveries", tags=["Deliveries"])


@router.get("", response_model=List[DeliveryTaskResponse])
async def list_tasks(
    status: Optional[DeliveryTaskStatus] = None,
    current_user: User = Depends(get_current_user),
):
    tasks = await DeliveryService.list_tasks(current_user, status)
    return [DeliveryService.task_to_response(t) for t in tasks]


@router.get("/earnings", response_model=EarningsSummary)
async def my_earnings(current_user: User = Depends(get_current_user)):
    """Earnings of the current courier."""
    earnings = await DeliveryService.list_earnings(current_user)
    return EarningsSummary(
        deliveries=len(earnings),
        total_amount=round(sum(e.amount for e in earnings), 2),
        earnings=[DeliveryService.earning_to_response(e) for e in earnings],
    )


@router.post("/{task_id}/accept", response_model=DeliveryTaskResponse)
async def accept_task(task_id: str, current_user: User = Depends(get_current_user)):
    task = await DeliveryService.accept_delivery_task(current_user, task_id)
    return DeliveryService.task_to_response(task)


@router.post("/{task_id}/complete", response_model=DeliveryTaskResponse)
async def complete_task(task_id: str, current_user: User = Depends(get_current_user)):
    """Mark delivered; records the courier's earning."""
    task, _ = await DeliveryService.complete_delivery_task(current_user, task_id)
    return DeliveryService.task_to_response(task)
