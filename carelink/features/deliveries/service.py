# Deliveries - Service

from typing import List, Optional
from datetime import datetime
from beanie import UpdateResponse
from beanie.operators import In
from carelink.features.auth.models import User, Role
from carelink.features.deliveries.models import (
    DeliveryTask,
    DeliveryTaskStatus,
    DeliveryEarning,
    EMERGENCY_DELIVERY_EARNING,
    STANDARD_DELIVERY_EARNING,
)
from carelink.features.deliveries.schemas import DeliveryTaskResponse, DeliveryEarningResponse
from carelink.core.realtime import RealtimeHub, hospital_room
from carelink.shared.exceptions import NotFoundException, ConflictException, ForbiddenException
from carelink.shared.ids import generate_id
from carelink.core.logging import logger


# Roles that carry medicines to the bedside
COURIER_ROLES = {Role.DELIVERY_PARTNER, Role.NURSE, Role.PHARMACY}


class DeliveryService:
    """Bedside delivery tasks and courier earnings."""

    @staticmethod
    def task_to_response(task: DeliveryTask) -> DeliveryTaskResponse:
        return DeliveryTaskResponse(
            task_id=task.task_id,
            hospital_id=task.hospital_id,
            prescription_id=task.prescription_id,
            patient_id=task.patient_id,
            patient_name=task.patient_name,
            bed_number=task.bed_number,
            location=task.location,
            medications=task.medications,
            delivery_instructions=task.delivery_instructions,
            is_emergency=task.is_emergency,
            priority=task.priority,
            status=task.status,
            assigned_at=task.assigned_at,
            accepted_at=task.accepted_at,
            accepted_by=task.accepted_by,
            completed_at=task.completed_at,
            completed_by=task.completed_by,
        )

    @staticmethod
    def earning_to_response(earning: DeliveryEarning) -> DeliveryEarningResponse:
        return DeliveryEarningResponse(
            earning_id=earning.earning_id,
            task_id=earning.task_id,
            hospital_id=earning.hospital_id,
            patient_id=earning.patient_id,
            amount=earning.amount,
            status=earning.status,
            created_at=earning.created_at,
        )

    @staticmethod
    def check_courier(actor: User) -> None:
        if actor.role not in COURIER_ROLES:
            raise ForbiddenException("You are not allowed to handle deliveries")

    @staticmethod
    async def get_task(task_id: str, actor: User) -> DeliveryTask:
        task = await DeliveryTask.find_one(DeliveryTask.task_id == task_id)
        if not task:
            raise NotFoundException("Delivery task not found")
        # Delivery partners work across hospitals
        if actor.role != Role.DELIVERY_PARTNER and task.hospital_id != actor.hospital_id:
            raise NotFoundException("Delivery task not found")
        return task

    @staticmethod
    async def list_tasks(
        actor: User,
        status: Optional[DeliveryTaskStatus] = None,
    ) -> List[DeliveryTask]:
        """
        Delivery tasks visible to the actor.

        Delivery partners see open tasks everywhere plus their own; hospital
        staff see their hospital's tasks.
        """
        if actor.role == Role.DELIVERY_PARTNER:
            tasks = await DeliveryTask.find(
                DeliveryTask.status == DeliveryTaskStatus.ASSIGNED,
            ).to_list()
            tasks += await DeliveryTask.find(
                DeliveryTask.accepted_by == actor.uid,
                DeliveryTask.status != DeliveryTaskStatus.ASSIGNED,
            ).to_list()
        else:
            tasks = await DeliveryTask.find(DeliveryTask.hospital_id == actor.hospital_id).to_list()

        if status is not None:
            tasks = [t for t in tasks if t.status == status]

        return sorted(tasks, key=lambda t: t.assigned_at, reverse=True)

    @staticmethod
    async def accept_delivery_task(
        actor: User,
        task_id: str,
        now: Optional[datetime] = None,
    ) -> DeliveryTask:
        """Claim an assigned task; a task someone else has claimed is a conflict."""
        DeliveryService.check_courier(actor)
        await DeliveryService.get_task(task_id, actor)

        now = now or datetime.utcnow()
        accepted = await DeliveryTask.find_one(
            DeliveryTask.task_id == task_id,
            DeliveryTask.status == DeliveryTaskStatus.ASSIGNED,
        ).update(
            {"$set": {
                "status": DeliveryTaskStatus.ACCEPTED.value,
                "accepted_at": now,
                "accepted_by": actor.uid,
                "updated_at": now,
            }},
            response_type=UpdateResponse.NEW_DOCUMENT,
        )

        if accepted is None:
            raise ConflictException(f"Delivery task {task_id} has already been accepted")

        logger.info(f"Delivery task {task_id} accepted by {actor.reference_id}")

        await RealtimeHub.publish(
            "delivery_tasks",
            accepted.model_dump(mode="json", exclude={"id", "revision_id"}),
            hospital_room(accepted.hospital_id),
        )
        return accepted

    @staticmethod
    async def complete_delivery_task(
        actor: User,
        task_id: str,
        now: Optional[datetime] = None,
    ) -> tuple[DeliveryTask, DeliveryEarning]:
        """
        Mark a task delivered and record the courier's earning.

        An accepted task can only be completed by whoever accepted it; an
        assigned task may be delivered directly.

        Returns:
            tuple: (task, earning)
        """
        DeliveryService.check_courier(actor)
        task = await DeliveryService.get_task(task_id, actor)

        if task.status == DeliveryTaskStatus.ACCEPTED and task.accepted_by != actor.uid:
            raise ForbiddenException("This delivery was accepted by someone else")

        now = now or datetime.utcnow()
        completed = await DeliveryTask.find_one(
            DeliveryTask.task_id == task_id,
            In(DeliveryTask.status, [
                DeliveryTaskStatus.ASSIGNED.value,
                DeliveryTaskStatus.ACCEPTED.value,
            ]),
        ).update(
            {"$set": {
                "status": DeliveryTaskStatus.COMPLETED.value,
                "completed_at": now,
                "completed_by": actor.uid,
                "accepted_by": task.accepted_by or actor.uid,
                "accepted_at": task.accepted_at or now,
                "updated_at": now,
            }},
            response_type=UpdateResponse.NEW_DOCUMENT,
        )

        if completed is None:
            raise ConflictException(f"Delivery task {task_id} has already been completed")

        earning = DeliveryEarning(
            earning_id=generate_id("ERN", 3),
            task_id=task_id,
            hospital_id=completed.hospital_id,
            patient_id=completed.patient_id,
            delivered_by=actor.uid,
            amount=EMERGENCY_DELIVERY_EARNING if completed.is_emergency else STANDARD_DELIVERY_EARNING,
        )
        await earning.insert()

        logger.info(
            f"Delivery task {task_id} completed by {actor.reference_id}, earning {earning.amount:.2f}"
        )

        await RealtimeHub.publish(
            "delivery_tasks",
            completed.model_dump(mode="json", exclude={"id", "revision_id"}),
            hospital_room(completed.hospital_id),
        )
        return completed, earning

    @staticmethod
    async def list_earnings(actor: User) -> List[DeliveryEarning]:
        return await DeliveryEarning.find(
            DeliveryEarning.delivered_by == actor.uid
        ).sort(-DeliveryEarning.created_at).to_list()
