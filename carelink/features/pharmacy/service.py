# Pharmacy - Service

from typing import List, Optional
from datetime import datetime
from beanie import UpdateResponse
from beanie.operators import In
from carelink.config import settings
from carelink.features.auth.models import User, Role
from carelink.features.deliveries.models import DeliveryTask, DeliveryTaskStatus
from carelink.features.pharmacy.models import PharmacyNotification, NotificationStatus
from carelink.features.pharmacy.peak import is_peak_hour, is_peak_time
from carelink.features.pharmacy.schemas import PharmacyNotificationResponse, PeakStatus
from carelink.features.prescriptions.models import (
    Prescription,
    MedicationStatus,
    MEDICATION_STATUS_ORDER,
)
from carelink.core.realtime import RealtimeHub, hospital_room
from carelink.shared.exceptions import (
    NotFoundException,
    BadRequestException,
    ConflictException,
    ForbiddenException,
    InvalidTransitionException,
)
from carelink.core.logging import logger


PHARMACY_ROLES = {Role.PHARMACY, Role.HOSPITAL_ADMIN}


class PharmacyService:
    """Medication dispensing and the pharmacy work queue."""

    @staticmethod
    def notification_to_response(notification: PharmacyNotification) -> PharmacyNotificationResponse:
        return PharmacyNotificationResponse(
            notification_id=notification.notification_id,
            prescription_id=notification.prescription_id,
            patient_id=notification.patient_id,
            patient_name=notification.patient_name,
            is_emergency=notification.is_emergency,
            priority=notification.priority,
            bed_number=notification.bed_number,
            location=notification.location,
            medications=notification.medications,
            status=notification.status,
            processed_at=notification.processed_at,
            processed_by=notification.processed_by,
            created_at=notification.created_at,
        )

    @staticmethod
    def check_role(actor: User) -> None:
        if actor.role not in PHARMACY_ROLES:
            raise ForbiddenException("Pharmacy access required")

    @staticmethod
    async def advance_medication_status(
        actor: User,
        prescription_id: str,
        index: int,
        target: MedicationStatus,
        now: Optional[datetime] = None,
    ) -> Prescription:
        """
        Move one medication line forward through prescribed -> ready -> sold.

        Re-applying the current status is a no-op. Lines never move backwards,
        and emergency (bedside) prescriptions are never sold at the counter.
        """
        PharmacyService.check_role(actor)

        prescription = await Prescription.find_one(Prescription.prescription_id == prescription_id)
        if not prescription or prescription.hospital_id != actor.hospital_id:
            raise NotFoundException("Prescription not found")

        if index < 0 or index >= len(prescription.medications):
            raise BadRequestException(f"Prescription {prescription_id} has no medication #{index}")

        line = prescription.medications[index]
        current = line.status

        if target == current:
            return prescription

        if MEDICATION_STATUS_ORDER[target] < MEDICATION_STATUS_ORDER[current]:
            raise InvalidTransitionException(f"medication '{line.name}'", current.value, target.value)

        if target == MedicationStatus.SOLD and prescription.is_emergency:
            raise BadRequestException(
                "Emergency prescriptions are delivered to the bedside and cannot be sold"
            )

        now = now or datetime.utcnow()

        # Only applies if the line still has the status we validated against;
        # sibling lines are left to their own writers
        updated = await Prescription.find_one(
            {"prescription_id": prescription_id, f"medications.{index}.status": current.value}
        ).update(
            {"$set": {
                f"medications.{index}.status": target.value,
                f"medications.{index}.status_updated_at": now,
                "updated_at": now,
            }},
            response_type=UpdateResponse.NEW_DOCUMENT,
        )

        if updated is None:
            raise ConflictException(
                f"Medication '{line.name}' was updated by someone else, please refresh"
            )

        logger.info(
            f"{prescription_id} medication #{index} ({line.name}): "
            f"{current.value} -> {target.value} by {actor.staff_id}"
        )

        await RealtimeHub.publish(
            "prescriptions",
            updated.model_dump(mode="json", exclude={"id", "revision_id"}),
            hospital_room(updated.hospital_id),
        )
        return updated

    @staticmethod
    async def list_pending_notifications(hospital_id: str) -> List[PharmacyNotification]:
        """Open notifications, emergencies first, then oldest first."""
        notifications = await PharmacyNotification.find(
            PharmacyNotification.hospital_id == hospital_id,
            In(PharmacyNotification.status, [
                NotificationStatus.PENDING,
                NotificationStatus.ASSISTANCE_REQUESTED,
            ]),
        ).sort(PharmacyNotification.created_at).to_list()

        return sorted(notifications, key=lambda n: not n.is_emergency)

    @staticmethod
    async def process_notification(
        actor: User,
        notification_id: str,
        now: Optional[datetime] = None,
    ) -> PharmacyNotification:
        """Mark an open notification as processed."""
        PharmacyService.check_role(actor)

        notification = await PharmacyNotification.find_one(
            PharmacyNotification.notification_id == notification_id
        )
        if not notification or notification.hospital_id != actor.hospital_id:
            raise NotFoundException("Notification not found")

        now = now or datetime.utcnow()
        updated = await PharmacyNotification.find_one(
            PharmacyNotification.notification_id == notification_id,
            In(PharmacyNotification.status, [
                NotificationStatus.PENDING.value,
                NotificationStatus.ASSISTANCE_REQUESTED.value,
            ]),
        ).update(
            {"$set": {
                "status": NotificationStatus.PROCESSED.value,
                "processed_at": now,
                "processed_by": actor.uid,
                "updated_at": now,
            }},
            response_type=UpdateResponse.NEW_DOCUMENT,
        )

        if updated is None:
            raise ConflictException(f"Notification {notification_id} has already been processed")

        logger.info(f"Pharmacy notification {notification_id} processed by {actor.staff_id}")

        await RealtimeHub.publish(
            "pharmacy_notifications",
            updated.model_dump(mode="json", exclude={"id", "revision_id"}),
            hospital_room(updated.hospital_id),
        )
        return updated

    @staticmethod
    async def get_peak_status(hospital_id: str, now: Optional[datetime] = None) -> PeakStatus:
        """Current workload and whether nurse assistance should be offered."""
        now = now or datetime.now()

        pending_notifications = await PharmacyNotification.find(
            PharmacyNotification.hospital_id == hospital_id,
            PharmacyNotification.status == NotificationStatus.PENDING,
        ).count()
        assigned_deliveries = await DeliveryTask.find(
            DeliveryTask.hospital_id == hospital_id,
            DeliveryTask.status == DeliveryTaskStatus.ASSIGNED,
        ).count()

        workload = pending_notifications + assigned_deliveries
        threshold = settings.PEAK_WORKLOAD_THRESHOLD

        return PeakStatus(
            is_peak=is_peak_hour(now, workload, threshold),
            in_peak_window=is_peak_time(now),
            workload=workload,
            pending_notifications=pending_notifications,
            assigned_deliveries=assigned_deliveries,
            threshold=threshold,
            checked_at=now,
        )
