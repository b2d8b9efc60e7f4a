# Nurse Assistance - Service

from typing import List, Optional
from datetime import datetime
from beanie import UpdateResponse
from beanie.operators import In
from carelink.features.auth.models import User, Role
from carelink.features.nurses.models import (
    NurseRequest,
    NurseRequestStatus,
    NurseNotification,
    NurseNotificationStatus,
)
from carelink.features.nurses.schemas import (
    EscalationRequest,
    EscalationResult,
    NurseRequestResponse,
    NurseNotificationResponse,
)
from carelink.features.pharmacy.models import PharmacyNotification, NotificationStatus
from carelink.features.pharmacy.service import PharmacyService
from carelink.features.workflow import WorkflowCascade
from carelink.core.realtime import RealtimeHub, hospital_room, user_room
from carelink.shared.exceptions import (
    NotFoundException,
    ConflictException,
    ForbiddenException,
)
from carelink.shared.ids import generate_id
from carelink.core.logging import logger


class NurseService:
    """Broadcast of pharmacy assistance requests to a hospital's nurses."""

    @staticmethod
    def request_to_response(request: NurseRequest) -> NurseRequestResponse:
        return NurseRequestResponse(
            request_id=request.request_id,
            hospital_id=request.hospital_id,
            requested_by=request.requested_by,
            requested_by_name=request.requested_by_name,
            reason=request.reason,
            prescription_id=request.prescription_id,
            notification_id=request.notification_id,
            is_peak_hour=request.is_peak_hour,
            nurses_notified=request.nurses_notified,
            status=request.status,
            accepted_by=request.accepted_by,
            accepted_by_name=request.accepted_by_name,
            accepted_at=request.accepted_at,
            completed_at=request.completed_at,
            created_at=request.created_at,
        )

    @staticmethod
    def notification_to_response(notification: NurseNotification) -> NurseNotificationResponse:
        return NurseNotificationResponse(
            notification_id=notification.notification_id,
            request_id=notification.request_id,
            message=notification.message,
            status=notification.status,
            read=notification.read,
            acted_at=notification.acted_at,
            created_at=notification.created_at,
        )

    @staticmethod
    async def escalate_to_nurses(
        actor: User,
        context: EscalationRequest,
        now: Optional[datetime] = None,
    ) -> EscalationResult:
        """
        Ask every active nurse of the actor's hospital for help.

        With no active nurse nothing is written and an unsuccessful result is
        returned. Otherwise one request is created plus one notification per
        nurse, and the linked pharmacy notification is flagged. ``now`` is the
        local time the request is judged against for peak hours.
        """
        PharmacyService.check_role(actor)
        hospital_id = actor.hospital_id

        nurses = await User.find(
            User.hospital_id == hospital_id,
            User.role == Role.NURSE,
            User.is_active == True,
        ).to_list()

        if not nurses:
            logger.warning(f"Escalation from {actor.staff_id} in {hospital_id}: no active nurses")
            return EscalationResult(
                success=False,
                message="No active nurses are available in your hospital",
            )

        linked = None
        if context.notification_id:
            linked = await PharmacyNotification.find_one(
                PharmacyNotification.notification_id == context.notification_id,
                PharmacyNotification.hospital_id == hospital_id,
            )
            if not linked:
                raise NotFoundException("Pharmacy notification not found")

        peak = await PharmacyService.get_peak_status(hospital_id, now)

        request = NurseRequest(
            request_id=generate_id("NR", 3),
            hospital_id=hospital_id,
            requested_by=actor.uid,
            requested_by_name=actor.full_name,
            reason=context.reason,
            prescription_id=context.prescription_id or (linked.prescription_id if linked else None),
            notification_id=context.notification_id,
            is_peak_hour=peak.is_peak,
            nurses_notified=len(nurses),
        )

        message = f"Pharmacy assistance needed: {context.reason}"
        if linked and linked.bed_number:
            message += f" (Bed {linked.bed_number}, {linked.location})"

        notifications = [
            NurseNotification(
                notification_id=generate_id("NN", 3),
                request_id=request.request_id,
                hospital_id=hospital_id,
                nurse_id=nurse.uid,
                message=message,
            )
            for nurse in nurses
        ]

        async with WorkflowCascade("nurse_escalation", hospital_id) as cascade:
            await cascade.insert(request)
            for notification in notifications:
                await cascade.insert(notification)

            if linked and linked.status == NotificationStatus.PENDING:
                await cascade.update(linked, status=NotificationStatus.ASSISTANCE_REQUESTED)

        logger.info(
            f"Nurse request {request.request_id} from {actor.staff_id} sent to {len(nurses)} nurse(s)"
        )

        for notification in notifications:
            await RealtimeHub.publish(
                "nurse_notifications",
                notification.model_dump(mode="json", exclude={"id", "revision_id"}),
                user_room(notification.nurse_id),
            )

        return EscalationResult(
            success=True,
            message=f"Assistance request sent to {len(nurses)} nurse(s)",
            nurses_notified=len(nurses),
            request=NurseService.request_to_response(request),
        )

    @staticmethod
    async def accept_nurse_request(
        nurse: User,
        request_id: str,
        now: Optional[datetime] = None,
    ) -> NurseRequest:
        """
        Claim a pending request.

        The update only matches while the request is pending, so exactly one
        nurse wins; everyone else gets a conflict.
        """
        if nurse.role != Role.NURSE:
            raise ForbiddenException("Only nurses can accept assistance requests")

        request = await NurseRequest.find_one(NurseRequest.request_id == request_id)
        if not request or request.hospital_id != nurse.hospital_id:
            raise NotFoundException("Assistance request not found")

        now = now or datetime.utcnow()
        accepted = await NurseRequest.find_one(
            NurseRequest.request_id == request_id,
            NurseRequest.status == NurseRequestStatus.PENDING,
        ).update(
            {"$set": {
                "status": NurseRequestStatus.ACCEPTED.value,
                "accepted_by": nurse.uid,
                "accepted_by_name": nurse.full_name,
                "accepted_at": now,
                "updated_at": now,
            }},
            response_type=UpdateResponse.NEW_DOCUMENT,
        )

        if accepted is None:
            raise ConflictException("This request has already been accepted by another nurse")

        await NurseNotification.find(
            NurseNotification.request_id == request_id,
            NurseNotification.nurse_id == nurse.uid,
        ).update({"$set": {
            "status": NurseNotificationStatus.ACCEPTED.value,
            "read": True,
            "acted_at": now,
            "updated_at": now,
        }})

        logger.info(f"Nurse request {request_id} accepted by {nurse.staff_id}")

        await RealtimeHub.publish(
            "nurse_requests",
            accepted.model_dump(mode="json", exclude={"id", "revision_id"}),
            hospital_room(accepted.hospital_id),
        )
        return accepted

    @staticmethod
    async def dismiss_nurse_notification(
        nurse: User,
        notification_id: str,
        now: Optional[datetime] = None,
    ) -> NurseNotification:
        """A nurse hides their copy of a request; the request itself is untouched."""
        notification = await NurseNotification.find_one(
            NurseNotification.notification_id == notification_id
        )
        if not notification or notification.nurse_id != nurse.uid:
            raise NotFoundException("Notification not found")

        if notification.status == NurseNotificationStatus.DISMISSED:
            return notification

        notification.status = NurseNotificationStatus.DISMISSED
        notification.read = True
        notification.acted_at = now or datetime.utcnow()
        notification.update_timestamp()
        await notification.save()
        return notification

    @staticmethod
    async def complete_nurse_request(
        actor: User,
        request_id: str,
        now: Optional[datetime] = None,
    ) -> NurseRequest:
        """Close an accepted request. Pharmacy staff or the accepting nurse may do this."""
        request = await NurseRequest.find_one(NurseRequest.request_id == request_id)
        if not request or request.hospital_id != actor.hospital_id:
            raise NotFoundException("Assistance request not found")

        if actor.role == Role.NURSE:
            if request.accepted_by != actor.uid:
                raise ForbiddenException("Only the nurse who accepted this request can complete it")
        else:
            PharmacyService.check_role(actor)

        now = now or datetime.utcnow()
        completed = await NurseRequest.find_one(
            NurseRequest.request_id == request_id,
            NurseRequest.status == NurseRequestStatus.ACCEPTED,
        ).update(
            {"$set": {
                "status": NurseRequestStatus.COMPLETED.value,
                "completed_at": now,
                "updated_at": now,
            }},
            response_type=UpdateResponse.NEW_DOCUMENT,
        )

        if completed is None:
            raise ConflictException(
                f"Request {request_id} is {request.status.value} and cannot be completed"
            )

        logger.info(f"Nurse request {request_id} completed by {actor.reference_id}")

        await RealtimeHub.publish(
            "nurse_requests",
            completed.model_dump(mode="json", exclude={"id", "revision_id"}),
            hospital_room(completed.hospital_id),
        )
        return completed

    @staticmethod
    async def list_active_requests(hospital_id: str) -> List[NurseRequest]:
        """Pending and accepted requests, newest first."""
        return await NurseRequest.find(
            NurseRequest.hospital_id == hospital_id,
            In(NurseRequest.status, [NurseRequestStatus.PENDING, NurseRequestStatus.ACCEPTED]),
        ).sort(-NurseRequest.created_at).to_list()

    @staticmethod
    async def list_nurse_notifications(nurse: User, include_dismissed: bool = False) -> List[NurseNotification]:
        query = NurseNotification.find(NurseNotification.nurse_id == nurse.uid)
        if not include_dismissed:
            query = query.find(NurseNotification.status != NurseNotificationStatus.DISMISSED)
        return await query.sort(-NurseNotification.created_at).to_list()
