"""Nurse escalation broadcast and the first-accept-wins race."""

import asyncio
from datetime import datetime

import pytest

from carelink.features.auth.models import Role
from carelink.features.nurses.models import (
    NurseNotification,
    NurseNotificationStatus,
    NurseRequest,
    NurseRequestStatus,
)
from carelink.features.nurses.schemas import EscalationRequest
from carelink.features.nurses.service import NurseService
from carelink.features.pharmacy.models import NotificationStatus, PharmacyNotification
from carelink.features.prescriptions.schemas import CreatePrescriptionRequest
from carelink.features.prescriptions.service import PrescriptionService
from carelink.shared.exceptions import ConflictException, ForbiddenException
from tests.conftest import HOSPITAL_ID, make_user


async def test_no_nurses_means_no_writes(pharmacist):
    result = await NurseService.escalate_to_nurses(pharmacist, EscalationRequest(reason="Queue backed up"))

    assert result.success is False
    assert result.nurses_notified == 0
    assert await NurseRequest.count() == 0
    assert await NurseNotification.count() == 0


async def test_inactive_and_other_hospital_nurses_are_skipped(pharmacist, nurses):
    nurses[1].is_active = False
    await nurses[1].save()
    await make_user(Role.NURSE, "nurse@elsewhere.org", hospital_id="HOSP-ELSEWHERE")

    result = await NurseService.escalate_to_nurses(pharmacist, EscalationRequest())

    assert result.success is True
    assert result.nurses_notified == 1
    notifications = await NurseNotification.find_all().to_list()
    assert [n.nurse_id for n in notifications] == [nurses[0].uid]


async def test_escalation_fans_out_and_flags_pharmacy_notification(pharmacist, nurses, doctor, patient):
    _, _, notification, _ = await PrescriptionService.create_prescription_with_billing(
        doctor,
        CreatePrescriptionRequest(
            patient_id=patient.patient_id,
            medications=[{"name": "Aspirin 75mg", "dosage": "75mg", "quantity": "30 tablets"}],
        ),
    )

    result = await NurseService.escalate_to_nurses(
        pharmacist,
        EscalationRequest(reason="Need a runner", notification_id=notification.notification_id),
    )

    assert result.success is True
    assert result.request.nurses_notified == 2
    assert result.request.prescription_id == notification.prescription_id
    copies = await NurseNotification.find(NurseNotification.request_id == result.request.request_id).to_list()
    assert {c.nurse_id for c in copies} == {n.uid for n in nurses}
    assert all(c.status == NurseNotificationStatus.SENT for c in copies)

    flagged = await PharmacyNotification.find_one(
        PharmacyNotification.notification_id == notification.notification_id
    )
    assert flagged.status == NotificationStatus.ASSISTANCE_REQUESTED


async def test_request_records_peak_hour_at_given_time(pharmacist, nurses):
    monday_morning = datetime(2024, 3, 4, 9, 30)
    monday_night = datetime(2024, 3, 4, 22, 0)

    busy = await NurseService.escalate_to_nurses(pharmacist, EscalationRequest(), now=monday_morning)
    quiet = await NurseService.escalate_to_nurses(pharmacist, EscalationRequest(), now=monday_night)

    assert busy.request.is_peak_hour is True
    assert quiet.request.is_peak_hour is False


async def test_only_pharmacy_can_escalate(doctor, nurses):
    with pytest.raises(ForbiddenException):
        await NurseService.escalate_to_nurses(doctor, EscalationRequest())


async def test_concurrent_accepts_have_exactly_one_winner(pharmacist, nurses):
    result = await NurseService.escalate_to_nurses(pharmacist, EscalationRequest())
    request_id = result.request.request_id

    outcomes = await asyncio.gather(
        NurseService.accept_nurse_request(nurses[0], request_id),
        NurseService.accept_nurse_request(nurses[1], request_id),
        return_exceptions=True,
    )

    winners = [o for o in outcomes if isinstance(o, NurseRequest)]
    losers = [o for o in outcomes if isinstance(o, ConflictException)]
    assert len(winners) == 1
    assert len(losers) == 1

    stored = await NurseRequest.find_one(NurseRequest.request_id == request_id)
    assert stored.status == NurseRequestStatus.ACCEPTED
    assert stored.accepted_by == winners[0].accepted_by

    mine = await NurseNotification.find_one(
        NurseNotification.request_id == request_id,
        NurseNotification.nurse_id == stored.accepted_by,
    )
    assert mine.status == NurseNotificationStatus.ACCEPTED


async def test_late_accept_is_a_conflict(pharmacist, nurses):
    result = await NurseService.escalate_to_nurses(pharmacist, EscalationRequest())
    request_id = result.request.request_id

    await NurseService.accept_nurse_request(nurses[0], request_id)
    with pytest.raises(ConflictException):
        await NurseService.accept_nurse_request(nurses[1], request_id)


async def test_complete_requires_accepted_request(pharmacist, nurses):
    result = await NurseService.escalate_to_nurses(pharmacist, EscalationRequest())
    request_id = result.request.request_id

    with pytest.raises(ConflictException):
        await NurseService.complete_nurse_request(pharmacist, request_id)

    await NurseService.accept_nurse_request(nurses[0], request_id)
    with pytest.raises(ForbiddenException):
        await NurseService.complete_nurse_request(nurses[1], request_id)

    completed = await NurseService.complete_nurse_request(nurses[0], request_id)
    assert completed.status == NurseRequestStatus.COMPLETED
    assert await NurseService.list_active_requests(HOSPITAL_ID) == []


async def test_dismiss_hides_only_own_copy(pharmacist, nurses):
    result = await NurseService.escalate_to_nurses(pharmacist, EscalationRequest())
    copy = (await NurseService.list_nurse_notifications(nurses[0]))[0]

    dismissed = await NurseService.dismiss_nurse_notification(nurses[0], copy.notification_id)

    assert dismissed.status == NurseNotificationStatus.DISMISSED
    assert await NurseService.list_nurse_notifications(nurses[0]) == []
    assert len(await NurseService.list_nurse_notifications(nurses[1])) == 1
    request = await NurseRequest.find_one(NurseRequest.request_id == result.request.request_id)
    assert request.status == NurseRequestStatus.PENDING
