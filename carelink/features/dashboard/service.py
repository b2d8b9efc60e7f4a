# Dashboard Feature - Service

from typing import Optional
from datetime import date
from beanie.operators import In
from carelink.features.auth.models import User, Role
from carelink.features.appointments.models import Appointment
from carelink.features.billing.service import BillingService
from carelink.features.dashboard.schemas import HospitalStatsResponse, PlatformStatsResponse
from carelink.features.deliveries.models import DeliveryTask, DeliveryTaskStatus
from carelink.features.hospitals.models import Hospital, HospitalStatus
from carelink.features.pharmacy.models import PharmacyNotification, NotificationStatus


class DashboardService:
    """Service for dashboard statistics."""

    @staticmethod
    async def get_hospital_stats(hospital_id: str, today: Optional[date] = None) -> HospitalStatsResponse:
        """
        Get dashboard statistics for a hospital.
        
        Args:
            hospital_id: The hospital ID
            today: Day used for the appointment count
            
        Returns:
            HospitalStatsResponse with aggregated statistics
        """
        today = today or date.today()

        total_patients = await User.find(
            User.hospital_id == hospital_id,
            User.role == Role.PATIENT,
        ).count()

        admitted_patients = await User.find(
            User.hospital_id == hospital_id,
            User.role == Role.PATIENT,
            User.is_admitted == True,
        ).count()

        staff = await User.find(
            User.hospital_id == hospital_id,
            User.role != Role.PATIENT,
            User.is_active == True,
        ).to_list()
        active_staff = {}
        for member in staff:
            active_staff[member.role.value] = active_staff.get(member.role.value, 0) + 1

        todays_appointments = await Appointment.find(
            Appointment.hospital_id == hospital_id,
            Appointment.appointment_date == today,
        ).count()

        billing = await BillingService.billing_summary(hospital_id)

        pending_notifications = await PharmacyNotification.find(
            PharmacyNotification.hospital_id == hospital_id,
            PharmacyNotification.status == NotificationStatus.PENDING,
        ).count()

        open_deliveries = await DeliveryTask.find(
            DeliveryTask.hospital_id == hospital_id,
            In(DeliveryTask.status, [DeliveryTaskStatus.ASSIGNED, DeliveryTaskStatus.ACCEPTED]),
        ).count()

        return HospitalStatsResponse(
            total_patients=total_patients,
            admitted_patients=admitted_patients,
            active_staff=active_staff,
            todays_appointments=todays_appointments,
            pending_bills=billing.pending_bills,
            pending_amount=billing.pending_amount,
            total_revenue=billing.total_revenue,
            pending_pharmacy_notifications=pending_notifications,
            open_delivery_tasks=open_deliveries,
        )

    @staticmethod
    async def get_platform_stats() -> PlatformStatsResponse:
        hospitals = await Hospital.find_all().to_list()
        users = await User.find_all().to_list()

        users_by_role = {}
        for user in users:
            users_by_role[user.role.value] = users_by_role.get(user.role.value, 0) + 1

        return PlatformStatsResponse(
            total_hospitals=len(hospitals),
            active_hospitals=sum(1 for h in hospitals if h.status == HospitalStatus.ACTIVE),
            users_by_role=users_by_role,
        )
