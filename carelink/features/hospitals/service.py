# Hospital Directory - Service

from typing import List
from carelink.features.auth.models import User, Role
from carelink.features.auth.service import AuthService
from carelink.features.hospitals.models import Hospital, HospitalStatus
from carelink.features.hospitals.schemas import (
    HospitalRegisterRequest,
    UpdateHospitalRequest,
    HospitalResponse,
)
from carelink.features.workflow import WorkflowCascade
from carelink.shared.exceptions import NotFoundException, ForbiddenException
from carelink.shared.ids import generate_id
from carelink.core.logging import logger


class HospitalService:
    """Hospital directory operations."""

    @staticmethod
    def to_response(hospital: Hospital) -> HospitalResponse:
        return HospitalResponse(
            hospital_id=hospital.hospital_id,
            name=hospital.name,
            hospital_type=hospital.hospital_type,
            address=hospital.address,
            phone=hospital.phone,
            email=hospital.email,
            departments=hospital.departments,
            services=hospital.services,
            bed_capacity=hospital.bed_capacity,
            status=hospital.status,
            admin_uid=hospital.admin_uid,
            created_at=hospital.created_at,
            updated_at=hospital.updated_at,
        )

    @staticmethod
    async def register_hospital(request: HospitalRegisterRequest) -> tuple[Hospital, User]:
        """
        Create a hospital and its first hospital admin.

        Both documents are written in one cascade, so a failure on the admin
        leaves no orphaned hospital behind.

        Returns:
            tuple: (hospital, admin)
        """
        hospital_id = generate_id("HOSP", 2)

        admin = await AuthService.build_user(
            request.admin_email,
            request.password,
            Role.HOSPITAL_ADMIN,
            hospital_id=hospital_id,
            first_name=request.admin_first_name,
            last_name=request.admin_last_name,
            phone_number=request.admin_phone_number,
        )

        hospital = Hospital(
            hospital_id=hospital_id,
            name=request.name,
            hospital_type=request.hospital_type,
            address=request.address,
            phone=request.phone,
            email=request.email,
            departments=request.departments,
            services=request.services,
            bed_capacity=request.bed_capacity,
            admin_uid=admin.uid,
        )

        async with WorkflowCascade("hospital_registration", hospital_id) as cascade:
            await cascade.insert(hospital)
            await cascade.insert(admin)

        logger.info(f"Registered hospital {hospital_id} ({hospital.name}) with admin {admin.staff_id}")
        return hospital, admin

    @staticmethod
    async def get_hospital(hospital_id: str) -> Hospital:
        hospital = await Hospital.find_one(Hospital.hospital_id == hospital_id)
        if not hospital:
            raise NotFoundException("Hospital not found")
        return hospital

    @staticmethod
    async def update_hospital_settings(actor: User, update_data: UpdateHospitalRequest) -> Hospital:
        """Apply the provided fields to the actor's own hospital."""
        if actor.role != Role.HOSPITAL_ADMIN or not actor.hospital_id:
            raise ForbiddenException("Only a hospital admin can change hospital settings")

        hospital = await HospitalService.get_hospital(actor.hospital_id)

        for field, value in update_data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(hospital, field, value)

        hospital.update_timestamp()
        await hospital.save()

        logger.info(f"Hospital {hospital.hospital_id} settings updated by {actor.staff_id}")
        return hospital

    @staticmethod
    async def list_hospitals() -> List[Hospital]:
        return await Hospital.find_all().sort(Hospital.name).to_list()

    @staticmethod
    async def set_hospital_status(hospital_id: str, status: HospitalStatus) -> Hospital:
        hospital = await HospitalService.get_hospital(hospital_id)
        hospital.status = status
        hospital.update_timestamp()
        await hospital.save()

        logger.info(f"Hospital {hospital_id} is now {status.value}")
        return hospital
