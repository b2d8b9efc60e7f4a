# Medical Records - Service

from typing import List, Optional
from carelink.features.auth.models import User, Role
from carelink.features.medical_records.models import MedicalRecord
from carelink.features.medical_records.schemas import CreateMedicalRecordRequest, MedicalRecordResponse
from carelink.features.patients.service import PatientService
from carelink.core.realtime import RealtimeHub, hospital_room
from carelink.shared.exceptions import NotFoundException, ForbiddenException
from carelink.shared.ids import generate_id
from carelink.core.logging import logger


AUTHOR_ROLES = {Role.DOCTOR, Role.NURSE}
READER_ROLES = {Role.DOCTOR, Role.NURSE, Role.RECEPTIONIST, Role.HOSPITAL_ADMIN, Role.PATIENT}


class MedicalRecordService:
    """Patient charts."""

    @staticmethod
    def to_response(record: MedicalRecord) -> MedicalRecordResponse:
        return MedicalRecordResponse(
            record_id=record.record_id,
            hospital_id=record.hospital_id,
            patient_id=record.patient_id,
            patient_name=record.patient_name,
            record_type=record.record_type,
            diagnosis=record.diagnosis,
            symptoms=record.symptoms,
            treatment=record.treatment,
            notes=record.notes,
            vitals=record.vitals,
            follow_up=record.follow_up,
            doctor_id=record.doctor_id,
            doctor_name=record.doctor_name,
            created_at=record.created_at,
        )

    @staticmethod
    async def create_medical_record(actor: User, request: CreateMedicalRecordRequest) -> MedicalRecord:
        """Write a record against a patient of the author's hospital."""
        if actor.role not in AUTHOR_ROLES:
            raise ForbiddenException("Only doctors and nurses can write medical records")

        patient = await PatientService.get_patient(request.patient_id, actor.hospital_id)

        record = MedicalRecord(
            record_id=generate_id("MR", 2),
            hospital_id=actor.hospital_id,
            patient_id=patient.patient_id,
            patient_name=patient.full_name,
            record_type=request.record_type,
            diagnosis=request.diagnosis,
            symptoms=request.symptoms,
            treatment=request.treatment,
            notes=request.notes,
            vitals=request.vitals,
            follow_up=request.follow_up,
            doctor_id=actor.staff_id,
            doctor_name=f"Dr. {actor.full_name}" if actor.role == Role.DOCTOR else actor.full_name,
        )
        await record.insert()

        logger.info(f"Medical record {record.record_id} for {patient.patient_id} by {actor.staff_id}")

        await RealtimeHub.publish(
            "medical_records",
            record.model_dump(mode="json", exclude={"id", "revision_id"}),
            hospital_room(record.hospital_id),
        )
        return record

    @staticmethod
    async def list_medical_records(actor: User, patient_id: Optional[str] = None) -> List[MedicalRecord]:
        """
        Records visible to ``actor``, newest first.

        Patients only ever see their own chart. Doctors without a patient
        filter see the records they wrote; other staff see the whole
        hospital's records.
        """
        if actor.role not in READER_ROLES:
            raise ForbiddenException("You are not allowed to view medical records")

        query = MedicalRecord.find(MedicalRecord.hospital_id == actor.hospital_id)

        if actor.role == Role.PATIENT:
            if patient_id and patient_id != actor.patient_id:
                raise ForbiddenException("You can only view your own medical records")
            query = query.find(MedicalRecord.patient_id == actor.patient_id)
        elif patient_id:
            query = query.find(MedicalRecord.patient_id == patient_id)
        elif actor.role == Role.DOCTOR:
            query = query.find(MedicalRecord.doctor_id == actor.staff_id)

        return await query.sort(-MedicalRecord.created_at).to_list()

    @staticmethod
    async def get_medical_record(actor: User, record_id: str) -> MedicalRecord:
        record = await MedicalRecord.find_one(
            MedicalRecord.record_id == record_id,
            MedicalRecord.hospital_id == actor.hospital_id,
        )
        if not record:
            raise NotFoundException("Medical record not found")

        if actor.role == Role.PATIENT and record.patient_id != actor.patient_id:
            raise NotFoundException("Medical record not found")
        if actor.role not in READER_ROLES:
            raise ForbiddenException("You are not allowed to view medical records")
        return record
