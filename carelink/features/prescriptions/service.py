# Prescriptions - Service

from typing import List, Optional
from datetime import datetime
from carelink.data.fees import get_medication_cost
from carelink.data.wards import WARD_TYPES
from carelink.features.auth.models import User, Role, DeliveryType
from carelink.features.billing.models import Bill, BillSource, MedicationCharge
from carelink.features.billing.service import BillingService
from carelink.features.deliveries.models import DeliveryTask
from carelink.features.patients.service import PatientService
from carelink.features.pharmacy.models import PharmacyNotification
from carelink.features.prescriptions.models import Prescription, MedicationLine
from carelink.features.prescriptions.schemas import CreatePrescriptionRequest, PrescriptionResponse
from carelink.features.workflow import WorkflowCascade
from carelink.core.realtime import RealtimeHub, hospital_room
from carelink.shared.exceptions import NotFoundException, ForbiddenException
from carelink.shared.ids import generate_id
from carelink.core.logging import logger


class PrescriptionService:
    """Prescribing, with billing and pharmacy hand-off."""

    @staticmethod
    def to_response(prescription: Prescription) -> PrescriptionResponse:
        return PrescriptionResponse(
            prescription_id=prescription.prescription_id,
            hospital_id=prescription.hospital_id,
            patient_id=prescription.patient_id,
            patient_name=prescription.patient_name,
            doctor_id=prescription.doctor_id,
            doctor_name=prescription.doctor_name,
            medications=prescription.medications,
            instructions=prescription.instructions,
            is_admitted_patient=prescription.is_admitted_patient,
            is_emergency=prescription.is_emergency,
            medicine_delivery_type=prescription.medicine_delivery_type,
            bed_number=prescription.bed_number,
            location=prescription.location,
            bill_id=prescription.bill_id,
            created_at=prescription.created_at,
        )

    @staticmethod
    def ward_location(ward_type: Optional[str]) -> str:
        if not ward_type:
            return ""
        ward = WARD_TYPES.get(ward_type)
        return ward["label"] if ward else ward_type

    @staticmethod
    async def create_prescription_with_billing(
        actor: User,
        request: CreatePrescriptionRequest,
        now: Optional[datetime] = None,
    ) -> tuple[Prescription, Bill, PharmacyNotification, Optional[DeliveryTask]]:
        """
        Write a prescription, its medication bill and the pharmacy notification.

        The patient record is read at write time. Admitted patients with
        bedside delivery get an emergency notification and a delivery task
        to their bed; everyone else collects from the pharmacy.

        Returns:
            tuple: (prescription, bill, notification, delivery_task or None)
        """
        if actor.role != Role.DOCTOR:
            raise ForbiddenException("Only doctors can write prescriptions")

        now = now or datetime.utcnow()
        hospital_id = actor.hospital_id
        patient = await PatientService.get_patient(request.patient_id, hospital_id)

        bedside = (
            patient.is_admitted
            and patient.medicine_delivery_type == DeliveryType.BEDSIDE
        )
        bed_number = patient.current_bed_number if bedside else None
        location = PrescriptionService.ward_location(patient.current_ward) if bedside else None

        medications = [
            MedicationLine(
                name=med.name,
                dosage=med.dosage,
                quantity=med.quantity,
                duration=med.duration,
                unit_cost=get_medication_cost(med.name),
                prescribed_at=now,
            )
            for med in request.medications
        ]

        prescription_id = generate_id("RX", 3)
        bill = BillingService.build_bill(
            hospital_id=hospital_id,
            patient_id=patient.patient_id,
            patient_name=patient.full_name,
            source_type=BillSource.PRESCRIPTION,
            source_id=prescription_id,
            medications=[
                MedicationCharge(
                    name=med.name,
                    quantity=med.quantity.count,
                    unit=med.quantity.unit,
                    cost=med.unit_cost,
                )
                for med in medications
            ],
        )

        prescription = Prescription(
            prescription_id=prescription_id,
            hospital_id=hospital_id,
            patient_id=patient.patient_id,
            patient_name=patient.full_name,
            doctor_id=actor.staff_id,
            doctor_name=f"Dr. {actor.full_name}",
            medications=medications,
            instructions=request.instructions,
            is_admitted_patient=patient.is_admitted,
            is_emergency=bedside,
            medicine_delivery_type=DeliveryType.BEDSIDE if bedside else DeliveryType.PHARMACY,
            bed_number=bed_number,
            location=location,
            bill_id=bill.bill_id,
        )

        summary = [
            {"name": med.name, "dosage": med.dosage, "quantity": str(med.quantity)}
            for med in medications
        ]

        notification = PharmacyNotification(
            notification_id=generate_id("PN", 3),
            hospital_id=hospital_id,
            prescription_id=prescription_id,
            patient_id=patient.patient_id,
            patient_name=patient.full_name,
            is_emergency=bedside,
            priority="high" if bedside else "normal",
            bed_number=bed_number,
            location=location,
            medications=summary,
        )

        delivery_task = None
        if bedside:
            delivery_task = DeliveryTask(
                task_id=generate_id("DT", 3),
                hospital_id=hospital_id,
                prescription_id=prescription_id,
                patient_id=patient.patient_id,
                patient_name=patient.full_name,
                bed_number=bed_number or "",
                location=location or "",
                medications=summary,
                delivery_instructions=f"Emergency delivery to {location}, Bed {bed_number}",
                assigned_at=now,
            )

        async with WorkflowCascade("prescription_billing", hospital_id) as cascade:
            await cascade.insert(prescription)
            await cascade.insert(bill)
            await cascade.insert(notification)
            if delivery_task is not None:
                await cascade.insert(delivery_task)

        logger.info(
            f"Prescription {prescription_id} for {patient.patient_id}: "
            f"{len(medications)} medication(s), bill {bill.bill_id} total {bill.total_amount:.2f}, "
            f"{'bedside delivery to ' + str(bed_number) if bedside else 'pharmacy pickup'}"
        )

        room = hospital_room(hospital_id)
        await RealtimeHub.publish(
            "pharmacy_notifications",
            notification.model_dump(mode="json", exclude={"id", "revision_id"}),
            room,
        )
        if delivery_task is not None:
            await RealtimeHub.publish(
                "delivery_tasks",
                delivery_task.model_dump(mode="json", exclude={"id", "revision_id"}),
                room,
            )

        return prescription, bill, notification, delivery_task

    @staticmethod
    async def get_prescription(prescription_id: str, actor: User) -> Prescription:
        prescription = await Prescription.find_one(Prescription.prescription_id == prescription_id)
        if not prescription or prescription.hospital_id != actor.hospital_id:
            raise NotFoundException("Prescription not found")
        if actor.role == Role.PATIENT and prescription.patient_id != actor.patient_id:
            raise NotFoundException("Prescription not found")
        return prescription

    @staticmethod
    async def list_prescriptions(
        actor: User,
        patient_id: Optional[str] = None,
    ) -> List[Prescription]:
        """Prescriptions in the actor's scope, newest first."""
        if actor.role == Role.PATIENT:
            query = Prescription.find(Prescription.patient_id == actor.patient_id)
        elif actor.role == Role.DOCTOR:
            query = Prescription.find(
                Prescription.hospital_id == actor.hospital_id,
                Prescription.doctor_id == actor.staff_id,
            )
        else:
            query = Prescription.find(Prescription.hospital_id == actor.hospital_id)

        if patient_id and actor.role != Role.PATIENT:
            query = query.find(Prescription.patient_id == patient_id)

        return await query.sort(-Prescription.created_at).to_list()
