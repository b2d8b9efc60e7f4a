# Patients - Service

from typing import List, Optional
from datetime import datetime
from carelink.data.wards import WARD_TYPES, ADMISSION_DELIVERY_TYPES, bed_prefix
from carelink.features.auth.models import User, Role, DeliveryType
from carelink.features.patients.models import Admission, AdmissionStatus
from carelink.features.patients.schemas import AdmitPatientRequest, AdmissionResponse, WardOccupancy
from carelink.features.workflow import WorkflowCascade
from carelink.shared.exceptions import NotFoundException, BadRequestException
from carelink.shared.ids import generate_id
from carelink.core.logging import logger


class PatientService:
    """Patient lookup, admissions and ward beds."""

    @staticmethod
    def admission_to_response(admission: Admission) -> AdmissionResponse:
        return AdmissionResponse(
            admission_id=admission.admission_id,
            hospital_id=admission.hospital_id,
            patient_id=admission.patient_id,
            patient_name=admission.patient_name,
            admission_type=admission.admission_type,
            department=admission.department,
            ward_type=admission.ward_type,
            bed_number=admission.bed_number,
            admission_reason=admission.admission_reason,
            severity=admission.severity,
            admitting_doctor=admission.admitting_doctor,
            medicine_delivery_type=admission.medicine_delivery_type,
            status=admission.status,
            admitted_at=admission.admitted_at,
            discharged_at=admission.discharged_at,
        )

    @staticmethod
    async def list_patients(hospital_id: str, search: Optional[str] = None) -> List[User]:
        """Patients of a hospital, optionally filtered by name or patient id."""
        patients = await User.find(
            User.hospital_id == hospital_id,
            User.role == Role.PATIENT,
        ).sort(User.last_name).to_list()

        if search:
            term = search.lower().strip()
            patients = [
                p for p in patients
                if term in p.full_name.lower() or term in (p.patient_id or "").lower()
            ]
        return patients

    @staticmethod
    async def get_patient(patient_id: str, hospital_id: Optional[str] = None) -> User:
        """Get a patient by their patient_id."""
        conditions = [User.patient_id == patient_id, User.role == Role.PATIENT]
        if hospital_id:
            conditions.append(User.hospital_id == hospital_id)

        patient = await User.find_one(*conditions)
        if not patient:
            raise NotFoundException(f"Patient {patient_id} not found")
        return patient

    @staticmethod
    async def occupied_beds(hospital_id: str, ward_type: str) -> set:
        admissions = await Admission.find(
            Admission.hospital_id == hospital_id,
            Admission.ward_type == ward_type,
            Admission.status == AdmissionStatus.ACTIVE,
        ).to_list()
        return {a.bed_number for a in admissions}

    @staticmethod
    async def allocate_bed(hospital_id: str, ward_type: str) -> str:
        """First free bed in the ward, e.g. ICU-004."""
        ward = WARD_TYPES[ward_type]
        taken = await PatientService.occupied_beds(hospital_id, ward_type)
        prefix = bed_prefix(ward_type)

        for number in range(1, ward["capacity"] + 1):
            bed_number = f"{prefix}-{number:03d}"
            if bed_number not in taken:
                return bed_number

        raise BadRequestException(f"No beds available in {ward['label']}")

    @staticmethod
    async def ward_occupancy(hospital_id: str) -> List[WardOccupancy]:
        occupancy = []
        for ward_type, ward in WARD_TYPES.items():
            occupied = len(await PatientService.occupied_beds(hospital_id, ward_type))
            occupancy.append(WardOccupancy(
                ward_type=ward_type,
                label=ward["label"],
                capacity=ward["capacity"],
                occupied=occupied,
                available=ward["capacity"] - occupied,
            ))
        return occupancy

    @staticmethod
    async def admit_patient(
        actor: User,
        request: AdmitPatientRequest,
        now: Optional[datetime] = None,
    ) -> Admission:
        """
        Admit a patient to the first free bed of a ward.

        The patient's snapshot (admitted flag, bed, ward and medicine delivery
        type) is updated together with the admission record.
        """
        now = now or datetime.utcnow()
        patient = await PatientService.get_patient(request.patient_id, actor.hospital_id)
        if patient.is_admitted:
            raise BadRequestException(
                f"Patient {patient.patient_id} is already admitted to bed {patient.current_bed_number}"
            )

        bed_number = await PatientService.allocate_bed(actor.hospital_id, request.ward_type)
        delivery_type = DeliveryType(ADMISSION_DELIVERY_TYPES[request.admission_type.value])

        admission = Admission(
            admission_id=generate_id("ADM", 3),
            hospital_id=actor.hospital_id,
            patient_id=patient.patient_id,
            patient_name=patient.full_name,
            admission_type=request.admission_type,
            department=request.department,
            ward_type=request.ward_type,
            bed_number=bed_number,
            admission_reason=request.admission_reason,
            severity=request.severity,
            admitting_doctor=request.admitting_doctor,
            notes=request.notes,
            medicine_delivery_type=delivery_type,
            admitted_at=now,
            created_by=actor.uid,
        )

        async with WorkflowCascade("admission", actor.hospital_id) as cascade:
            await cascade.insert(admission)
            await cascade.update(
                patient,
                is_admitted=True,
                current_admission_id=admission.admission_id,
                current_bed_number=bed_number,
                current_ward=request.ward_type,
                medicine_delivery_type=delivery_type,
            )

        logger.info(
            f"Admitted {patient.patient_id} to {bed_number} "
            f"({request.admission_type.value}, delivery {delivery_type.value})"
        )
        return admission

    @staticmethod
    async def discharge_patient(
        actor: User,
        patient_id: str,
        now: Optional[datetime] = None,
    ) -> Admission:
        """Close the active admission and reset the patient's snapshot."""
        patient = await PatientService.get_patient(patient_id, actor.hospital_id)
        if not patient.is_admitted:
            raise BadRequestException(f"Patient {patient_id} is not admitted")

        admission = await Admission.find_one(
            Admission.patient_id == patient_id,
            Admission.hospital_id == actor.hospital_id,
            Admission.status == AdmissionStatus.ACTIVE,
        )
        if not admission:
            raise NotFoundException(f"No active admission for patient {patient_id}")

        async with WorkflowCascade("discharge", actor.hospital_id) as cascade:
            await cascade.update(
                admission,
                status=AdmissionStatus.DISCHARGED,
                discharged_at=now or datetime.utcnow(),
            )
            await cascade.update(
                patient,
                is_admitted=False,
                current_admission_id=None,
                current_bed_number=None,
                current_ward=None,
                medicine_delivery_type=DeliveryType.PHARMACY,
            )

        logger.info(f"Discharged {patient_id} from {admission.bed_number}")
        return admission

    @staticmethod
    async def list_admissions(hospital_id: str, active_only: bool = True) -> List[Admission]:
        query = Admission.find(Admission.hospital_id == hospital_id)
        if active_only:
            query = query.find(Admission.status == AdmissionStatus.ACTIVE)
        return await query.sort(-Admission.admitted_at).to_list()
