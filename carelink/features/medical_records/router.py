# Medical Records - Router

from typing import List, Optional
from fastapi import APIRouter, Depends, status
from carelink.features.auth.dependencies import get_current_user
from carelink.features.auth.models import User
from carelink.features.medical_records.schemas import CreateMedicalRecordRequest, MedicalRecordResponse
from carelink.features.medical_records.service import MedicalRecordService

router = APIRouter(prefix="/medical-records", tags=["Medical Records"])


@router.post("", response_model=MedicalRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_medical_record(
    request: CreateMedicalRecordRequest,
    current_user: User = Depends(get_current_user),
):
    """
    Write a medical record for a patient.

    - **record_type**: Consultation, Follow-up, Emergency, Surgery or Therapy
    - **vitals**: blood pressure, heart rate, temperature, weight, height
    """
    record = await MedicalRecordService.create_medical_record(current_user, request)
    return MedicalRecordService.to_response(record)


@router.get("", response_model=List[MedicalRecordResponse])
async def list_medical_records(
    patient_id: Optional[str] = None,
    current_user: User = Depends(get_current_user),
):
    records = await MedicalRecordService.list_medical_records(current_user, patient_id)
    return [MedicalRecordService.to_response(r) for r in records]


@router.get("/{record_id}", response_model=MedicalRecordResponse)
async def get_medical_record(
    record_id: str,
    current_user: User = Depends(get_current_user),
):
    record = await MedicalRecordService.get_medical_record(current_user, record_id)
    return MedicalRecordService.to_response(record)
