# Prescriptions - Router

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from carelink.data.medicines import search_medicines, get_medicine_categories, get_medicines_by_category
from carelink.features.auth.dependencies import get_current_user, require_roles
from carelink.features.auth.models import User, Role
from carelink.features.billing.service import BillingService
from carelink.features.pharmacy.service import PharmacyService
from carelink.features.prescriptions.schemas import (
    CreatePrescriptionRequest,
    CreatedPrescriptionResponse,
    PrescriptionResponse,
    AdvanceMedicationRequest,
)
from carelink.features.prescriptions.service import PrescriptionService

router = APIRouter(prefix="/prescriptions", tags=["Prescriptions"])


@router.get("/medicines")
async def medicine_catalogue(
    search: Optional[str] = Query(None, description="Name or category"),
    category: Optional[str] = None,
    current_user: User = Depends(get_current_user),
):
    """Medicine catalogue for prescribers."""
    if search:
        medicines = search_medicines(search)
    elif category:
        medicines = get_medicines_by_category(category)
    else:
        medicines = search_medicines("")
    return {"categories": get_medicine_categories(), "medicines": medicines}


@router.post("", response_model=CreatedPrescriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_prescription(
    request: CreatePrescriptionRequest,
    current_user: User = Depends(require_roles(Role.DOCTOR)),
):
    """
    Write a prescription and raise its bill.

    - **quantity**: "14 capsules", a bare count, or {count, unit}
    - Admitted patients on bedside delivery get a delivery task to their bed
    """
    prescription, bill, notification, task = await PrescriptionService.create_prescription_with_billing(
        current_user, request
    )
    return CreatedPrescriptionResponse(
        prescription=PrescriptionService.to_response(prescription),
        bill=BillingService.to_response(bill),
        notification_id=notification.notification_id,
        delivery_task_id=task.task_id if task else None,
    )


@router.get("", response_model=List[PrescriptionResponse])
async def list_prescriptions(
    patient_id: Optional[str] = None,
    current_user: User = Depends(get_current_user),
):
    prescriptions = await PrescriptionService.list_prescriptions(current_user, patient_id)
    return [PrescriptionService.to_response(p) for p in prescriptions]


@router.get("/{prescription_id}", response_model=PrescriptionResponse)
async def get_prescription(prescription_id: str, current_user: User = Depends(get_current_user)):
    prescription = await PrescriptionService.get_prescription(prescription_id, current_user)
    return PrescriptionService.to_response(prescription)


@router.patch("/{prescription_id}/medications/{index}/status", response_model=PrescriptionResponse)
async def advance_medication_status(
    prescription_id: str,
    index: int,
    request: AdvanceMedicationRequest,
    current_user: User = Depends(require_roles(Role.PHARMACY, Role.HOSPITAL_ADMIN)),
):
    """
    Advance one medication: prescribed -> ready -> sold.

    Emergency prescriptions stop at ready.
    """
    prescription = await PharmacyService.advance_medication_status(
        current_user, prescription_id, index, request.status
    )
    return PrescriptionService.to_response(prescription)
