"""Request validation that happens before anything is written."""

from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from carelink.database import DOCUMENT_MODELS
from carelink.features.appointments.schemas import ScheduleAppointmentRequest
from carelink.features.auth.schemas import PublicPatientRegisterRequest, StaffRegisterRequest
from carelink.features.dashboard.schemas import HospitalStatsResponse
from carelink.features.hospitals.models import Hospital
from carelink.features.prescriptions.schemas import CreatePrescriptionRequest, MedicationInput


def appointment_request(days_ahead: int, **overrides):
    data = {
        "patient_id": "PAT000123",
        "doctor_id": "DOC00000101",
        "appointment_date": date.today() + timedelta(days=days_ahead),
        "appointment_time": "10:30",
    }
    data.update(overrides)
    return ScheduleAppointmentRequest(**data)


def test_appointment_must_be_after_tomorrow():
    with pytest.raises(ValidationError):
        appointment_request(0)
    with pytest.raises(ValidationError):
        appointment_request(1)
    assert appointment_request(2).type.value == "Consultation"


def test_appointment_time_format_and_type():
    with pytest.raises(ValidationError):
        appointment_request(3, appointment_time="25:00")
    with pytest.raises(ValidationError):
        appointment_request(3, type="Telehealth")
    assert appointment_request(3, type="Follow-up").type.value == "Follow-up"


def test_quantity_forms_are_normalised():
    assert MedicationInput(name="Amoxicillin 500mg", quantity="14 capsules").quantity.count == 14
    assert MedicationInput(name="Amoxicillin 500mg", quantity=28).quantity.unit == "unit"
    line = MedicationInput(name="Salbutamol Inhaler", quantity={"count": 2, "unit": "inhalers"})
    assert str(line.quantity) == "2 inhalers"


def test_zero_quantity_is_rejected():
    with pytest.raises(ValidationError):
        MedicationInput(name="Aspirin 75mg", quantity="0 tablets")


def test_prescription_needs_a_medication():
    with pytest.raises(ValidationError):
        CreatePrescriptionRequest(patient_id="PAT000123", medications=[])


def test_password_rules():
    base = {
        "email": "jane@mail.com",
        "first_name": "Jane",
        "last_name": "Doe",
        "hospital_id": "HOSP00000101",
    }
    with pytest.raises(ValidationError):
        PublicPatientRegisterRequest(**base, password="abc", confirm_password="abc")
    with pytest.raises(ValidationError):
        PublicPatientRegisterRequest(**base, password="secret123", confirm_password="secret124")
    assert PublicPatientRegisterRequest(**base, password="secret123", confirm_password="secret123")


def test_staff_registration_rejects_non_staff_roles():
    with pytest.raises(ValidationError):
        StaffRegisterRequest(
            email="x@stmarys.org", first_name="X", last_name="Y", role="patient",
            password="secret123", confirm_password="secret123",
        )


@pytest.mark.parametrize("model", DOCUMENT_MODELS + [HospitalStatsResponse], ids=lambda m: m.__name__)
def test_models_use_config_dict(model):
    assert "Config" not in vars(model)


def test_schema_examples_are_published():
    assert HospitalStatsResponse.model_json_schema()["example"]["pending_bills"] == 9
    assert Hospital.model_config["json_schema_extra"]["example"]["status"] == "active"
