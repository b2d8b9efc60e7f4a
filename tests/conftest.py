"""Shared fixtures: an in-memory MongoDB and a small staffed hospital."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("EMAILS_ENABLED", "false")

import pytest_asyncio
from beanie import init_beanie
from mongomock_motor import AsyncMongoMockClient

from carelink.database import DOCUMENT_MODELS
from carelink.features.auth.models import Role
from carelink.features.auth.service import AuthService
from carelink.features.hospitals.models import Hospital


HOSPITAL_ID = "HOSP00000101"


@pytest_asyncio.fixture
async def db():
    client = AsyncMongoMockClient()
    database = client["carelink_test"]
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)
    yield database


async def make_user(role: Role, email: str, hospital_id=HOSPITAL_ID, **profile):
    profile.setdefault("first_name", email.split("@")[0].title())
    profile.setdefault("last_name", "Test")
    return await AuthService.create_user(
        email, "secret123", role, hospital_id=hospital_id, **profile
    )


@pytest_asyncio.fixture
async def hospital(db):
    hospital = Hospital(
        hospital_id=HOSPITAL_ID,
        name="St. Mary's General",
        departments=["General Medicine", "Cardiology", "Emergency Medicine"],
    )
    await hospital.insert()
    return hospital


@pytest_asyncio.fixture
async def admin(hospital):
    return await make_user(Role.HOSPITAL_ADMIN, "admin@stmarys.org")


@pytest_asyncio.fixture
async def doctor(hospital):
    return await make_user(
        Role.DOCTOR, "house@stmarys.org", first_name="Gregory", last_name="House",
        department="General Medicine",
    )


@pytest_asyncio.fixture
async def receptionist(hospital):
    return await make_user(Role.RECEPTIONIST, "desk@stmarys.org")


@pytest_asyncio.fixture
async def pharmacist(hospital):
    return await make_user(Role.PHARMACY, "pharmacy@stmarys.org")


@pytest_asyncio.fixture
async def nurses(hospital):
    return [
        await make_user(Role.NURSE, "nurse.joy@stmarys.org"),
        await make_user(Role.NURSE, "nurse.ratched@stmarys.org"),
    ]


@pytest_asyncio.fixture
async def courier(db):
    return await make_user(Role.DELIVERY_PARTNER, "rider@couriers.com", hospital_id=None)


@pytest_asyncio.fixture
async def patient(hospital):
    return await make_user(
        Role.PATIENT, "jane.doe@mail.com", first_name="Jane", last_name="Doe",
        patient_id="PAT000123",
    )
