"""MongoDB database connection manager."""

from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from typing import Optional

from carelink.config import settings
from carelink.core.logging import logger
from carelink.features.auth.models import User
from carelink.features.hospitals.models import Hospital
from carelink.features.patients.models import Admission
from carelink.features.appointments.models import Appointment
from carelink.features.billing.models import Bill
from carelink.features.prescriptions.models import Prescription
from carelink.features.pharmacy.models import PharmacyNotification
from carelink.features.deliveries.models import DeliveryTask, DeliveryEarning
from carelink.features.nurses.models import NurseRequest, NurseNotification
from carelink.features.emergency_slots.models import EmergencySlot
from carelink.features.medical_records.models import MedicalRecord
from carelink.features.workflow.models import WorkflowIntent


DOCUMENT_MODELS = [
    User,
    Hospital,
    Admission,
    Appointment,
    Bill,
    Prescription,
    PharmacyNotification,
    DeliveryTask,
    DeliveryEarning,
    NurseRequest,
    NurseNotification,
    EmergencySlot,
    MedicalRecord,
    WorkflowIntent,
]


class Database:
    """MongoDB database connection manager."""
    
    client: Optional[AsyncIOMotorClient] = None
    
    @classmethod
    async def connect_db(cls):
        """Connect to MongoDB and initialize Beanie."""
        cls.client = AsyncIOMotorClient(settings.MONGODB_URL)
        
        await init_beanie(
            database=cls.client[settings.DATABASE_NAME],
            document_models=DOCUMENT_MODELS,
        )
        
        logger.info(f"Connected to MongoDB database: {settings.DATABASE_NAME}")
    
    @classmethod
    async def close_db(cls):
        """Close MongoDB connection."""
        if cls.client:
            cls.client.close()
            logger.info("Closed MongoDB connection")
