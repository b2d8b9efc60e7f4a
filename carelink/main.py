from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from carelink.config import settings
from carelink.database import Database
from carelink.features.auth.router import router as auth_router
from carelink.features.hospitals.router import router as hospitals_router
from carelink.features.patients.router import router as patients_router
from carelink.features.appointments.router import router as appointments_router
from carelink.features.prescriptions.router import router as prescriptions_router
from carelink.features.billing.router import router as billing_router
from carelink.features.pharmacy.router import router as pharmacy_router
from carelink.features.nurses.router import router as nurses_router
from carelink.features.deliveries.router import router as deliveries_router
from carelink.features.emergency_slots.router import router as emergency_slots_router
from carelink.features.medical_records.router import router as medical_records_router
from carelink.features.dashboard.router import router as dashboard_router
from carelink.features.workflow.service import WorkflowService
from carelink.core.realtime import sio, socket_app, RealtimeHub
from carelink.core.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI application."""
    # Startup
    logger.info("Starting CareLink HMS API...")
    await Database.connect_db()
    
    # Socket.IO reference for live document updates
    RealtimeHub.set_socketio(sio)
    
    # Undo cascades interrupted by a previous crash
    reconciled = await WorkflowService.reconcile_stale_intents()
    if reconciled:
        logger.warning(f"Rolled back {reconciled} interrupted workflow(s)")
    
    logger.info("Application started successfully")
    
    yield
    
    # Shutdown
    logger.info("Shutting down...")
    await Database.close_db()
    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="CareLink Hospital Management API",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth_router, prefix=settings.API_V1_PREFIX)
app.include_router(hospitals_router, prefix=settings.API_V1_PREFIX)
app.include_router(patients_router, prefix=settings.API_V1_PREFIX)
app.include_router(appointments_router, prefix=settings.API_V1_PREFIX)
app.include_router(prescriptions_router, prefix=settings.API_V1_PREFIX)
app.include_router(billing_router, prefix=settings.API_V1_PREFIX)
app.include_router(pharmacy_router, prefix=settings.API_V1_PREFIX)
app.include_router(nurses_router, prefix=settings.API_V1_PREFIX)
app.include_router(deliveries_router, prefix=settings.API_V1_PREFIX)
app.include_router(emergency_slots_router, prefix=settings.API_V1_PREFIX)
app.include_router(medical_records_router, prefix=settings.API_V1_PREFIX)
app.include_router(dashboard_router, prefix=settings.API_V1_PREFIX)

# Mount Socket.IO application
app.mount("/socket.io", socket_app)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to CareLink HMS API",
        "version": "1.0.0",
        "docs": "/docs",
        "socket.io": "/socket.io",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
    }
