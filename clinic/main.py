"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

import logging

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from .config import settings
from .database import Base, SessionLocal, engine, get_db
from .exceptions import register_exception_handlers
from .core.bootstrap import bootstrap_admin_if_needed
from .core.middleware import setup_middlewares
from .auth.router import router as auth_router
from .patients.router import router as patients_router
from .doctors.router import router as doctors_router
from .appointments.router import router as appointments_router
from .departments.router import router as departments_router
from .medical_records.router import router as medical_records_router
from .reviews.router import router as reviews_router

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create database tables if they don't exist
Base.metadata.create_all(bind=engine)

logger.info(f"Starting {settings.app_name} ({settings.environment})")
try:
    with SessionLocal() as db:
        bootstrap_admin_if_needed(db, settings)
except Exception as e:
    logger.error(f"Bootstrap process failed: {str(e)}")

# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="API REST para la gestión de la Clínica San Rafael",
    version=settings.app_version,
)

# Register exception handlers
register_exception_handlers(app)

# Setup custom middleware
setup_middlewares(app, settings)

# CORS is added last so it wraps every other middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(patients_router, prefix="/api")
app.include_router(doctors_router, prefix="/api")
app.include_router(appointments_router, prefix="/api")
app.include_router(departments_router, prefix="/api")
app.include_router(medical_records_router, prefix="/api")
app.include_router(reviews_router, prefix="/api")


@app.get("/")
def root():
    """
    Root endpoint with API information.

    Returns:
        dict: Name, version and the available endpoint groups
    """
    return {
        "success": True,
        "message": settings.app_name,
        "version": settings.app_version,
        "endpoints": {
            "auth": "/api/registrarPacientes, /api/iniciarSesion, /api/cerrarSesion, /api/perfil",
            "recuperacion": "/api/recuperarContrasena",
            "pacientes": "/api/pacientes",
            "doctores": "/api/doctores",
            "citas": "/api/citas",
            "departamentos": "/api/departamentos",
            "historias": "/api/historias",
            "resenas": "/api/resenas",
        },
    }


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint for monitoring.

    Returns:
        dict: Health status information
    """
    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except Exception as e:
        logger.error(f"Health check database error: {str(e)}")
        database = "unavailable"
    return {"status": "healthy" if database == "connected" else "degraded", "database": database}
