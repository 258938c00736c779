"""
Patient Service - Business logic for patient profile management.
"""
from typing import List, Optional, Tuple
import logging
from sqlalchemy.orm import Session

from ..core.cloudinary import delete_file
from ..exceptions import ResourceNotFoundException
from .models import Patient
from .schemas import PatientUpdate

# Set up logging
logger = logging.getLogger(__name__)


def get_patients(db: Session) -> Tuple[List[Patient], int]:
    """
    List active patients, newest first.

    Returns:
        Tuple of (patients, total)
    """
    patients = (
        db.query(Patient)
        .filter(Patient.active.is_(True))
        .order_by(Patient.created_at.desc())
        .all()
    )
    return patients, len(patients)


def get_patient(db: Session, patient_id: str) -> Patient:
    """
    Get a patient by ID.

    Raises:
        ResourceNotFoundException: If patient not found
    """
    patient = db.query(Patient).filter(Patient.id == patient_id).first()
    if not patient:
        raise ResourceNotFoundException("Paciente no encontrado")
    return patient


def update_patient(
    db: Session,
    patient_id: str,
    update_data: PatientUpdate,
    profile_image_url: Optional[str] = None,
) -> Patient:
    """
    Update a patient profile.

    Args:
        db: Database session
        patient_id: ID of the patient
        update_data: Validated fields to change
        profile_image_url: URL of a newly uploaded photo; the previous
            photo is removed from storage

    Returns:
        Patient: Updated patient

    Raises:
        ResourceNotFoundException: If patient not found
    """
    patient = get_patient(db, patient_id)

    for field, value in update_data.model_dump(exclude_unset=True).items():
        setattr(patient, field, value)

    previous_image = None
    if profile_image_url:
        previous_image = patient.profile_image_url
        patient.profile_image_url = profile_image_url

    try:
        db.commit()
        db.refresh(patient)
    except Exception:
        db.rollback()
        raise

    if previous_image:
        delete_file(previous_image)
    logger.info(f"Patient profile {patient_id} updated")
    return patient


def deactivate_patient(db: Session, patient_id: str) -> Patient:
    """
    Soft-delete a patient account.

    Raises:
        ResourceNotFoundException: If patient not found
    """
    patient = get_patient(db, patient_id)
    patient.active = False
    try:
        db.commit()
        db.refresh(patient)
    except Exception:
        db.rollback()
        raise
    logger.info(f"Patient {patient_id} deactivated")
    return patient
