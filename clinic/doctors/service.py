"""
Doctor Service - Business logic for doctor account management.

This module provides service functions for provisioning, listing, updating
and deactivating doctor accounts.
"""
from typing import List, Optional, Tuple
import logging
from sqlalchemy.orm import Session

from ..auth.accounts import email_in_use
from ..auth.exceptions import EmailAlreadyExistsException
from ..core.cloudinary import delete_file
from ..exceptions import ResourceNotFoundException
from .models import Doctor
from .schemas import DoctorCreate, DoctorUpdate

# Set up logging
logger = logging.getLogger(__name__)


def get_doctors(db: Session) -> Tuple[List[Doctor], int]:
    """
    List active doctors, newest first.

    Returns:
        Tuple of (doctors, total)
    """
    doctors = (
        db.query(Doctor)
        .filter(Doctor.active.is_(True))
        .order_by(Doctor.created_at.desc())
        .all()
    )
    return doctors, len(doctors)


def get_doctor(db: Session, doctor_id: str) -> Doctor:
    """
    Get a doctor by ID.

    Args:
        db: Database session
        doctor_id: ID of the doctor

    Returns:
        Doctor: Doctor account

    Raises:
        ResourceNotFoundException: If doctor not found
    """
    doctor = db.query(Doctor).filter(Doctor.id == doctor_id).first()
    if not doctor:
        raise ResourceNotFoundException("Doctor no encontrado")
    return doctor


def create_doctor(db: Session, doctor_data: DoctorCreate, profile_image_url: Optional[str] = None) -> Doctor:
    """
    Provision a doctor (or admin) account.

    Args:
        db: Database session
        doctor_data: Validated account data
        profile_image_url: Uploaded photo URL, if any

    Returns:
        Doctor: The new account

    Raises:
        EmailAlreadyExistsException: If the email belongs to any account
    """
    if email_in_use(db, doctor_data.email):
        raise EmailAlreadyExistsException()

    doctor = Doctor(
        name=doctor_data.name,
        last_name=doctor_data.last_name,
        specialty=doctor_data.specialty,
        biography=doctor_data.biography,
        email=doctor_data.email,
        password=doctor_data.password,
        role=doctor_data.role,
        profile_image_url=profile_image_url,
    )
    db.add(doctor)
    try:
        db.commit()
        db.refresh(doctor)
    except Exception:
        db.rollback()
        raise
    logger.info(f"Doctor {doctor.id} ({doctor.email}) created with role {doctor.role_value}")
    return doctor


def update_doctor(
    db: Session,
    doctor_id: str,
    doctor_data: DoctorUpdate,
    profile_image_url: Optional[str] = None,
) -> Doctor:
    """
    Update a doctor account.

    Raises:
        ResourceNotFoundException: If doctor not found
        EmailAlreadyExistsException: If the new email belongs to another account
    """
    doctor = get_doctor(db, doctor_id)
    update_data = doctor_data.model_dump(exclude_unset=True)

    if "email" in update_data and email_in_use(db, update_data["email"], exclude_id=doctor.id):
        raise EmailAlreadyExistsException()

    for field, value in update_data.items():
        setattr(doctor, field, value)

    previous_image = None
    if profile_image_url:
        previous_image = doctor.profile_image_url
        doctor.profile_image_url = profile_image_url

    try:
        db.commit()
        db.refresh(doctor)
    except Exception:
        db.rollback()
        raise

    if previous_image:
        delete_file(previous_image)
    logger.info(f"Doctor {doctor_id} updated")
    return doctor


def deactivate_doctor(db: Session, doctor_id: str) -> Doctor:
    """
    Soft-delete a doctor account.

    Raises:
        ResourceNotFoundException: If doctor not found
    """
    doctor = get_doctor(db, doctor_id)
    doctor.active = False
    try:
        db.commit()
        db.refresh(doctor)
    except Exception:
        db.rollback()
        raise
    logger.info(f"Doctor {doctor_id} deactivated")
    return doctor
