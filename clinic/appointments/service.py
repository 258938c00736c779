"""
Appointment Service - Business logic for appointment scheduling.
"""
from typing import List, Optional, Tuple
import logging
from sqlalchemy.orm import Session, joinedload

from ..doctors.service import get_doctor
from ..exceptions import ResourceNotFoundException
from ..patients.service import get_patient
from .models import Appointment, AppointmentStatus
from .schemas import AppointmentCreate, AppointmentUpdate

# Set up logging
logger = logging.getLogger(__name__)


def get_appointments(
    db: Session,
    status: Optional[AppointmentStatus] = None,
    patient_id: Optional[str] = None,
    doctor_id: Optional[str] = None,
) -> Tuple[List[Appointment], int]:
    """
    List appointments ordered by date, optionally filtered.

    Args:
        db: Database session
        status: Only appointments in this status
        patient_id: Only appointments of this patient
        doctor_id: Only appointments with this doctor

    Returns:
        Tuple of (appointments, total)
    """
    query = db.query(Appointment).options(joinedload(Appointment.patient), joinedload(Appointment.doctor))
    if status is not None:
        query = query.filter(Appointment.status == status)
    if patient_id:
        query = query.filter(Appointment.patient_id == patient_id)
    if doctor_id:
        query = query.filter(Appointment.doctor_id == doctor_id)
    appointments = query.order_by(Appointment.appointment_date.asc()).all()
    return appointments, len(appointments)


def get_appointment(db: Session, appointment_id: str) -> Appointment:
    """
    Get an appointment by ID.

    Raises:
        ResourceNotFoundException: If appointment not found
    """
    appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
    if not appointment:
        raise ResourceNotFoundException("Cita no encontrada")
    return appointment


def create_appointment(db: Session, appointment_data: AppointmentCreate) -> Appointment:
    """
    Schedule an appointment.

    Raises:
        ResourceNotFoundException: If the patient or the doctor does not exist
    """
    get_patient(db, appointment_data.patient_id)
    get_doctor(db, appointment_data.doctor_id)

    appointment = Appointment(**appointment_data.model_dump())
    db.add(appointment)
    try:
        db.commit()
        db.refresh(appointment)
    except Exception:
        db.rollback()
        raise
    logger.info(f"Appointment {appointment.id} scheduled for patient {appointment.patient_id} with doctor {appointment.doctor_id}")
    return appointment


def update_appointment(db: Session, appointment_id: str, appointment_data: AppointmentUpdate) -> Appointment:
    """
    Update an appointment.

    Raises:
        ResourceNotFoundException: If the appointment or a new participant does not exist
    """
    appointment = get_appointment(db, appointment_id)
    update_data = appointment_data.model_dump(exclude_unset=True)
    if update_data.get("patient_id"):
        get_patient(db, update_data["patient_id"])
    if update_data.get("doctor_id"):
        get_doctor(db, update_data["doctor_id"])

    for field, value in update_data.items():
        setattr(appointment, field, value)

    try:
        db.commit()
        db.refresh(appointment)
    except Exception:
        db.rollback()
        raise
    logger.info(f"Appointment {appointment_id} updated")
    return appointment


def delete_appointment(db: Session, appointment_id: str) -> None:
    """
    Delete an appointment.

    Raises:
        ResourceNotFoundException: If appointment not found
    """
    appointment = get_appointment(db, appointment_id)
    db.delete(appointment)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Appointment {appointment_id} deleted")
