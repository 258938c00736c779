"""
Medical Record Service - Business logic for clinical histories.
"""
from typing import List, Optional, Tuple
import logging
from sqlalchemy.orm import Session, joinedload

from ..core.cloudinary import delete_file
from ..doctors.service import get_doctor
from ..exceptions import ResourceNotFoundException
from ..patients.service import get_patient
from .models import MedicalRecord
from .schemas import MedicalRecordCreate, MedicalRecordUpdate

# Set up logging
logger = logging.getLogger(__name__)


def get_medical_records(
    db: Session,
    patient_id: Optional[str] = None,
    doctor_id: Optional[str] = None,
) -> Tuple[List[MedicalRecord], int]:
    """
    List medical records, newest first.

    Returns:
        Tuple of (records, total)
    """
    query = db.query(MedicalRecord).options(joinedload(MedicalRecord.patient), joinedload(MedicalRecord.doctor))
    if patient_id:
        query = query.filter(MedicalRecord.patient_id == patient_id)
    if doctor_id:
        query = query.filter(MedicalRecord.doctor_id == doctor_id)
    records = query.order_by(MedicalRecord.recorded_at.desc()).all()
    return records, len(records)


def get_medical_record(db: Session, record_id: str) -> MedicalRecord:
    """
    Get a medical record by ID.

    Raises:
        ResourceNotFoundException: If record not found
    """
    record = db.query(MedicalRecord).filter(MedicalRecord.id == record_id).first()
    if not record:
        raise ResourceNotFoundException("Historia clínica no encontrada")
    return record


def create_medical_record(
    db: Session,
    record_data: MedicalRecordCreate,
    attachment_urls: Optional[List[str]] = None,
) -> MedicalRecord:
    """
    Write a medical record.

    Raises:
        ResourceNotFoundException: If the patient or the doctor does not exist
    """
    get_patient(db, record_data.patient_id)
    get_doctor(db, record_data.doctor_id)

    record = MedicalRecord(**record_data.model_dump(), attachments=list(attachment_urls or []))
    db.add(record)
    try:
        db.commit()
        db.refresh(record)
    except Exception:
        db.rollback()
        raise
    logger.info(f"Medical record {record.id} created for patient {record.patient_id}")
    return record


def update_medical_record(
    db: Session,
    record_id: str,
    record_data: MedicalRecordUpdate,
    new_attachment_urls: Optional[List[str]] = None,
) -> MedicalRecord:
    """
    Update a medical record; new attachments are appended to the existing ones.

    Raises:
        ResourceNotFoundException: If record not found
    """
    record = get_medical_record(db, record_id)
    for field, value in record_data.model_dump(exclude_unset=True).items():
        setattr(record, field, value)
    if new_attachment_urls:
        record.attachments = list(record.attachments or []) + list(new_attachment_urls)

    try:
        db.commit()
        db.refresh(record)
    except Exception:
        db.rollback()
        raise
    logger.info(f"Medical record {record_id} updated")
    return record


def delete_medical_record(db: Session, record_id: str) -> None:
    """
    Delete a medical record and, best effort, its stored attachments.

    Raises:
        ResourceNotFoundException: If record not found
    """
    record = get_medical_record(db, record_id)
    for url in record.attachments or []:
        delete_file(url)

    db.delete(record)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Medical record {record_id} deleted")
