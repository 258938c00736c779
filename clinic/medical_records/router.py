"""
Medical Record Router - Clinical histories, restricted to doctors and admins.

Write handlers upload and delete attachments through blocking Cloudinary
calls, so they are plain functions run in the threadpool.
"""
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from ..auth.dependencies import require_doctor_or_admin
from ..auth.schemas import CurrentAccount
from ..core.cloudinary import DOCUMENT_TYPES, MEDICAL_RECORDS_FOLDER, upload_file, validate_upload
from ..core.responses import success_response
from ..core.schemas import parse_form
from ..database import get_db
from ..exceptions import AppException, InternalServerException, InvalidUploadException
from .schemas import MAX_ATTACHMENTS, MedicalRecordCreate, MedicalRecordUpdate, MedicalRecordResponse
from .service import (
    get_medical_records,
    get_medical_record,
    create_medical_record,
    update_medical_record,
    delete_medical_record,
)

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/historias", tags=["Historias Clínicas"])


def _serialize(record) -> dict:
    return MedicalRecordResponse.model_validate(record).to_api()


def _upload_attachments(files: Optional[List[UploadFile]]) -> List[str]:
    """Validate every file first, then upload; failed uploads are skipped."""
    files = [f for f in (files or []) if f is not None and f.filename]
    if len(files) > MAX_ATTACHMENTS:
        raise InvalidUploadException(f"Se permiten como máximo {MAX_ATTACHMENTS} archivos")
    for file in files:
        validate_upload(file, DOCUMENT_TYPES)
    urls = []
    for file in files:
        url = upload_file(file, MEDICAL_RECORDS_FOLDER)
        if url:
            urls.append(url)
    return urls


@router.get("")
async def list_medical_records(
    idPaciente: Optional[str] = Query(None, description="Filter by patient"),
    idDoctor: Optional[str] = Query(None, description="Filter by doctor"),
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_doctor_or_admin),
):
    """List medical records."""
    try:
        records, total = get_medical_records(db, idPaciente, idDoctor)
    except Exception as e:
        logger.error(f"Error listing medical records: {str(e)}")
        raise InternalServerException("Error al obtener las historias clínicas")
    return success_response("Historias clínicas obtenidas exitosamente", [_serialize(r) for r in records], total=total)


@router.get("/{record_id}")
async def get_medical_record_route(
    record_id: str,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_doctor_or_admin),
):
    record = get_medical_record(db, record_id)
    return success_response("Historia clínica obtenida exitosamente", _serialize(record))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_medical_record_route(
    idPaciente: str = Form(...),
    idDoctor: str = Form(...),
    diagnostico: str = Form(...),
    tratamiento: Optional[str] = Form(None),
    archivosAdjuntos: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_doctor_or_admin),
):
    """Write a medical record with up to 5 attachments (multipart form)."""
    record_data = parse_form(
        MedicalRecordCreate,
        idPaciente=idPaciente,
        idDoctor=idDoctor,
        diagnostico=diagnostico,
        tratamiento=tratamiento,
    )
    try:
        attachment_urls = _upload_attachments(archivosAdjuntos)
        record = create_medical_record(db, record_data, attachment_urls)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error creating medical record: {str(e)}")
        raise InternalServerException("Error al crear la historia clínica")
    return success_response("Historia clínica creada exitosamente", _serialize(record))


@router.put("/{record_id}")
def update_medical_record_route(
    record_id: str,
    diagnostico: Optional[str] = Form(None),
    tratamiento: Optional[str] = Form(None),
    archivosAdjuntos: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_doctor_or_admin),
):
    """Update a medical record; new attachments are appended."""
    record_data = parse_form(MedicalRecordUpdate, diagnostico=diagnostico, tratamiento=tratamiento)
    try:
        get_medical_record(db, record_id)
        attachment_urls = _upload_attachments(archivosAdjuntos)
        record = update_medical_record(db, record_id, record_data, attachment_urls)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error updating medical record {record_id}: {str(e)}")
        raise InternalServerException("Error al actualizar la historia clínica")
    return success_response("Historia clínica actualizada exitosamente", _serialize(record))


@router.delete("/{record_id}")
def delete_medical_record_route(
    record_id: str,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_doctor_or_admin),
):
    """Delete a medical record and its attachments."""
    try:
        delete_medical_record(db, record_id)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error deleting medical record {record_id}: {str(e)}")
        raise InternalServerException("Error al eliminar la historia clínica")
    return success_response("Historia clínica eliminada exitosamente")
