"""
Patient Router - API endpoints for patient profile management.

Patients register through /api/registrarPacientes; these endpoints read and
maintain existing profiles. Handlers that talk to Cloudinary are plain
functions so FastAPI runs them in its threadpool.
"""
from datetime import date
from typing import Optional
import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from ..auth.dependencies import require_admin, require_ownership_or_admin
from ..auth.schemas import CurrentAccount
from ..core.cloudinary import IMAGE_TYPES, PATIENTS_FOLDER, upload_file, validate_upload
from ..core.responses import success_response
from ..core.schemas import parse_form
from ..database import get_db
from ..exceptions import AppException, InternalServerException
from .schemas import PatientResponse, PatientUpdate
from .service import get_patients, get_patient, update_patient, deactivate_patient

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pacientes", tags=["Pacientes"])


@router.get("")
async def list_patients(
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_admin),
):
    """List active patients (admin only)."""
    try:
        patients, total = get_patients(db)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error listing patients: {str(e)}")
        raise InternalServerException("Error al obtener los pacientes")
    return success_response(
        "Pacientes obtenidos exitosamente",
        [PatientResponse.model_validate(p).to_api() for p in patients],
        total=total,
    )


@router.get("/{patient_id}")
async def get_patient_route(
    patient_id: str,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_ownership_or_admin("patient_id")),
):
    """Get a patient profile (the patient themself or an admin)."""
    patient = get_patient(db, patient_id)
    return success_response("Paciente obtenido exitosamente", PatientResponse.model_validate(patient).to_api())


@router.put("/{patient_id}")
def update_patient_route(
    patient_id: str,
    nombre: Optional[str] = Form(None),
    telefono: Optional[str] = Form(None),
    direccion: Optional[str] = Form(None),
    fechaNacimiento: Optional[date] = Form(None),
    fotoPerfil: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_ownership_or_admin("patient_id")),
):
    """
    Update a patient profile (multipart form).

    A new ``fotoPerfil`` replaces the stored photo.
    """
    update_data = parse_form(
        PatientUpdate,
        nombre=nombre,
        telefono=telefono,
        direccion=direccion,
        fechaNacimiento=fechaNacimiento,
    )
    try:
        get_patient(db, patient_id)
        image_url = None
        if fotoPerfil is not None and fotoPerfil.filename:
            validate_upload(fotoPerfil, IMAGE_TYPES)
            image_url = upload_file(fotoPerfil, PATIENTS_FOLDER)
        patient = update_patient(db, patient_id, update_data, image_url)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error updating patient {patient_id}: {str(e)}")
        raise InternalServerException("Error al actualizar el paciente")
    return success_response("Paciente actualizado exitosamente", PatientResponse.model_validate(patient).to_api())


@router.delete("/{patient_id}")
async def delete_patient_route(
    patient_id: str,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_admin),
):
    """Deactivate a patient account (admin only)."""
    try:
        deactivate_patient(db, patient_id)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error deactivating patient {patient_id}: {str(e)}")
        raise InternalServerException("Error al eliminar el paciente")
    return success_response("Paciente desactivado exitosamente")
