"""
Doctor Router - API endpoints for doctor listings and account management.

Listings are public; provisioning and maintenance require an administrator.
Handlers that upload photos are plain functions so FastAPI runs them in its
threadpool.
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from ..auth.dependencies import require_admin
from ..auth.schemas import CurrentAccount
from ..core.cloudinary import DOCTORS_FOLDER, IMAGE_TYPES, upload_file, validate_upload
from ..core.responses import success_response
from ..core.schemas import parse_form
from ..database import get_db
from ..exceptions import AppException, InternalServerException
from .schemas import DoctorCreate, DoctorUpdate, DoctorResponse
from .service import get_doctors, get_doctor, create_doctor, update_doctor, deactivate_doctor

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/doctores", tags=["Doctores"])


def _upload_photo(photo: Optional[UploadFile]) -> Optional[str]:
    if photo is None or not photo.filename:
        return None
    validate_upload(photo, IMAGE_TYPES)
    return upload_file(photo, DOCTORS_FOLDER)


@router.get("")
async def list_doctors(db: Session = Depends(get_db)):
    """List active doctors."""
    try:
        doctors, total = get_doctors(db)
    except Exception as e:
        logger.error(f"Error listing doctors: {str(e)}")
        raise InternalServerException("Error al obtener los doctores")
    return success_response(
        "Doctores obtenidos exitosamente",
        [DoctorResponse.model_validate(d).to_api() for d in doctors],
        total=total,
    )


@router.get("/{doctor_id}")
async def get_doctor_route(doctor_id: str, db: Session = Depends(get_db)):
    """Get a doctor profile."""
    doctor = get_doctor(db, doctor_id)
    return success_response("Doctor obtenido exitosamente", DoctorResponse.model_validate(doctor).to_api())


@router.post("", status_code=status.HTTP_201_CREATED)
def create_doctor_route(
    nombre: str = Form(...),
    apellido: str = Form(...),
    especialidad: str = Form(...),
    correo: str = Form(...),
    contrasena: str = Form(...),
    biografia: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    fotoPerfil: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_admin),
):
    """
    Provision a doctor or admin account (admin only, multipart form).
    """
    doctor_data = parse_form(
        DoctorCreate,
        nombre=nombre,
        apellido=apellido,
        especialidad=especialidad,
        correo=correo,
        contrasena=contrasena,
        biografia=biografia,
        role=role,
    )
    try:
        image_url = _upload_photo(fotoPerfil)
        doctor = create_doctor(db, doctor_data, image_url)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error creating doctor: {str(e)}")
        raise InternalServerException("Error al crear el doctor")
    logger.info(f"Admin {current_account.id} created doctor {doctor.id}")
    return success_response("Doctor creado exitosamente", DoctorResponse.model_validate(doctor).to_api())


@router.put("/{doctor_id}")
def update_doctor_route(
    doctor_id: str,
    nombre: Optional[str] = Form(None),
    apellido: Optional[str] = Form(None),
    especialidad: Optional[str] = Form(None),
    correo: Optional[str] = Form(None),
    biografia: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    active: Optional[bool] = Form(None),
    fotoPerfil: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_admin),
):
    """Update a doctor account (admin only, multipart form)."""
    doctor_data = parse_form(
        DoctorUpdate,
        nombre=nombre,
        apellido=apellido,
        especialidad=especialidad,
        correo=correo,
        biografia=biografia,
        role=role,
        active=active,
    )
    try:
        get_doctor(db, doctor_id)
        image_url = _upload_photo(fotoPerfil)
        doctor = update_doctor(db, doctor_id, doctor_data, image_url)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error updating doctor {doctor_id}: {str(e)}")
        raise InternalServerException("Error al actualizar el doctor")
    return success_response("Doctor actualizado exitosamente", DoctorResponse.model_validate(doctor).to_api())


@router.delete("/{doctor_id}")
async def delete_doctor_route(
    doctor_id: str,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_admin),
):
    """Deactivate a doctor account (admin only)."""
    try:
        deactivate_doctor(db, doctor_id)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error deactivating doctor {doctor_id}: {str(e)}")
        raise InternalServerException("Error al eliminar el doctor")
    return success_response("Doctor desactivado exitosamente")
