"""
Appointment Router - API endpoints for appointment scheduling.
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth.dependencies import get_current_account, require_doctor_or_admin
from ..auth.schemas import CurrentAccount
from ..core.responses import success_response
from ..database import get_db
from ..exceptions import AppException, InternalServerException
from .models import AppointmentStatus
from .schemas import AppointmentCreate, AppointmentUpdate, AppointmentResponse
from .service import (
    get_appointments,
    get_appointment,
    create_appointment,
    update_appointment,
    delete_appointment,
)

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/citas", tags=["Citas"])


def _serialize(appointment) -> dict:
    return AppointmentResponse.model_validate(appointment).to_api()


@router.get("")
async def list_appointments(
    estado: Optional[AppointmentStatus] = Query(None, description="Filter by status"),
    idPaciente: Optional[str] = Query(None, description="Filter by patient"),
    idDoctor: Optional[str] = Query(None, description="Filter by doctor"),
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_doctor_or_admin),
):
    """List appointments (doctors and admins)."""
    try:
        appointments, total = get_appointments(db, estado, idPaciente, idDoctor)
    except Exception as e:
        logger.error(f"Error listing appointments: {str(e)}")
        raise InternalServerException("Error al obtener las citas")
    return success_response("Citas obtenidas exitosamente", [_serialize(a) for a in appointments], total=total)


@router.get("/{appointment_id}")
async def get_appointment_route(
    appointment_id: str,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(get_current_account),
):
    """Get an appointment."""
    appointment = get_appointment(db, appointment_id)
    return success_response("Cita obtenida exitosamente", _serialize(appointment))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_appointment_route(
    appointment_data: AppointmentCreate,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(get_current_account),
):
    """Schedule an appointment (any authenticated account)."""
    try:
        appointment = create_appointment(db, appointment_data)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error creating appointment: {str(e)}")
        raise InternalServerException("Error al crear la cita")
    return success_response("Cita creada exitosamente", _serialize(appointment))


@router.put("/{appointment_id}")
async def update_appointment_route(
    appointment_id: str,
    appointment_data: AppointmentUpdate,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_doctor_or_admin),
):
    """Update an appointment (doctors and admins)."""
    try:
        appointment = update_appointment(db, appointment_id, appointment_data)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error updating appointment {appointment_id}: {str(e)}")
        raise InternalServerException("Error al actualizar la cita")
    return success_response("Cita actualizada exitosamente", _serialize(appointment))


@router.delete("/{appointment_id}")
async def delete_appointment_route(
    appointment_id: str,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_doctor_or_admin),
):
    """Delete an appointment (doctors and admins)."""
    try:
        delete_appointment(db, appointment_id)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error deleting appointment {appointment_id}: {str(e)}")
        raise InternalServerException("Error al eliminar la cita")
    return success_response("Cita eliminada exitosamente")
