"""
Department Router - Public department listings and admin maintenance.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth.dependencies import require_admin
from ..auth.schemas import CurrentAccount
from ..core.responses import success_response
from ..database import get_db
from ..exceptions import AppException, InternalServerException
from .schemas import DepartmentCreate, DepartmentUpdate, DepartmentResponse
from .service import (
    get_departments,
    get_department,
    create_department,
    update_department,
    delete_department,
)

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/departamentos", tags=["Departamentos"])


@router.get("")
async def list_departments(db: Session = Depends(get_db)):
    """List departments ordered by name."""
    try:
        departments, total = get_departments(db)
    except Exception as e:
        logger.error(f"Error listing departments: {str(e)}")
        raise InternalServerException("Error al obtener los departamentos")
    return success_response(
        "Departamentos obtenidos exitosamente",
        [DepartmentResponse.model_validate(d).to_api() for d in departments],
        total=total,
    )


@router.get("/{department_id}")
async def get_department_route(department_id: str, db: Session = Depends(get_db)):
    department = get_department(db, department_id)
    return success_response("Departamento obtenido exitosamente", DepartmentResponse.model_validate(department).to_api())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_department_route(
    department_data: DepartmentCreate,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_admin),
):
    """Create a department (admin only)."""
    try:
        department = create_department(db, department_data)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error creating department: {str(e)}")
        raise InternalServerException("Error al crear el departamento")
    return success_response("Departamento creado exitosamente", DepartmentResponse.model_validate(department).to_api())


@router.put("/{department_id}")
async def update_department_route(
    department_id: str,
    department_data: DepartmentUpdate,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_admin),
):
    """Update a department (admin only)."""
    try:
        department = update_department(db, department_id, department_data)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error updating department {department_id}: {str(e)}")
        raise InternalServerException("Error al actualizar el departamento")
    return success_response("Departamento actualizado exitosamente", DepartmentResponse.model_validate(department).to_api())


@router.delete("/{department_id}")
async def delete_department_route(
    department_id: str,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(require_admin),
):
    """Delete a department (admin only)."""
    try:
        delete_department(db, department_id)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error deleting department {department_id}: {str(e)}")
        raise InternalServerException("Error al eliminar el departamento")
    return success_response("Departamento eliminado exitosamente")
