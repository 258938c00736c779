"""
Department Service - Business logic for clinic departments.
"""
from typing import List, Optional, Tuple
import logging
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..exceptions import ResourceNotFoundException, DuplicateResourceException
from .models import Department
from .schemas import DepartmentCreate, DepartmentUpdate

# Set up logging
logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Ya existe un departamento con ese nombre"


def _name_taken(db: Session, name: str, exclude_id: Optional[str] = None) -> bool:
    query = db.query(Department.id).filter(func.lower(Department.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(Department.id != exclude_id)
    return query.first() is not None


def get_departments(db: Session) -> Tuple[List[Department], int]:
    departments = db.query(Department).order_by(Department.name.asc()).all()
    return departments, len(departments)


def get_department(db: Session, department_id: str) -> Department:
    """
    Get a department by ID.

    Raises:
        ResourceNotFoundException: If department not found
    """
    department = db.query(Department).filter(Department.id == department_id).first()
    if not department:
        raise ResourceNotFoundException("Departamento no encontrado")
    return department


def create_department(db: Session, department_data: DepartmentCreate) -> Department:
    """
    Create a department.

    Raises:
        DuplicateResourceException: If the name is taken, ignoring case
    """
    if _name_taken(db, department_data.name):
        raise DuplicateResourceException(DUPLICATE_MESSAGE)

    department = Department(**department_data.model_dump())
    db.add(department)
    try:
        db.commit()
        db.refresh(department)
    except Exception:
        db.rollback()
        raise
    logger.info(f"Department {department.id} ({department.name}) created")
    return department


def update_department(db: Session, department_id: str, department_data: DepartmentUpdate) -> Department:
    """
    Update a department.

    Raises:
        ResourceNotFoundException: If department not found
        DuplicateResourceException: If the new name is taken
    """
    department = get_department(db, department_id)
    update_data = department_data.model_dump(exclude_unset=True)
    if update_data.get("name") and _name_taken(db, update_data["name"], exclude_id=department.id):
        raise DuplicateResourceException(DUPLICATE_MESSAGE)

    for field, value in update_data.items():
        setattr(department, field, value)
    try:
        db.commit()
        db.refresh(department)
    except Exception:
        db.rollback()
        raise
    logger.info(f"Department {department_id} updated")
    return department


def delete_department(db: Session, department_id: str) -> None:
    department = get_department(db, department_id)
    db.delete(department)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Department {department_id} deleted")
