"""
Patient Schemas - Pydantic models for patient profile updates and responses.
"""
from datetime import date, datetime
from typing import Optional
from pydantic import Field, field_validator

from ..core.schemas import ApiModel, validate_person_name, validate_phone
from ..auth.models import UserRole


class PatientUpdate(ApiModel):
    """
    Patient Update Schema - Fields a patient (or an admin) may change.

    Email, role and password are not editable here.
    """
    name: Optional[str] = Field(None, alias="nombre")
    phone: Optional[str] = Field(None, alias="telefono")
    address: Optional[str] = Field(None, alias="direccion", max_length=200)
    birth_date: Optional[date] = Field(None, alias="fechaNacimiento")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        return validate_person_name(value)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: Optional[str]) -> Optional[str]:
        return validate_phone(value)


class PatientSummary(ApiModel):
    """Compact patient view embedded in appointments, records and reviews."""
    id: str
    name: str = Field(..., alias="nombre")
    email: str = Field(..., alias="correo")
    phone: Optional[str] = Field(None, alias="telefono")


class PatientResponse(ApiModel):
    """Full patient profile; never includes credentials or recovery data."""
    id: str
    name: str = Field(..., alias="nombre")
    email: str = Field(..., alias="correo")
    birth_date: Optional[date] = Field(None, alias="fechaNacimiento")
    phone: Optional[str] = Field(None, alias="telefono")
    address: Optional[str] = Field(None, alias="direccion")
    profile_image_url: Optional[str] = Field(None, alias="fotoPerfilUrl")
    role: UserRole
    active: bool
    last_login: Optional[datetime] = Field(None, alias="lastLogin")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
