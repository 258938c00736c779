"""
Doctor Schemas - Pydantic models for doctor provisioning, updates and responses.

Doctors are created by administrators; there is no doctor self-registration.
"""
from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field, field_validator

from ..core.schemas import ApiModel, validate_person_name
from ..auth.models import UserRole, MIN_PASSWORD_LENGTH


def _check_doctor_role(value: Optional[UserRole]) -> Optional[UserRole]:
    if value is not None and value not in (UserRole.DOCTOR, UserRole.ADMIN):
        raise ValueError("El rol debe ser doctor o admin")
    return value


class DoctorCreate(ApiModel):
    """
    Doctor Creation Schema - Used by admins to provision doctor accounts

    Fields:
    - nombre / apellido: Letters and spaces
    - especialidad: Medical specialty
    - biografia: Professional biography (optional)
    - correo / contrasena: Credentials of the new account
    - role: "doctor" (default) or "admin"
    """
    name: str = Field(..., alias="nombre")
    last_name: str = Field(..., alias="apellido")
    specialty: str = Field(..., alias="especialidad", min_length=2, max_length=100)
    biography: Optional[str] = Field(None, alias="biografia", max_length=1000)
    email: EmailStr = Field(..., alias="correo")
    password: str = Field(..., alias="contrasena", min_length=MIN_PASSWORD_LENGTH)
    role: UserRole = UserRole.DOCTOR

    @field_validator("name", "last_name")
    @classmethod
    def check_names(cls, value: str) -> str:
        return validate_person_name(value)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("role")
    @classmethod
    def check_role(cls, value: UserRole) -> UserRole:
        return _check_doctor_role(value)


class DoctorUpdate(ApiModel):
    """Doctor Update Schema - every field optional."""
    name: Optional[str] = Field(None, alias="nombre")
    last_name: Optional[str] = Field(None, alias="apellido")
    specialty: Optional[str] = Field(None, alias="especialidad", min_length=2, max_length=100)
    biography: Optional[str] = Field(None, alias="biografia", max_length=1000)
    email: Optional[EmailStr] = Field(None, alias="correo")
    role: Optional[UserRole] = None
    active: Optional[bool] = None

    @field_validator("name", "last_name")
    @classmethod
    def check_names(cls, value: Optional[str]) -> Optional[str]:
        return validate_person_name(value)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if value else value

    @field_validator("role")
    @classmethod
    def check_role(cls, value: Optional[UserRole]) -> Optional[UserRole]:
        return _check_doctor_role(value)


class DoctorSummary(ApiModel):
    """Compact doctor view embedded in appointments, records and reviews."""
    id: str
    name: str = Field(..., alias="nombre")
    last_name: str = Field(..., alias="apellido")
    specialty: str = Field(..., alias="especialidad")
    profile_image_url: Optional[str] = Field(None, alias="fotoPerfilUrl")


class DoctorResponse(ApiModel):
    """Public doctor profile."""
    id: str
    name: str = Field(..., alias="nombre")
    last_name: str = Field(..., alias="apellido")
    specialty: str = Field(..., alias="especialidad")
    biography: Optional[str] = Field(None, alias="biografia")
    email: str = Field(..., alias="correo")
    profile_image_url: Optional[str] = Field(None, alias="fotoPerfilUrl")
    role: UserRole
    active: bool
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
