"""
Auth Schemas - Pydantic models for registration, login, recovery and identity.
"""
from datetime import date
from typing import Optional
from pydantic import EmailStr, Field, field_validator

from ..core.schemas import ApiModel, validate_person_name, validate_phone
from .models import UserRole, AccountVariant, MIN_PASSWORD_LENGTH

RECOVERY_CODE_PATTERN = r"^\d{6}$"


class PatientRegistration(ApiModel):
    """
    Patient Registration Schema - Used for patient self-registration

    Fields:
    - nombre: Letters and spaces, 2 to 50 characters
    - correo: Email, unique across patients and doctors
    - contrasena: At least 6 characters
    - fechaNacimiento / telefono / direccion: Optional profile data
    """
    name: str = Field(..., alias="nombre")
    email: EmailStr = Field(..., alias="correo")
    password: str = Field(..., alias="contrasena", min_length=MIN_PASSWORD_LENGTH)
    birth_date: Optional[date] = Field(None, alias="fechaNacimiento")
    phone: Optional[str] = Field(None, alias="telefono")
    address: Optional[str] = Field(None, alias="direccion", max_length=200)

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return validate_person_name(value)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: Optional[str]) -> Optional[str]:
        return validate_phone(value)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("birth_date")
    @classmethod
    def birth_date_in_past(cls, value: Optional[date]) -> Optional[date]:
        if value is not None and value >= date.today():
            raise ValueError("La fecha de nacimiento debe ser anterior a hoy")
        return value


class LoginRequest(ApiModel):
    """Credentials posted to iniciarSesion."""
    email: EmailStr = Field(..., alias="correo")
    password: str = Field(..., alias="contrasena", min_length=1)


class RecoveryCodeRequest(ApiModel):
    email: EmailStr = Field(..., alias="correo")


class RecoveryCodeVerify(ApiModel):
    email: EmailStr = Field(..., alias="correo")
    code: str = Field(..., alias="codigo", pattern=RECOVERY_CODE_PATTERN)


class NewPasswordRequest(ApiModel):
    email: EmailStr = Field(..., alias="correo")
    code: str = Field(..., alias="codigo", pattern=RECOVERY_CODE_PATTERN)
    new_password: str = Field(..., alias="nuevaContrasena", min_length=MIN_PASSWORD_LENGTH)


class AccountSummary(ApiModel):
    """Public view of an account returned after login or registration."""
    id: str
    name: str = Field(..., alias="nombre")
    last_name: Optional[str] = Field(None, alias="apellido")
    email: str = Field(..., alias="correo")
    role: UserRole
    variant: AccountVariant = Field(..., alias="type")
    profile_image_url: Optional[str] = Field(None, alias="fotoPerfilUrl")


class CurrentAccount(ApiModel):
    """
    Identity context resolved for the request from a verified token and a
    live account lookup. The role is the account's stored role.
    """
    id: str
    variant: AccountVariant = Field(..., alias="type")
    role: UserRole
    email: str = Field(..., alias="correo")
    name: str = Field(..., alias="nombre")
    is_active: bool = Field(True, alias="active")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
