"""
Shared pydantic building blocks for request and response schemas.

The public API speaks Spanish field names (``nombre``, ``correo``...), the
Python side uses English attribute names mapped through aliases.
"""
import re
from typing import Optional
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

NAME_PATTERN = re.compile(r"^[a-zA-ZáéíóúÁÉÍÓÚüÜñÑ\s]+$")
PHONE_PATTERN = re.compile(r"^\d{8,15}$")


class ApiModel(BaseModel):
    """Base schema accepting either alias or attribute names."""

    class Config:
        populate_by_name = True
        from_attributes = True

    def to_api(self) -> dict:
        """Serialize with the public (aliased) field names."""
        return self.model_dump(by_alias=True, mode="json")


def validate_person_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not 2 <= len(value) <= 50:
        raise ValueError("El nombre debe tener entre 2 y 50 caracteres")
    if not NAME_PATTERN.match(value):
        raise ValueError("El nombre solo puede contener letras y espacios")
    return value


def validate_phone(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    value = value.strip()
    if not PHONE_PATTERN.match(value):
        raise ValueError("El teléfono debe contener entre 8 y 15 dígitos")
    return value


def parse_form(model, **values):
    """
    Validate multipart form values with a schema.

    Missing form fields are dropped so optional schema fields keep their
    defaults. Failures are reported like any other request validation error.
    """
    data = {key: value for key, value in values.items() if value is not None}
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
