"""
Appointment Schemas - Pydantic models for appointment data validation and serialization.
"""
from datetime import datetime, timezone
from typing import Optional
from pydantic import Field, field_validator

from ..core.schemas import ApiModel
from ..doctors.schemas import DoctorSummary
from ..patients.schemas import PatientSummary
from .models import AppointmentStatus


def _not_in_past(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return value
    aware = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if aware < datetime.now(timezone.utc):
        raise ValueError("La fecha de la cita no puede ser en el pasado")
    return aware


class AppointmentCreate(ApiModel):
    """
    Appointment Creation Schema

    Fields:
    - idPaciente / idDoctor: Participants
    - fechaCita: Date and time, not in the past
    - estado: programada (default), completada or cancelada
    - notas: Free text, up to 500 characters
    """
    patient_id: str = Field(..., alias="idPaciente", min_length=1)
    doctor_id: str = Field(..., alias="idDoctor", min_length=1)
    appointment_date: datetime = Field(..., alias="fechaCita")
    status: AppointmentStatus = Field(AppointmentStatus.SCHEDULED, alias="estado")
    notes: Optional[str] = Field(None, alias="notas", max_length=500)

    @field_validator("appointment_date")
    @classmethod
    def check_date(cls, value: datetime) -> datetime:
        return _not_in_past(value)


class AppointmentUpdate(ApiModel):
    """Appointment Update Schema - every field optional."""
    patient_id: Optional[str] = Field(None, alias="idPaciente", min_length=1)
    doctor_id: Optional[str] = Field(None, alias="idDoctor", min_length=1)
    appointment_date: Optional[datetime] = Field(None, alias="fechaCita")
    status: Optional[AppointmentStatus] = Field(None, alias="estado")
    notes: Optional[str] = Field(None, alias="notas", max_length=500)

    @field_validator("appointment_date")
    @classmethod
    def check_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _not_in_past(value)


class AppointmentResponse(ApiModel):
    id: str
    patient_id: str = Field(..., alias="idPaciente")
    doctor_id: str = Field(..., alias="idDoctor")
    patient: Optional[PatientSummary] = Field(None, alias="paciente")
    doctor: Optional[DoctorSummary] = None
    appointment_date: datetime = Field(..., alias="fechaCita")
    status: AppointmentStatus = Field(..., alias="estado")
    notes: Optional[str] = Field(None, alias="notas")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
