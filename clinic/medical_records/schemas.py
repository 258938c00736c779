"""
Medical Record Schemas - Pydantic models for clinical history entries.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from ..core.schemas import ApiModel
from ..doctors.schemas import DoctorSummary
from ..patients.schemas import PatientSummary

MAX_ATTACHMENTS = 5


class MedicalRecordCreate(ApiModel):
    patient_id: str = Field(..., alias="idPaciente", min_length=1)
    doctor_id: str = Field(..., alias="idDoctor", min_length=1)
    diagnosis: str = Field(..., alias="diagnostico", min_length=10, max_length=2000)
    treatment: Optional[str] = Field(None, alias="tratamiento", max_length=2000)


class MedicalRecordUpdate(ApiModel):
    diagnosis: Optional[str] = Field(None, alias="diagnostico", min_length=10, max_length=2000)
    treatment: Optional[str] = Field(None, alias="tratamiento", max_length=2000)


class MedicalRecordResponse(ApiModel):
    id: str
    patient_id: str = Field(..., alias="idPaciente")
    doctor_id: Optional[str] = Field(None, alias="idDoctor")
    patient: Optional[PatientSummary] = Field(None, alias="paciente")
    doctor: Optional[DoctorSummary] = None
    diagnosis: str = Field(..., alias="diagnostico")
    treatment: Optional[str] = Field(None, alias="tratamiento")
    attachments: List[str] = Field(default_factory=list, alias="archivosAdjuntos")
    recorded_at: Optional[datetime] = Field(None, alias="fechaRegistro")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
