"""
Review Schemas - Pydantic models for doctor reviews.
"""
from datetime import datetime
from typing import Optional
from pydantic import Field

from ..core.schemas import ApiModel
from ..doctors.schemas import DoctorSummary
from ..patients.schemas import PatientSummary


class ReviewCreate(ApiModel):
    patient_id: str = Field(..., alias="idPaciente", min_length=1)
    doctor_id: str = Field(..., alias="idDoctor", min_length=1)
    rating: int = Field(..., alias="calificacion", ge=1, le=5)
    comment: Optional[str] = Field(None, alias="comentario", max_length=500)


class ReviewUpdate(ApiModel):
    rating: Optional[int] = Field(None, alias="calificacion", ge=1, le=5)
    comment: Optional[str] = Field(None, alias="comentario", max_length=500)


class ReviewResponse(ApiModel):
    id: str
    patient_id: str = Field(..., alias="idPaciente")
    doctor_id: str = Field(..., alias="idDoctor")
    patient: Optional[PatientSummary] = Field(None, alias="paciente")
    doctor: Optional[DoctorSummary] = None
    rating: int = Field(..., alias="calificacion")
    comment: Optional[str] = Field(None, alias="comentario")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    own: Optional[bool] = Field(None, alias="esPropia")
