"""
Department Schemas - Pydantic models for department data.
"""
from datetime import datetime
from typing import Optional
from pydantic import Field

from ..core.schemas import ApiModel


class DepartmentCreate(ApiModel):
    name: str = Field(..., alias="nombre", min_length=2, max_length=100)
    description: Optional[str] = Field(None, alias="descripcion", max_length=500)

    class Config:
        populate_by_name = True
        str_strip_whitespace = True


class DepartmentUpdate(ApiModel):
    name: Optional[str] = Field(None, alias="nombre", min_length=2, max_length=100)
    description: Optional[str] = Field(None, alias="descripcion", max_length=500)

    class Config:
        populate_by_name = True
        str_strip_whitespace = True


class DepartmentResponse(ApiModel):
    id: str
    name: str = Field(..., alias="nombre")
    description: Optional[str] = Field(None, alias="descripcion")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
