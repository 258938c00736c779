"""
Department Model - Clinic departments shown on the public site.
"""
from sqlalchemy import Column, String, DateTime, func
from ..database import Base, generate_id

class Department(Base):
    """
    Department Model

    Fields:
    - id: Primary key
    - name: Unique department name (case-insensitive)
    - description: Optional description
    """
    __tablename__ = "departments"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Department(id={self.id}, name='{self.name}')>"
