"""
Medical Record Model - Clinical history entries written by doctors.

This model maintains a record of patient diagnoses, treatments and the
documents attached to each visit.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, JSON, func
from sqlalchemy.orm import relationship
from ..database import Base, generate_id

class MedicalRecord(Base):
    """
    Medical Record Model - Stores patient medical records

    Fields:
    - id: Primary key for medical record
    - patient_id: Foreign key to Patient model
    - doctor_id: Foreign key to Doctor model
    - diagnosis: Medical diagnosis
    - treatment: Treatment prescribed
    - attachments: Cloudinary URLs of attached documents
    - recorded_at: When the record was written
    """
    __tablename__ = "medical_records"

    id = Column(String(32), primary_key=True, default=generate_id)
    patient_id = Column(String(32), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    doctor_id = Column(String(32), ForeignKey("doctors.id", ondelete="SET NULL"), nullable=True, index=True)
    diagnosis = Column(Text, nullable=False)
    treatment = Column(Text, nullable=True)
    attachments = Column(JSON, nullable=False, default=list)
    recorded_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    patient = relationship("Patient", back_populates="medical_records")
    doctor = relationship("Doctor", back_populates="medical_records")

    def __repr__(self):
        """String representation of the MedicalRecord model"""
        return f"<MedicalRecord(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id})>"
