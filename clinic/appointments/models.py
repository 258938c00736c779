"""
Appointment Model - Stores appointment information and scheduling.

This model manages the relationship between doctors and patients for appointments.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
import enum
from ..database import Base, generate_id

class AppointmentStatus(str, enum.Enum):
    """Enum for appointment status"""
    SCHEDULED = "programada"
    COMPLETED = "completada"
    CANCELLED = "cancelada"

class Appointment(Base):
    """
    Appointment Model - Stores appointment information

    Fields:
    - id: Primary key for appointment
    - patient_id: Foreign key to Patient model
    - doctor_id: Foreign key to Doctor model
    - appointment_date: Date and time of the appointment
    - status: Current status of the appointment
    - notes: Additional notes about the appointment
    - created_at: When the appointment was created
    - updated_at: When the appointment was last updated
    """
    __tablename__ = "appointments"

    id = Column(String(32), primary_key=True, default=generate_id)
    patient_id = Column(String(32), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    doctor_id = Column(String(32), ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    appointment_date = Column(DateTime(timezone=True), nullable=False)
    status = Column(Enum(AppointmentStatus, name="appointment_status"), default=AppointmentStatus.SCHEDULED, nullable=False)
    notes = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    patient = relationship("Patient", back_populates="appointments")
    doctor = relationship("Doctor", back_populates="appointments")

    def __repr__(self):
        """String representation of the Appointment model"""
        return f"<Appointment(id={self.id}, doctor_id={self.doctor_id}, patient_id={self.patient_id}, date='{self.appointment_date}')>"
