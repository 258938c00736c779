"""
Patient Model - Self-registered clinic patients.

Patients are one of the two account variants; the shared account columns and
password handling come from AccountMixin.
"""
from sqlalchemy import Column, String, Date, Enum
from sqlalchemy.orm import relationship
from ..database import Base
from ..auth.models import AccountMixin, AccountVariant, UserRole

class Patient(AccountMixin, Base):
    """
    Patient Model - Stores patient accounts and contact details

    Fields (in addition to AccountMixin):
    - role: Always UserRole.PATIENT
    - birth_date: Patient's date of birth
    - phone: Contact phone, 8 to 15 digits
    - address: Postal address
    """
    __tablename__ = "patients"

    variant = AccountVariant.PATIENT

    role = Column(Enum(UserRole, name="patient_role"), default=UserRole.PATIENT, nullable=False)
    birth_date = Column(Date, nullable=True)
    phone = Column(String(15), nullable=True)
    address = Column(String(200), nullable=True)

    # Relationships
    appointments = relationship("Appointment", back_populates="patient")
    medical_records = relationship("MedicalRecord", back_populates="patient")
    reviews = relationship("Review", back_populates="patient")

    def __repr__(self):
        """String representation of the Patient model"""
        return f"<Patient(id={self.id}, email='{self.email}')>"
