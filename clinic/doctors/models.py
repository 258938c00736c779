"""
Doctor Model - Clinic doctors and administrators.

Doctors are provisioned by an administrator; an administrator is a doctor
account whose role is UserRole.ADMIN.
"""
from sqlalchemy import Column, String, Text, Enum
from sqlalchemy.orm import relationship
from ..database import Base
from ..auth.models import AccountMixin, AccountVariant, UserRole

DOCTOR_ROLES = (UserRole.DOCTOR, UserRole.ADMIN)

class Doctor(AccountMixin, Base):
    """
    Doctor Model - Stores doctor accounts and professional profile

    Fields (in addition to AccountMixin):
    - role: UserRole.DOCTOR or UserRole.ADMIN
    - last_name: Doctor's last name
    - specialty: Medical specialty
    - biography: Professional biography
    """
    __tablename__ = "doctors"

    variant = AccountVariant.DOCTOR

    role = Column(Enum(UserRole, name="doctor_role"), default=UserRole.DOCTOR, nullable=False)
    last_name = Column(String(100), nullable=False)
    specialty = Column(String(100), nullable=False)
    biography = Column(Text, nullable=True)

    # Relationships
    appointments = relationship("Appointment", back_populates="doctor")
    medical_records = relationship("MedicalRecord", back_populates="doctor")
    reviews = relationship("Review", back_populates="doctor")

    def __repr__(self):
        """String representation of the Doctor model"""
        return f"<Doctor(id={self.id}, email='{self.email}', specialty='{self.specialty}')>"

    @property
    def display_name(self) -> str:
        return f"{self.name} {self.last_name}".strip()
