"""
Review Model - Patient ratings of doctors.
"""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, func
from sqlalchemy.orm import relationship
from ..database import Base, generate_id

class Review(Base):
    """
    Review Model - One review per patient and doctor

    Fields:
    - id: Primary key
    - patient_id: Author
    - doctor_id: Reviewed doctor
    - rating: Integer from 1 to 5
    - comment: Optional text
    """
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("patient_id", "doctor_id", name="uq_review_patient_doctor"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating"),
    )

    id = Column(String(32), primary_key=True, default=generate_id)
    patient_id = Column(String(32), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    doctor_id = Column(String(32), ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    patient = relationship("Patient", back_populates="reviews")
    doctor = relationship("Doctor", back_populates="reviews")

    def __repr__(self):
        return f"<Review(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id}, rating={self.rating})>"
