"""
Review Service - Business logic for doctor reviews.
"""
from typing import List, Optional, Tuple
import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..doctors.service import get_doctor
from ..exceptions import ResourceNotFoundException, DuplicateResourceException
from ..patients.service import get_patient
from .models import Review
from .schemas import ReviewCreate, ReviewUpdate

# Set up logging
logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Ya has dejado una reseña para este doctor"


def get_reviews(
    db: Session,
    doctor_id: Optional[str] = None,
    patient_id: Optional[str] = None,
) -> Tuple[List[Review], int]:
    """
    List reviews, newest first.

    Returns:
        Tuple of (reviews, total)
    """
    query = db.query(Review).options(joinedload(Review.patient), joinedload(Review.doctor))
    if doctor_id:
        query = query.filter(Review.doctor_id == doctor_id)
    if patient_id:
        query = query.filter(Review.patient_id == patient_id)
    reviews = query.order_by(Review.created_at.desc()).all()
    return reviews, len(reviews)


def get_review(db: Session, review_id: str) -> Review:
    """
    Get a review by ID.

    Raises:
        ResourceNotFoundException: If review not found
    """
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise ResourceNotFoundException("Reseña no encontrada")
    return review


def create_review(db: Session, review_data: ReviewCreate) -> Review:
    """
    Create a review.

    Raises:
        ResourceNotFoundException: If the patient or the doctor does not exist
        DuplicateResourceException: If the patient already reviewed the doctor
    """
    get_patient(db, review_data.patient_id)
    get_doctor(db, review_data.doctor_id)

    existing = (
        db.query(Review.id)
        .filter(Review.patient_id == review_data.patient_id, Review.doctor_id == review_data.doctor_id)
        .first()
    )
    if existing:
        raise DuplicateResourceException(DUPLICATE_MESSAGE)

    review = Review(**review_data.model_dump())
    db.add(review)
    try:
        db.commit()
        db.refresh(review)
    except IntegrityError:
        db.rollback()
        raise DuplicateResourceException(DUPLICATE_MESSAGE)
    except Exception:
        db.rollback()
        raise
    logger.info(f"Review {review.id} created by patient {review.patient_id} for doctor {review.doctor_id}")
    return review


def update_review(db: Session, review_id: str, review_data: ReviewUpdate) -> Review:
    """
    Update the rating or comment of a review.

    Raises:
        ResourceNotFoundException: If review not found
    """
    review = get_review(db, review_id)
    for field, value in review_data.model_dump(exclude_unset=True).items():
        setattr(review, field, value)
    try:
        db.commit()
        db.refresh(review)
    except Exception:
        db.rollback()
        raise
    logger.info(f"Review {review_id} updated")
    return review


def delete_review(db: Session, review_id: str) -> None:
    review = get_review(db, review_id)
    db.delete(review)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Review {review_id} deleted")
