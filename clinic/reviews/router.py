"""
Review Router - Public review listings; writing requires an authenticated account.
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth.dependencies import get_current_account, get_optional_current_account
from ..auth.schemas import CurrentAccount
from ..core.responses import success_response
from ..database import get_db
from ..exceptions import AppException, InternalServerException
from .schemas import ReviewCreate, ReviewUpdate, ReviewResponse
from .service import get_reviews, get_review, create_review, update_review, delete_review

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resenas", tags=["Reseñas"])


def _serialize(review, current_account: Optional[CurrentAccount] = None) -> dict:
    response = ReviewResponse.model_validate(review)
    if current_account is not None:
        response.own = review.patient_id == current_account.id
    return response.to_api()


@router.get("")
async def list_reviews(
    idDoctor: Optional[str] = Query(None, description="Filter by doctor"),
    idPaciente: Optional[str] = Query(None, description="Filter by patient"),
    db: Session = Depends(get_db),
    current_account: Optional[CurrentAccount] = Depends(get_optional_current_account),
):
    """
    List reviews.

    Anonymous callers get the plain list; logged-in callers also get
    ``esPropia`` on each review.
    """
    try:
        reviews, total = get_reviews(db, idDoctor, idPaciente)
    except Exception as e:
        logger.error(f"Error listing reviews: {str(e)}")
        raise InternalServerException("Error al obtener las reseñas")
    return success_response(
        "Reseñas obtenidas exitosamente",
        [_serialize(r, current_account) for r in reviews],
        total=total,
    )


@router.get("/{review_id}")
async def get_review_route(review_id: str, db: Session = Depends(get_db)):
    review = get_review(db, review_id)
    return success_response("Reseña obtenida exitosamente", _serialize(review))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_review_route(
    review_data: ReviewCreate,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(get_current_account),
):
    """Create a review (authenticated)."""
    try:
        review = create_review(db, review_data)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error creating review: {str(e)}")
        raise InternalServerException("Error al crear la reseña")
    return success_response("Reseña creada exitosamente", _serialize(review, current_account))


@router.put("/{review_id}")
async def update_review_route(
    review_id: str,
    review_data: ReviewUpdate,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(get_current_account),
):
    """Update a review (authenticated)."""
    try:
        review = update_review(db, review_id, review_data)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error updating review {review_id}: {str(e)}")
        raise InternalServerException("Error al actualizar la reseña")
    return success_response("Reseña actualizada exitosamente", _serialize(review, current_account))


@router.delete("/{review_id}")
async def delete_review_route(
    review_id: str,
    db: Session = Depends(get_db),
    current_account: CurrentAccount = Depends(get_current_account),
):
    """Delete a review (authenticated)."""
    try:
        delete_review(db, review_id)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error deleting review {review_id}: {str(e)}")
        raise InternalServerException("Error al eliminar la reseña")
    return success_response("Reseña eliminada exitosamente")
