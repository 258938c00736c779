"""
Credential store lookups spanning both account tables.

Email uniqueness across patients and doctors is enforced here by sequential
existence checks, not by a shared database constraint.
"""
from typing import Optional, Union
import logging

from sqlalchemy.orm import Session

from .models import normalize_email
from ..patients.models import Patient
from ..doctors.models import Doctor

# Set up logging
logger = logging.getLogger(__name__)

Account = Union[Patient, Doctor]


def find_account_by_id(db: Session, account_id: str, prefer_doctor: bool = False) -> Optional[Account]:
    """
    Look up an account by id in both tables.

    Args:
        db: Database session
        account_id: Account id taken from a token or path
        prefer_doctor: Search the doctors table first

    Returns:
        The account, or None if it is in neither table
    """
    order = (Doctor, Patient) if prefer_doctor else (Patient, Doctor)
    primary, fallback = order
    account = db.query(primary).filter(primary.id == account_id).first()
    if account is None:
        account = db.query(fallback).filter(fallback.id == account_id).first()
        if account is not None:
            logger.warning(
                f"Account {account_id} resolved in {fallback.__tablename__} "
                f"although the token pointed to {primary.__tablename__}"
            )
    return account


def find_account_by_email(db: Session, email: str, active_only: bool = False) -> Optional[Account]:
    """
    Look up an account by normalized email, doctors first.

    Args:
        db: Database session
        email: Raw email as submitted by the client
        active_only: Ignore soft-deleted accounts

    Returns:
        The account, or None
    """
    normalized = normalize_email(email)
    for model in (Doctor, Patient):
        query = db.query(model).filter(model.email == normalized)
        if active_only:
            query = query.filter(model.active.is_(True))
        account = query.first()
        if account is not None:
            return account
    return None


def email_in_use(db: Session, email: str, exclude_id: Optional[str] = None) -> bool:
    """
    Check whether an email is registered in either account table.

    Args:
        db: Database session
        email: Raw email
        exclude_id: Account id allowed to keep the email (updates)

    Returns:
        bool: True if another account already uses the email
    """
    normalized = normalize_email(email)
    for model in (Patient, Doctor):
        query = db.query(model.id).filter(model.email == normalized)
        if exclude_id is not None:
            query = query.filter(model.id != exclude_id)
        if query.first() is not None:
            return True
    return False
