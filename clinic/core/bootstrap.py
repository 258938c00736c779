"""
Bootstrap utilities for first admin creation.
Creates the first administrator account from environment variables.
"""
import logging
from sqlalchemy.orm import Session

from ..auth.accounts import email_in_use
from ..auth.models import UserRole
from ..config import Settings
from ..doctors.models import Doctor

logger = logging.getLogger(__name__)

def admin_exists(db: Session) -> bool:
    """
    Check if any admin account exists in the database.

    Returns:
        bool: True if at least one admin exists, False otherwise
    """
    return db.query(Doctor.id).filter(Doctor.role == UserRole.ADMIN).first() is not None

def bootstrap_admin_if_needed(db: Session, settings: Settings) -> bool:
    """
    Create the first admin account if configured and no admin exists yet.

    Args:
        db: Database session
        settings: Application settings carrying the bootstrap credentials

    Returns:
        bool: True if an admin was created
    """
    if not settings.bootstrap_admin_email or not settings.bootstrap_admin_password:
        logger.info("Bootstrap admin credentials not configured; skipping")
        return False

    if admin_exists(db):
        logger.info("Admin account already exists; bootstrap not needed")
        return False

    if email_in_use(db, settings.bootstrap_admin_email):
        logger.warning(f"Bootstrap failed: Email {settings.bootstrap_admin_email} already exists")
        return False

    admin = Doctor(
        name=settings.bootstrap_admin_name,
        last_name="Sistema",
        specialty="Administración",
        email=settings.bootstrap_admin_email.strip().lower(),
        password=settings.bootstrap_admin_password,
        role=UserRole.ADMIN,
    )
    db.add(admin)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Bootstrap admin created: {admin.email}")
    return True
