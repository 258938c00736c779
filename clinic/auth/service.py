"""
Authentication service layer: patient registration, login and session tokens.
"""
import logging
from typing import Dict, Any, Optional
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..core.security import create_access_token
from ..patients.models import Patient
from .accounts import Account, email_in_use, find_account_by_email
from .exceptions import InvalidCredentialsException, EmailAlreadyExistsException
from .models import UserRole
from .schemas import PatientRegistration, AccountSummary

# Set up logging
logger = logging.getLogger(__name__)


def account_summary(account: Account) -> Dict[str, Any]:
    """Public representation of an account for the frontend."""
    return AccountSummary(
        id=account.id,
        name=account.name,
        last_name=getattr(account, "last_name", None),
        email=account.email,
        role=account.role,
        variant=account.variant,
        profile_image_url=account.profile_image_url,
    ).to_api()


def issue_session_token(account: Account, settings: Optional[Settings] = None) -> str:
    """
    Create a session token for an account.

    Args:
        account: Patient or doctor account
        settings: Application settings

    Returns:
        str: Signed session token
    """
    token, _ = create_access_token(
        account_id=account.id,
        email=account.email,
        role=account.role_value,
        variant=account.variant.value,
        display_name=account.display_name,
        settings=settings,
    )
    return token


async def register_patient(
    db: Session,
    registration: PatientRegistration,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """
    Register a new patient account.

    Args:
        db: Database session
        registration: Validated registration data
        settings: Application settings

    Returns:
        Dict with the session token and the account summary

    Raises:
        EmailAlreadyExistsException: If the email belongs to any account
    """
    settings = settings or get_settings()
    if email_in_use(db, registration.email):
        logger.warning(f"Registration failed: Email {registration.email} already registered")
        raise EmailAlreadyExistsException()

    patient = Patient(
        name=registration.name,
        email=registration.email,
        password=registration.password,
        birth_date=registration.birth_date,
        phone=registration.phone,
        address=registration.address,
        role=UserRole.PATIENT,
    )
    db.add(patient)
    try:
        db.commit()
        db.refresh(patient)
    except Exception:
        db.rollback()
        raise

    logger.info(f"Patient registered: {patient.id} ({patient.email})")
    return {
        "token": issue_session_token(patient, settings),
        "usuario": account_summary(patient),
    }


async def login_account(
    db: Session,
    email: str,
    password: str,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """
    Authenticate a patient or doctor and generate a session token.

    Doctors are looked up before patients. Unknown, inactive and wrong-password
    logins are indistinguishable to the client.

    Args:
        db: Database session
        email: Account email
        password: Plain text password
        settings: Application settings

    Returns:
        Dict with the session token and the account summary

    Raises:
        InvalidCredentialsException: If credentials are invalid
    """
    settings = settings or get_settings()
    account = find_account_by_email(db, email, active_only=True)
    if account is None or not account.check_password(password):
        logger.warning(f"Login failed: Invalid credentials for {email}")
        raise InvalidCredentialsException()

    account.touch_last_login()
    db.commit()
    db.refresh(account)

    logger.info(f"Login successful: {account.variant.value} {account.id} ({account.email})")
    return {
        "token": issue_session_token(account, settings),
        "usuario": account_summary(account),
    }
