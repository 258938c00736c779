"""
Password recovery with short-lived, attempt-limited 6-digit codes.

The in-flight code lives on the account as ``recovery_data``:
``{"code": "123456", "expires": "<ISO-8601 UTC>", "attempts": 0}``.
It is cleared when the password is reset, when the attempts are exhausted
and when an expired code is presented. Expiry is checked lazily.
"""
import asyncio
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..core.security import generate_recovery_code, utcnow
from .accounts import Account, find_account_by_email
from .exceptions import (
    RecoveryCodeInvalidException,
    TooManyAttemptsException,
    RecoveryCodeExpiredException,
    IncorrectCodeException,
)
from .utils import send_password_recovery_email

# Set up logging
logger = logging.getLogger(__name__)

REQUEST_CODE_MESSAGE = "Si el correo existe, recibirás un código de recuperación"


def _clear_recovery(db: Session, account: Account) -> None:
    account.recovery_data = None
    db.commit()


def _check_code(db: Session, account: Optional[Account], code: str, settings: Settings) -> Account:
    """
    Validate a submitted code against the account's in-flight recovery.

    Wrong guesses are counted and persisted; the guess that uses up the last
    attempt clears the recovery and reports exhaustion.

    Raises:
        RecoveryCodeInvalidException: No recovery in flight
        TooManyAttemptsException: Attempts exhausted (recovery cleared)
        RecoveryCodeExpiredException: Code expired (recovery cleared)
        IncorrectCodeException: Wrong code, with attempts left
    """
    if account is None or not account.recovery_data:
        raise RecoveryCodeInvalidException()

    data = dict(account.recovery_data)
    max_attempts = settings.recovery_max_attempts
    attempts = int(data.get("attempts", 0))

    if attempts >= max_attempts:
        _clear_recovery(db, account)
        raise TooManyAttemptsException()

    expires = datetime.fromisoformat(data["expires"])
    if utcnow() > expires:
        _clear_recovery(db, account)
        raise RecoveryCodeExpiredException()

    if not secrets.compare_digest(str(data.get("code", "")), str(code)):
        attempts += 1
        # The guess that uses the last attempt exhausts the code immediately
        # rather than answering INCORRECT_CODE with attemptsLeft 0.
        if attempts >= max_attempts:
            logger.warning(f"Recovery attempts exhausted for account {account.id}")
            _clear_recovery(db, account)
            raise TooManyAttemptsException()
        account.recovery_data = {**data, "attempts": attempts}
        db.commit()
        raise IncorrectCodeException(attempts_left=max_attempts - attempts)

    return account


async def request_recovery_code(db: Session, email: str, settings: Optional[Settings] = None) -> str:
    """
    Start a recovery flow for an email.

    Unknown emails get the same answer as known ones and cause no mutation.
    Email delivery failures are logged; the stored code stays valid.

    Args:
        db: Database session
        email: Email as submitted by the client
        settings: Application settings

    Returns:
        str: The uniform response message
    """
    settings = settings or get_settings()
    account = find_account_by_email(db, email)
    if account is None:
        logger.info("Recovery code requested for an unknown email")
        return REQUEST_CODE_MESSAGE

    code = generate_recovery_code()
    expires = utcnow() + timedelta(minutes=settings.recovery_code_ttl_minutes)
    account.recovery_data = {"code": code, "expires": expires.isoformat(), "attempts": 0}
    db.commit()
    logger.info(f"Recovery code issued for account {account.id}")

    try:
        delivery_id = await asyncio.to_thread(
            send_password_recovery_email, account.email, code, account.display_name, settings
        )
        logger.info(f"Recovery email for account {account.id} delivered ({delivery_id})")
    except Exception as e:
        logger.error(f"Failed to send recovery email for account {account.id}: {str(e)}")

    return REQUEST_CODE_MESSAGE


async def verify_recovery_code(db: Session, email: str, code: str, settings: Optional[Settings] = None) -> None:
    """
    Check a recovery code without consuming it.

    The code stays usable until it is consumed by reset_password, expires
    or runs out of attempts.

    Raises:
        AuthException subclasses described in _check_code
    """
    settings = settings or get_settings()
    account = find_account_by_email(db, email)
    _check_code(db, account, code, settings)
    logger.info(f"Recovery code verified for account {account.id}")


async def reset_password(
    db: Session,
    email: str,
    code: str,
    new_password: str,
    settings: Optional[Settings] = None,
) -> None:
    """
    Set a new password with a valid recovery code, then clear the recovery.

    The code is validated again here, independently of any earlier
    verify_recovery_code call.
    """
    settings = settings or get_settings()
    account = find_account_by_email(db, email)
    _check_code(db, account, code, settings)

    account.password = new_password
    account.recovery_data = None
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Password reset completed for account {account.id}")
