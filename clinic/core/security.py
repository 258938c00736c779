"""
Core security utilities: password hashing, session tokens and recovery codes.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Tuple
from jose import jwt, JWTError, ExpiredSignatureError
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext
import secrets
import logging

from ..config import Settings, get_settings

# Set up logging
logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=get_settings().bcrypt_rounds,
)

RECOVERY_CODE_MIN = 100000
RECOVERY_CODE_MAX = 999999


class TokenError(Exception):
    """Base class for session token verification failures."""


class TokenExpiredError(TokenError):
    """The token was valid but its lifetime has ended."""


class TokenMalformedError(TokenError):
    """The token structure or signature could not be verified."""


class TokenInvalidError(TokenError):
    """The token verified but its claims are unusable."""


def utcnow() -> datetime:
    """Wall-clock time used for token, recovery and lastLogin stamps."""
    return datetime.now(timezone.utc)


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to compare against

    Returns:
        bool: True if password matches hash
    """
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    account_id: str,
    email: str,
    role: str,
    variant: str,
    display_name: str,
    settings: Optional[Settings] = None,
    expires_delta: Optional[timedelta] = None,
) -> Tuple[str, datetime]:
    """
    Create a signed session token for an account.

    Args:
        account_id: Id of the account
        email: Account email
        role: Role value ("patient", "doctor", "admin")
        variant: Account variant ("patient" or "doctor")
        display_name: Name shown by the frontend
        settings: Configuration carrying the signing secret and lifetime
        expires_delta: Override of the configured lifetime

    Returns:
        Tuple of (encoded token, expiry datetime)
    """
    settings = settings or get_settings()
    issued_at = utcnow()
    expire = issued_at + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))

    to_encode = {
        "id": account_id,
        "email": email,
        "role": role,
        "type": variant,
        "nombre": display_name,
        "iat": issued_at,
        "exp": expire,
    }
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    return encoded_jwt, expire


def verify_token(token: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Verify and decode a session token.

    Args:
        token: JWT token string
        settings: Configuration carrying the signing secret

    Returns:
        Dict containing the token claims

    Raises:
        TokenExpiredError: If the token lifetime has ended
        TokenMalformedError: If the signature or structure is invalid
        TokenInvalidError: If the claims are unusable
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpiredError(str(e)) from e
    except JWTClaimsError as e:
        raise TokenInvalidError(str(e)) from e
    except JWTError as e:
        raise TokenMalformedError(str(e)) from e

    if not payload.get("id"):
        raise TokenInvalidError("Token payload has no account id")
    return payload


def generate_recovery_code() -> str:
    """
    Generate a 6-digit numeric recovery code.

    Returns:
        str: Code in the inclusive range 100000-999999
    """
    return str(RECOVERY_CODE_MIN + secrets.randbelow(RECOVERY_CODE_MAX - RECOVERY_CODE_MIN + 1))
