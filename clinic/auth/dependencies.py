"""
FastAPI dependencies for authentication and authorization.

Authentication resolves the session token (bearer header first, then the
``authToken`` cookie) to a live, active account and exposes it as a
``CurrentAccount``. Authorization gates consume that identity:

- ``require_roles([...])`` for role-based access
- ``require_ownership_or_admin("id")`` for per-account resources
"""
from enum import Enum
from typing import Iterable, List, Optional, Tuple
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..core.security import verify_token, TokenError, TokenExpiredError
from ..database import get_db
from .accounts import Account, find_account_by_id
from .exceptions import (
    AuthException,
    NoTokenException,
    TokenExpiredException,
    InvalidTokenException,
    UserNotFoundException,
    AccountDisabledException,
    NotAuthenticatedException,
    InsufficientRoleException,
    UnauthorizedAccessException,
)
from .models import UserRole
from .schemas import CurrentAccount

# Set up logging
logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

TOKEN_SOURCE_HEADER = "header"
TOKEN_SOURCE_COOKIE = "cookie"


def extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
    settings: Settings,
) -> Tuple[Optional[str], Optional[str]]:
    """
    Find the session token on the request.

    Returns:
        Tuple of (token, source) where source is "header" or "cookie";
        (None, None) when the request carries no token.
    """
    if credentials is not None and credentials.credentials:
        return credentials.credentials, TOKEN_SOURCE_HEADER
    cookie_token = request.cookies.get(settings.auth_cookie_name)
    if cookie_token:
        return cookie_token, TOKEN_SOURCE_COOKIE
    return None, None


def resolve_account(db: Session, token: str, from_cookie: bool, settings: Settings) -> Account:
    """
    Verify a token and load the live account it references.

    Args:
        db: Database session
        token: Raw session token
        from_cookie: The token came from the session cookie, which must be
            cleared if the token turns out to be unusable
        settings: Configuration carrying the signing secret

    Returns:
        The active account

    Raises:
        TokenExpiredException / InvalidTokenException: Token rejected
        UserNotFoundException: No account with the token's id
        AccountDisabledException: The account was soft-deleted
    """
    try:
        claims = verify_token(token, settings)
    except TokenExpiredError:
        raise TokenExpiredException(clear_auth_cookie=from_cookie)
    except TokenError as e:
        logger.warning(f"Rejected session token: {str(e)}")
        raise InvalidTokenException(clear_auth_cookie=from_cookie)

    claimed_role = str(claims.get("role") or "").lower()
    prefer_doctor = claims.get("type") == "doctor" or claimed_role in (UserRole.DOCTOR.value, UserRole.ADMIN.value)

    account = find_account_by_id(db, str(claims["id"]), prefer_doctor=prefer_doctor)
    if account is None:
        raise UserNotFoundException()
    if not account.active:
        raise AccountDisabledException()
    return account


def to_current_account(account: Account) -> CurrentAccount:
    return CurrentAccount(
        id=account.id,
        variant=account.variant,
        role=account.role,
        email=account.email,
        name=account.display_name,
        is_active=account.active,
    )


def touch_last_login(db: Session, account: Account) -> None:
    """Best-effort lastLogin stamp; failures are logged and never fail the request."""
    try:
        account.touch_last_login()
        db.commit()
    except Exception as e:
        db.rollback()
        logger.warning(f"Could not update last login for account {account.id}: {str(e)}")


async def get_current_account(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CurrentAccount:
    """
    Get the authenticated account for the request.

    Args:
        request: Incoming request (cookie source)
        credentials: Bearer credentials, if any
        db: Database session
        settings: Application settings

    Returns:
        CurrentAccount: Identity context, also stored on ``request.state.account``

    Raises:
        NoTokenException: If no token is present
        AuthException: If the token or the account is not usable
    """
    token, source = extract_token(request, credentials, settings)
    if not token:
        raise NoTokenException()

    account = resolve_account(db, token, source == TOKEN_SOURCE_COOKIE, settings)
    current_account = to_current_account(account)
    touch_last_login(db, account)

    request.state.account = current_account
    return current_account


async def get_optional_current_account(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Optional[CurrentAccount]:
    """
    Like get_current_account, but anonymous or unusable credentials yield None
    instead of an error. Used by endpoints that only personalize output.
    """
    token, source = extract_token(request, credentials, settings)
    if not token:
        return None
    try:
        account = resolve_account(db, token, source == TOKEN_SOURCE_COOKIE, settings)
    except AuthException as e:
        logger.debug(f"Optional authentication ignored: {e.message}")
        return None
    except Exception as e:
        db.rollback()
        logger.warning(f"Optional authentication failed, continuing anonymously: {str(e)}")
        return None

    current_account = to_current_account(account)
    request.state.account = current_account
    return current_account


def _role_name(role) -> str:
    return (role.value if isinstance(role, Enum) else str(role)).lower()


def check_roles(current_account: Optional[CurrentAccount], allowed_roles: Iterable) -> CurrentAccount:
    """
    Role gate: compare the caller's role (case-insensitive) against a set.

    Raises:
        NotAuthenticatedException: No identity on the request
        InsufficientRoleException: Role not allowed
    """
    if current_account is None:
        raise NotAuthenticatedException()
    allowed = [_role_name(role) for role in allowed_roles]
    current_role = _role_name(current_account.role)
    if current_role not in allowed:
        logger.warning(f"Account {current_account.id} with role {current_role} denied; requires {allowed}")
        raise InsufficientRoleException(allowed, current_role)
    return current_account


def check_ownership_or_admin(current_account: Optional[CurrentAccount], target_id) -> CurrentAccount:
    """
    Ownership gate: the caller must be admin or the target account itself.

    Raises:
        NotAuthenticatedException: No identity on the request
        UnauthorizedAccessException: Caller is neither owner nor admin
    """
    if current_account is None:
        raise NotAuthenticatedException()
    if current_account.is_admin or current_account.id == str(target_id):
        return current_account
    logger.warning(f"Account {current_account.id} denied access to resource of account {target_id}")
    raise UnauthorizedAccessException()


def require_roles(allowed_roles: List[UserRole]):
    """
    Dependency factory for role-based access control.

    Args:
        allowed_roles: Roles allowed to access the endpoint

    Returns:
        A dependency returning the CurrentAccount if the role is allowed
    """
    def role_checker(current_account: CurrentAccount = Depends(get_current_account)) -> CurrentAccount:
        return check_roles(current_account, allowed_roles)
    return role_checker


def require_ownership_or_admin(param_name: str = "id"):
    """
    Dependency factory for per-account resources.

    Args:
        param_name: Path parameter holding the target account id
    """
    def ownership_checker(
        request: Request,
        current_account: CurrentAccount = Depends(get_current_account),
    ) -> CurrentAccount:
        return check_ownership_or_admin(current_account, request.path_params.get(param_name))
    return ownership_checker


require_admin = require_roles([UserRole.ADMIN])
require_doctor_or_admin = require_roles([UserRole.DOCTOR, UserRole.ADMIN])
