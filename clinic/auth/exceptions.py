"""
Authentication, authorization and password-recovery exceptions.
"""
from typing import Iterable
from fastapi import status

from ..exceptions import AppException

class AuthException(AppException):
    """Base class for authentication exceptions."""
    def __init__(self, status_code: int, detail: str, error: str = "AUTH_ERROR", data=None, clear_auth_cookie: bool = False):
        super().__init__(status_code, detail, error=error, data=data, clear_auth_cookie=clear_auth_cookie)

class NoTokenException(AuthException):
    """Raised when the request carries neither a bearer header nor the session cookie."""
    def __init__(self, detail: str = "Acceso denegado. No se proporcionó token de autenticación"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail, error="NO_TOKEN")

class TokenExpiredException(AuthException):
    """Exception raised when token has expired."""
    def __init__(self, detail: str = "Token expirado. Por favor, inicia sesión nuevamente", clear_auth_cookie: bool = False):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail, error="TOKEN_EXPIRED", clear_auth_cookie=clear_auth_cookie)

class InvalidTokenException(AuthException):
    """Exception raised when token is invalid."""
    def __init__(self, detail: str = "Token inválido", clear_auth_cookie: bool = False):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail, error="INVALID_TOKEN", clear_auth_cookie=clear_auth_cookie)

class UserNotFoundException(AuthException):
    """Raised when a verified token references no account."""
    def __init__(self, detail: str = "Usuario no encontrado"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail, error="USER_NOT_FOUND")

class AccountDisabledException(AuthException):
    """Raised when the account behind a token has been deactivated."""
    def __init__(self, detail: str = "Cuenta desactivada. Contacta al administrador"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail, error="ACCOUNT_DISABLED")

class NotAuthenticatedException(AuthException):
    """Raised by an authorization gate that runs without an identity."""
    def __init__(self, detail: str = "Usuario no autenticado"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail, error="NOT_AUTHENTICATED")

class InsufficientRoleException(AuthException):
    """Exception raised when user doesn't have required role."""
    def __init__(self, required_roles: Iterable[str], user_role: str):
        required = [str(role) for role in required_roles]
        detail = f"Acceso denegado. Se requiere rol: {', '.join(required)}"
        super().__init__(
            status.HTTP_403_FORBIDDEN,
            detail,
            error="INSUFFICIENT_ROLE",
            data={"required": required, "current": user_role},
        )

class UnauthorizedAccessException(AuthException):
    """Raised when a caller touches another account's resource without admin role."""
    def __init__(self, detail: str = "No tienes permiso para acceder a este recurso"):
        super().__init__(status.HTTP_403_FORBIDDEN, detail, error="UNAUTHORIZED_ACCESS")

class InvalidCredentialsException(AuthException):
    """Exception raised when credentials are invalid."""
    def __init__(self, detail: str = "Credenciales incorrectas"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail, error="INVALID_CREDENTIALS")

class EmailAlreadyExistsException(AuthException):
    """Exception raised when email already exists in either account table."""
    def __init__(self, detail: str = "El correo ya está registrado"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, error="EMAIL_IN_USE")

# Password recovery

class RecoveryCodeInvalidException(AuthException):
    """No recovery is in flight for the account (or the account does not exist)."""
    def __init__(self, detail: str = "Código inválido o expirado"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, error="INVALID_OR_EXPIRED")

class TooManyAttemptsException(AuthException):
    """The recovery code has been guessed wrong too many times."""
    def __init__(self, detail: str = "Demasiados intentos. Solicita un nuevo código"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, error="TOO_MANY_ATTEMPTS")

class RecoveryCodeExpiredException(AuthException):
    """The recovery code lifetime has ended."""
    def __init__(self, detail: str = "El código ha expirado. Solicita uno nuevo"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, error="CODE_EXPIRED")

class IncorrectCodeException(AuthException):
    """The submitted recovery code does not match; discloses attempts left."""
    def __init__(self, attempts_left: int, detail: str = "Código incorrecto"):
        self.attempts_left = attempts_left
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            detail,
            error="INCORRECT_CODE",
            data={"attemptsLeft": attempts_left},
        )
