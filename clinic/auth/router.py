"""
Authentication routes: registration, login, logout, profile and password recovery.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..core.responses import success_response
from ..database import get_db
from ..exceptions import AppException, InternalServerException, clear_auth_cookie
from .dependencies import get_current_account, get_optional_current_account
from .recovery import request_recovery_code, verify_recovery_code, reset_password
from .schemas import (
    PatientRegistration,
    LoginRequest,
    RecoveryCodeRequest,
    RecoveryCodeVerify,
    NewPasswordRequest,
    CurrentAccount,
)
from .service import register_patient, login_account

# Set up logging
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(tags=["Autenticación"])


def set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    """Store the session token in the httpOnly auth cookie."""
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.cookie_max_age,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


@router.post("/registrarPacientes", status_code=status.HTTP_201_CREATED, summary="Patient Self-Registration")
async def register_patient_route(
    registration: PatientRegistration,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Patient self-registration endpoint.

    Creates the account, issues a session token and sets the auth cookie.

    Raises:
        EmailAlreadyExistsException: If the email belongs to a patient or doctor
    """
    try:
        result = await register_patient(db, registration, settings)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error during patient registration: {str(e)}")
        raise InternalServerException("Error al registrar el paciente")

    set_auth_cookie(response, result["token"], settings)
    return success_response("Paciente registrado exitosamente", result)


@router.post("/iniciarSesion", summary="Login")
async def login_route(
    login_data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Login endpoint for patients, doctors and administrators.

    Raises:
        InvalidCredentialsException: If credentials are invalid
    """
    try:
        result = await login_account(db, login_data.email, login_data.password, settings)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error during login: {str(e)}")
        raise InternalServerException("Error al iniciar sesión")

    set_auth_cookie(response, result["token"], settings)
    return success_response("Inicio de sesión exitoso", result)


@router.post("/cerrarSesion", summary="Logout")
async def logout_route(
    response: Response,
    settings: Settings = Depends(get_settings),
    current_account: Optional[CurrentAccount] = Depends(get_optional_current_account),
):
    """
    Logout endpoint.

    Tokens are stateless; logging out only clears the auth cookie.
    """
    clear_auth_cookie(response, settings)
    if current_account is not None:
        logger.info(f"Account {current_account.id} logged out")
    return success_response("Sesión cerrada exitosamente")


@router.get("/perfil", summary="Current Account")
async def current_account_route(current_account: CurrentAccount = Depends(get_current_account)):
    """Return the identity context of the authenticated caller."""
    return success_response("Usuario autenticado", current_account.to_api())


@router.post("/recuperarContrasena/solicitarCodigo", summary="Request Recovery Code")
async def request_code_route(
    payload: RecoveryCodeRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Send a 6-digit recovery code by email.

    Always answers with the same envelope, whether or not the email exists.
    """
    try:
        message = await request_recovery_code(db, payload.email, settings)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error while issuing recovery code: {str(e)}")
        raise InternalServerException("Error al procesar la solicitud")
    return success_response(message)


@router.post("/recuperarContrasena/verificarCodigo", summary="Verify Recovery Code")
async def verify_code_route(
    payload: RecoveryCodeVerify,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Check a recovery code; the code stays valid for the reset step."""
    try:
        await verify_recovery_code(db, payload.email, payload.code, settings)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error while verifying recovery code: {str(e)}")
        raise InternalServerException("Error al verificar el código")
    return success_response("Código verificado correctamente")


@router.post("/recuperarContrasena/nuevaContrasena", summary="Reset Password")
async def reset_password_route(
    payload: NewPasswordRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Set a new password using a valid recovery code."""
    try:
        await reset_password(db, payload.email, payload.code, payload.new_password, settings)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error during password reset: {str(e)}")
        raise InternalServerException("Error al actualizar la contraseña")
    return success_response("Contraseña actualizada exitosamente")
