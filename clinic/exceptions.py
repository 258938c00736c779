"""
Global exception handlers and the base application exception.

Every failure leaves the API in the uniform envelope
``{"success": false, "message": ..., "error"?: ..., "data"?: ..., "errors"?: [...]}``.
"""
from typing import Any, Optional
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings

# Set up logging
logger = logging.getLogger(__name__)

VALUE_ERROR_PREFIX = "Value error, "


class AppException(Exception):
    """
    Base exception class for application-specific exceptions.

    Args:
        status_code: HTTP status of the response
        message: Human readable message placed in the envelope
        error: Machine readable error code (optional)
        data: Extra payload for the envelope (optional)
        clear_auth_cookie: Clear the session cookie on the error response
    """
    def __init__(
        self,
        status_code: int,
        message: str,
        error: Optional[str] = None,
        data: Any = None,
        clear_auth_cookie: bool = False,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error = error
        self.data = data
        self.clear_auth_cookie = clear_auth_cookie


class ResourceNotFoundException(AppException):
    """Raised when a requested record does not exist."""
    def __init__(self, message: str = "Recurso no encontrado"):
        super().__init__(status.HTTP_404_NOT_FOUND, message, error="NOT_FOUND")


class DuplicateResourceException(AppException):
    """Raised when a unique business key is already taken."""
    def __init__(self, message: str = "El recurso ya existe"):
        super().__init__(status.HTTP_400_BAD_REQUEST, message, error="DUPLICATE")


class InvalidUploadException(AppException):
    """Raised when an uploaded file has a forbidden type or size."""
    def __init__(self, message: str = "Archivo no permitido"):
        super().__init__(status.HTTP_400_BAD_REQUEST, message, error="INVALID_FILE")


class InternalServerException(AppException):
    """Generic 500 used by routers for unexpected failures."""
    def __init__(self, message: str = "Error interno del servidor"):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def error_body(message: str, error: Optional[str] = None, data: Any = None, errors: Optional[list] = None) -> dict:
    body = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    if data is not None:
        body["data"] = data
    if errors is not None:
        body["errors"] = errors
    return body


def clear_auth_cookie(response, settings=None) -> None:
    """Expire the session cookie using the same attributes it was set with."""
    settings = settings or get_settings()
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


async def app_exception_handler(request: Request, exc: AppException):
    """
    Handler for application-specific exceptions.

    Args:
        request: The request that caused the exception
        exc: The exception instance

    Returns:
        JSONResponse: Standardized error envelope
    """
    if exc.status_code >= 500:
        logger.error(f"Application error on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"Request to {request.url.path} rejected ({exc.status_code}): {exc.message}")
    response = JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error, exc.data),
    )
    if exc.clear_auth_cookie:
        clear_auth_cookie(response)
    return response


def _validation_value(error: dict) -> Any:
    if error.get("type") == "missing":
        return None
    value = error.get("input")
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, dict)):
        return value
    return str(value)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation exceptions.

    Each pydantic error becomes ``{campo, mensaje, valor}`` where ``campo`` is
    the name of the offending field as sent by the client.

    Args:
        request: The request that caused the exception
        exc: The validation exception instance

    Returns:
        JSONResponse: 400 envelope with validation details
    """
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        message = error.get("msg", "")
        if message.startswith(VALUE_ERROR_PREFIX):
            message = message[len(VALUE_ERROR_PREFIX):]
        errors.append({
            "campo": ".".join(location) if location else None,
            "mensaje": message,
            "valor": _validation_value(error),
        })
    logger.warning(f"Validation error on {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Errores de validación", errors=errors),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for framework HTTP errors (unknown routes, wrong methods, ...).
    """
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        content = error_body("Ruta no encontrada", "NOT_FOUND")
        content["path"] = request.url.path
    else:
        content = error_body(str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Last-resort handler: log the failure and hide internals from the client.
    """
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Error interno del servidor"),
    )


# Register exception handlers with FastAPI app
def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
