"""
Outbound email for the authentication flows.

Delivery goes through SMTP with STARTTLS and a bounded number of retries.
Functions here are blocking; async callers run them in a worker thread.
"""
import logging
import smtplib
import socket
import ssl
import time
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Optional

from ..config import Settings, get_settings

# Set up logging
logger = logging.getLogger(__name__)

# SMTP delivery settings
SMTP_TIMEOUT = 30
MAX_RETRIES = 3
RETRY_DELAY = 2

PERMANENT_ERRORS = (smtplib.SMTPAuthenticationError, smtplib.SMTPRecipientsRefused)
TRANSIENT_ERRORS = (smtplib.SMTPException, socket.timeout, socket.gaierror, OSError)


class EmailDeliveryError(Exception):
    """Raised when an email could not be handed to the SMTP server."""


def validate_email_config(settings: Settings) -> bool:
    """
    Validates that all required email configuration variables are set.

    Returns:
        bool: True if all required config is present, False otherwise
    """
    required_configs = [
        settings.mail_username,
        settings.mail_password,
        settings.mail_from,
        settings.mail_server,
    ]
    missing_configs = [config for config in required_configs if not config]
    if missing_configs:
        logger.error(f"Missing email configuration: {len(missing_configs)} items")
        return False
    return True


def build_message(to_address: str, subject: str, html_body: str, settings: Settings) -> MIMEMultipart:
    """Assemble an HTML message with a Message-ID on the sender's domain."""
    msg = MIMEMultipart()
    msg["From"] = formataddr((settings.mail_from_name, settings.mail_from))
    msg["To"] = to_address
    msg["Subject"] = subject
    msg["Message-ID"] = make_msgid(domain=settings.mail_from.split("@")[-1])
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    return msg


def _deliver(msg: MIMEMultipart, settings: Settings) -> None:
    with smtplib.SMTP(settings.mail_server, settings.mail_port, timeout=SMTP_TIMEOUT) as server:
        server.ehlo()
        server.starttls(context=ssl.create_default_context())
        server.ehlo()
        server.login(settings.mail_username, settings.mail_password)
        server.send_message(msg)


def send_email(to_address: str, subject: str, html_body: str, settings: Optional[Settings] = None) -> str:
    """
    Send an HTML email, retrying transient SMTP and network failures.

    Authentication and recipient rejections fail immediately.

    Returns:
        str: Message-ID of the delivered email

    Raises:
        EmailDeliveryError: If configuration is missing or delivery fails
    """
    settings = settings or get_settings()
    if not validate_email_config(settings):
        raise EmailDeliveryError("Email configuration is incomplete")

    msg = build_message(to_address, subject, html_body, settings)
    last_error = None
    for attempt in range(1, MAX_RETRIES + 1):
        try:
            _deliver(msg, settings)
            logger.info(f"Email '{subject}' delivered to {to_address} (attempt {attempt}/{MAX_RETRIES})")
            return msg["Message-ID"]
        except PERMANENT_ERRORS as e:
            logger.error(f"SMTP rejected email to {to_address}: {str(e)}")
            raise EmailDeliveryError(str(e)) from e
        except TRANSIENT_ERRORS as e:
            last_error = e
            logger.warning(f"SMTP attempt {attempt}/{MAX_RETRIES} to {to_address} failed: {str(e)}")
            if attempt < MAX_RETRIES:
                time.sleep(RETRY_DELAY)

    raise EmailDeliveryError(f"Giving up after {MAX_RETRIES} attempts: {str(last_error)}")


def render_recovery_email(name: str, code: str, ttl_minutes: int, max_attempts: int) -> str:
    """Render the HTML body of the password recovery email."""
    return f"""
    <html>
        <head>
            <title>Recuperación de Contraseña - San Rafael</title>
            <style>
                body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
                .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
                .header {{ background-color: #1976d2; color: white; padding: 10px; text-align: center; }}
                .content {{ padding: 20px; border: 1px solid #ddd; }}
                .code {{ font-size: 32px; font-weight: bold; letter-spacing: 6px; text-align: center;
                        margin: 20px 0; padding: 10px; background-color: #f5f5f5; }}
                .footer {{ text-align: center; margin-top: 20px; font-size: 12px; color: #777; }}
            </style>
        </head>
        <body>
            <div class="container">
                <div class="header">
                    <h1>Clínica San Rafael</h1>
                </div>
                <div class="content">
                    <p>Hola {name},</p>
                    <p>Recibimos una solicitud para restablecer tu contraseña. Usa el siguiente código:</p>
                    <div class="code">{code}</div>
                    <p>El código expira en {ttl_minutes} minutos y admite un máximo de {max_attempts} intentos.</p>
                    <p>Si no solicitaste este cambio, ignora este correo. Tu contraseña no será modificada.</p>
                </div>
                <div class="footer">
                    &copy; {datetime.now().year} Clínica San Rafael.
                </div>
            </div>
        </body>
    </html>
    """


def send_password_recovery_email(to_address: str, code: str, name: str, settings: Optional[Settings] = None) -> str:
    """
    Send the recovery code to an account holder.

    Returns:
        str: Message-ID of the delivered email

    Raises:
        EmailDeliveryError: If delivery fails
    """
    settings = settings or get_settings()
    html_body = render_recovery_email(
        name=name,
        code=code,
        ttl_minutes=settings.recovery_code_ttl_minutes,
        max_attempts=settings.recovery_max_attempts,
    )
    return send_email(to_address, "Recuperación de Contraseña - San Rafael", html_body, settings)
