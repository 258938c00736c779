"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        environment: Deployment environment ("development", "production", ...)
        database_url: SQLAlchemy connection string
        secret_key: Secret key for JWT token signing
        algorithm: Algorithm used for JWT signing (typically HS256)
        access_token_expire_minutes: Session token lifetime in minutes (7 days)
        auth_cookie_name: Name of the cookie carrying the session token

        # Recovery settings
        recovery_code_ttl_minutes: Lifetime of a password recovery code
        recovery_max_attempts: Wrong guesses allowed per recovery code

        # Email settings
        mail_username: SMTP server username
        mail_password: SMTP server password
        mail_from: Sender email address
        mail_port: SMTP server port
        mail_server: SMTP server hostname

        # Cloudinary settings
        cloudinary_cloud_name / cloudinary_api_key / cloudinary_api_secret

        # Bootstrap admin settings (optional)
        bootstrap_admin_email: Email for first admin creation
        bootstrap_admin_password: Password for first admin creation
    """
    app_name: str = "API Clínica San Rafael"
    app_version: str = "1.0.0"
    environment: str = "development"

    # Database settings
    database_url: str = "sqlite:///./clinic.db"

    # JWT settings
    secret_key: str = "san_rafael_dev_secret_change_me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7
    auth_cookie_name: str = "authToken"

    # Password hashing
    bcrypt_rounds: int = 10

    # Recovery settings
    recovery_code_ttl_minutes: int = 15
    recovery_max_attempts: int = 3

    # Email settings
    mail_username: Optional[str] = None
    mail_password: Optional[str] = None
    mail_from: Optional[str] = None
    mail_from_name: str = "Clínica San Rafael"
    mail_port: int = 587
    mail_server: Optional[str] = None

    # Frontend settings
    frontend_url: str = "http://localhost:5173"
    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:5174",
        "http://localhost:3000",
    ]

    # Cloudinary settings
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    upload_max_bytes: int = 5 * 1024 * 1024

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_requests: int = 1000
    rate_limit_window_seconds: int = 15 * 60

    # Bootstrap admin settings (optional - only used for first admin creation)
    bootstrap_admin_email: Optional[str] = None
    bootstrap_admin_password: Optional[str] = None
    bootstrap_admin_name: str = "Administrador"

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cookie_secure(self) -> bool:
        return self.is_production

    @property
    def cookie_samesite(self) -> str:
        # Cross-site frontend in production requires SameSite=None (and Secure)
        return "none" if self.is_production else "lax"

    @property
    def cookie_max_age(self) -> int:
        return self.access_token_expire_minutes * 60

    @property
    def allowed_origins(self) -> List[str]:
        origins = list(self.cors_origins)
        if self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins


@lru_cache()
def get_settings() -> Settings:
    """
    Return the process-wide settings instance.

    Used as a FastAPI dependency so routes and auth components receive the
    configuration explicitly; tests may override it.
    """
    return Settings()


settings = get_settings()
