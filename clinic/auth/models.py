"""
Account model primitives shared by patients and doctors.

Patients and doctors live in separate tables but share one shape and one
capability set (authenticate, compare password, touch last login), provided
here as a declarative mixin.
"""
from datetime import datetime
from enum import Enum
from typing import Optional
from sqlalchemy import Column, String, Boolean, DateTime, JSON, func

from ..database import generate_id
from ..core.security import hash_password, verify_password, utcnow

MIN_PASSWORD_LENGTH = 6


class UserRole(str, Enum):
    """Roles carried by accounts and session tokens."""
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class AccountVariant(str, Enum):
    """Which account table an account lives in."""
    PATIENT = "patient"
    DOCTOR = "doctor"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class AccountMixin:
    """
    Columns and behavior common to every account table.

    Fields:
    - id: Opaque identifier, unique across both account tables
    - name: Display name
    - email: Unique, lower-cased email
    - password_hash: bcrypt hash, never serialized
    - active: Soft-delete marker
    - last_login: Last successful authentication
    - recovery_data: In-flight recovery code ``{code, expires, attempts}``
    - profile_image_url: Cloudinary URL of the profile photo
    """
    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)
    recovery_data = Column(JSON, nullable=True)
    profile_image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def password(self):
        raise AttributeError("password is write-only")

    @password.setter
    def password(self, plain_password: str) -> None:
        """Hash on write; the plaintext is never stored."""
        if not plain_password or len(plain_password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres")
        self.password_hash = hash_password(plain_password)

    def check_password(self, plain_password: str) -> bool:
        return verify_password(plain_password, self.password_hash)

    def touch_last_login(self, when: Optional[datetime] = None) -> None:
        self.last_login = when or utcnow()

    @property
    def role_value(self) -> str:
        return self.role.value if isinstance(self.role, Enum) else str(self.role)

    @property
    def display_name(self) -> str:
        return self.name
