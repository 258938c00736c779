"""
Test configuration for the clinic backend.
"""
import os

# Settings are read once at import time, so the test environment comes first
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinic.auth.models import UserRole
from clinic.auth.service import issue_session_token
from clinic.database import Base, get_db
from clinic.doctors.models import Doctor
from clinic.main import app
from clinic.patients.models import Patient

# Test database URL
TEST_DATABASE_URL = "sqlite:///./test.db"

# Create test database engine
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "secret1"


@pytest.fixture(scope="function")
def db():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def second_db(db):
    """
    A second, independent session on the test database, for interleaving
    two requests that work on the same rows.
    """
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db):
    """
    Create a test client with a test database session.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides = {}


@pytest.fixture
def make_patient(db):
    """Factory creating patient accounts directly in the database."""
    def _make(email="ana@clinica.com", name="Ana Perez", password=DEFAULT_PASSWORD, active=True, **extra):
        patient = Patient(name=name, email=email, password=password, active=active, **extra)
        db.add(patient)
        db.commit()
        db.refresh(patient)
        return patient
    return _make


@pytest.fixture
def make_doctor(db):
    """Factory creating doctor (or admin) accounts directly in the database."""
    def _make(
        email="luis@clinica.com",
        name="Luis",
        last_name="Gomez",
        specialty="Cardiología",
        password=DEFAULT_PASSWORD,
        role=UserRole.DOCTOR,
        active=True,
    ):
        doctor = Doctor(
            name=name,
            last_name=last_name,
            specialty=specialty,
            email=email,
            password=password,
            role=role,
            active=active,
        )
        db.add(doctor)
        db.commit()
        db.refresh(doctor)
        return doctor
    return _make


@pytest.fixture
def patient(make_patient):
    return make_patient()


@pytest.fixture
def doctor(make_doctor):
    return make_doctor()


@pytest.fixture
def admin(make_doctor):
    return make_doctor(email="admin@clinica.com", name="Marta", last_name="Ruiz", specialty="Administración", role=UserRole.ADMIN)


@pytest.fixture
def auth_headers():
    """Build a bearer Authorization header for an account."""
    def _headers(account):
        return {"Authorization": f"Bearer {issue_session_token(account)}"}
    return _headers
