"""
Tests for the role and ownership authorization gates.
"""
import pytest

from clinic.auth.dependencies import check_roles, check_ownership_or_admin
from clinic.auth.exceptions import (
    InsufficientRoleException,
    NotAuthenticatedException,
    UnauthorizedAccessException,
)
from clinic.auth.models import UserRole, AccountVariant
from clinic.auth.schemas import CurrentAccount


def _identity(account_id="u1", role=UserRole.PATIENT):
    variant = AccountVariant.PATIENT if role == UserRole.PATIENT else AccountVariant.DOCTOR
    return CurrentAccount(id=account_id, variant=variant, role=role, email=f"{account_id}@clinica.com", name="Test")


def test_role_gate_allows_listed_role():
    identity = _identity(role=UserRole.DOCTOR)
    assert check_roles(identity, ["doctor", "admin"]) is identity


def test_role_gate_is_case_insensitive():
    identity = _identity(role=UserRole.ADMIN)
    assert check_roles(identity, ["ADMIN"]) is identity


def test_role_gate_rejects_other_roles_with_details():
    with pytest.raises(InsufficientRoleException) as exc_info:
        check_roles(_identity(role=UserRole.PATIENT), [UserRole.DOCTOR, UserRole.ADMIN])

    exc = exc_info.value
    assert exc.status_code == 403
    assert exc.data == {"required": ["doctor", "admin"], "current": "patient"}


def test_gates_require_an_identity():
    with pytest.raises(NotAuthenticatedException):
        check_roles(None, ["admin"])
    with pytest.raises(NotAuthenticatedException):
        check_ownership_or_admin(None, "u1")


def test_owner_passes_ownership_gate():
    identity = _identity("u1")
    assert check_ownership_or_admin(identity, "u1") is identity


def test_other_account_fails_ownership_gate():
    with pytest.raises(UnauthorizedAccessException):
        check_ownership_or_admin(_identity("u1"), "u2")


def test_admin_passes_ownership_gate_for_any_account():
    identity = _identity("u1", role=UserRole.ADMIN)
    assert check_ownership_or_admin(identity, "u2") is identity


def test_doctor_cannot_reach_admin_route(client, doctor, auth_headers):
    response = client.get("/api/pacientes", headers=auth_headers(doctor))

    assert response.status_code == 403
    body = response.json()
    assert body["error"] == "INSUFFICIENT_ROLE"
    assert body["data"]["current"] == "doctor"


def test_admin_reaches_admin_route(client, admin, patient, auth_headers):
    response = client.get("/api/pacientes", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["total"] == 1


def test_patient_reads_own_profile_only(client, make_patient, auth_headers):
    owner = make_patient()
    other = make_patient(email="otra@clinica.com", name="Otra Persona")

    own = client.get(f"/api/pacientes/{owner.id}", headers=auth_headers(owner))
    foreign = client.get(f"/api/pacientes/{other.id}", headers=auth_headers(owner))

    assert own.status_code == 200
    assert foreign.status_code == 403
    assert foreign.json()["error"] == "UNAUTHORIZED_ACCESS"
