"""
Tests for session tokens, password hashing and recovery code generation.
"""
from datetime import timedelta

import pytest
from jose import jwt

from clinic.config import get_settings
from clinic.core import security
from clinic.core.security import (
    create_access_token,
    verify_token,
    hash_password,
    verify_password,
    generate_recovery_code,
    TokenExpiredError,
    TokenMalformedError,
    TokenInvalidError,
)


def _token(**overrides):
    claims = dict(
        account_id="acc-1",
        email="ana@clinica.com",
        role="patient",
        variant="patient",
        display_name="Ana Perez",
    )
    claims.update(overrides)
    return create_access_token(**claims)


def test_issued_token_verifies_with_identity_claims():
    token, expires_at = _token()
    claims = verify_token(token)

    assert claims["id"] == "acc-1"
    assert claims["email"] == "ana@clinica.com"
    assert claims["role"] == "patient"
    assert claims["type"] == "patient"
    assert claims["nombre"] == "Ana Perez"
    assert claims["exp"] == int(expires_at.timestamp())


def test_default_lifetime_is_seven_days():
    token, expires_at = _token()
    claims = verify_token(token)
    assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())


def test_expired_token_is_reported_as_expired():
    token, _ = _token(expires_delta=timedelta(seconds=-10))
    with pytest.raises(TokenExpiredError):
        verify_token(token)


def test_token_signed_with_another_secret_is_malformed():
    settings = get_settings().model_copy(update={"secret_key": "another-secret"})
    token, _ = _token(settings=settings)
    with pytest.raises(TokenMalformedError):
        verify_token(token)


def test_garbage_token_is_malformed():
    with pytest.raises(TokenMalformedError):
        verify_token("not-a-jwt")


def test_token_without_account_id_is_invalid():
    settings = get_settings()
    token = jwt.encode({"email": "x@clinica.com"}, settings.secret_key, algorithm=settings.algorithm)
    with pytest.raises(TokenInvalidError):
        verify_token(token)


def test_password_hash_round_trip():
    hashed = hash_password("secret1")
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)
    assert not verify_password("", hashed)


def test_recovery_codes_are_six_digits_in_range():
    for _ in range(1000):
        code = generate_recovery_code()
        assert len(code) == 6
        assert code.isascii() and code.isdigit()
        assert 100000 <= int(code) <= 999999


@pytest.mark.parametrize("draw, expected", [(0, "100000"), (899999, "999999")])
def test_recovery_code_bounds_are_inclusive(monkeypatch, draw, expected):
    monkeypatch.setattr(security.secrets, "randbelow", lambda upper: draw)
    assert generate_recovery_code() == expected
