"""
Tests for registration, login, logout and the profile endpoint.
"""
from clinic.auth.models import UserRole
from clinic.core.security import verify_token
from clinic.patients.models import Patient

REGISTRATION = {
    "nombre": "Ana Perez",
    "correo": "Ana@Clinica.com",
    "contrasena": "secret1",
    "telefono": "5512345678",
}


def test_register_patient_sets_cookie_and_returns_token(client, db):
    response = client.post("/api/registrarPacientes", json=REGISTRATION)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Paciente registrado exitosamente"
    usuario = body["data"]["usuario"]
    assert usuario["correo"] == "ana@clinica.com"
    assert usuario["role"] == "patient"
    assert usuario["type"] == "patient"
    assert "contrasena" not in usuario
    assert "authToken" in response.cookies

    claims = verify_token(body["data"]["token"])
    assert claims["id"] == usuario["id"]
    assert claims["role"] == "patient"

    stored = db.query(Patient).filter(Patient.email == "ana@clinica.com").one()
    assert stored.password_hash != "secret1"
    assert stored.check_password("secret1")


def test_register_rejects_email_used_by_a_doctor(client, doctor):
    payload = dict(REGISTRATION, correo=doctor.email)
    response = client.post("/api/registrarPacientes", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "EMAIL_IN_USE"
    assert "authToken" not in response.cookies


def test_register_rejects_duplicate_patient_email(client, patient):
    response = client.post("/api/registrarPacientes", json=dict(REGISTRATION, correo=patient.email))
    assert response.status_code == 400
    assert response.json()["error"] == "EMAIL_IN_USE"


def test_register_validation_errors(client):
    response = client.post(
        "/api/registrarPacientes",
        json={"nombre": "A1", "correo": "ana@clinica.com", "contrasena": "123", "telefono": "12"},
    )

    assert response.status_code == 400
    errors = {error["campo"]: error for error in response.json()["errors"]}
    assert set(errors) == {"nombre", "contrasena", "telefono"}
    assert errors["telefono"]["valor"] == "12"
    assert errors["telefono"]["mensaje"] == "El teléfono debe contener entre 8 y 15 dígitos"


def test_patient_login(client, patient):
    response = client.post("/api/iniciarSesion", json={"correo": "ana@clinica.com", "contrasena": "secret1"})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Inicio de sesión exitoso"
    assert body["data"]["usuario"]["id"] == patient.id
    assert verify_token(body["data"]["token"])["role"] == "patient"
    assert response.cookies.get("authToken") == body["data"]["token"]


def test_login_is_case_insensitive_on_email(client, patient):
    response = client.post("/api/iniciarSesion", json={"correo": "ANA@clinica.com", "contrasena": "secret1"})
    assert response.status_code == 200


def test_doctor_login_reports_doctor_variant(client, doctor):
    response = client.post("/api/iniciarSesion", json={"correo": doctor.email, "contrasena": "secret1"})

    assert response.status_code == 200
    usuario = response.json()["data"]["usuario"]
    assert usuario["type"] == "doctor"
    assert usuario["apellido"] == "Gomez"


def test_login_stamps_last_login(client, db, patient):
    assert patient.last_login is None
    client.post("/api/iniciarSesion", json={"correo": patient.email, "contrasena": "secret1"})
    db.refresh(patient)
    assert patient.last_login is not None


def test_wrong_password_is_rejected_without_cookie(client, patient):
    response = client.post("/api/iniciarSesion", json={"correo": patient.email, "contrasena": "wrong-pass"})

    assert response.status_code == 401
    body = response.json()
    assert body["message"] == "Credenciales incorrectas"
    assert body["error"] == "INVALID_CREDENTIALS"
    assert "authToken" not in response.cookies


def test_unknown_and_inactive_accounts_look_like_bad_credentials(client, make_patient):
    make_patient(email="baja@clinica.com", active=False)

    unknown = client.post("/api/iniciarSesion", json={"correo": "nadie@clinica.com", "contrasena": "secret1"})
    inactive = client.post("/api/iniciarSesion", json={"correo": "baja@clinica.com", "contrasena": "secret1"})

    assert unknown.status_code == inactive.status_code == 401
    assert unknown.json() == inactive.json()


def test_logout_clears_cookie(client, patient):
    client.post("/api/iniciarSesion", json={"correo": patient.email, "contrasena": "secret1"})
    assert client.cookies.get("authToken")

    response = client.post("/api/cerrarSesion")

    assert response.status_code == 200
    assert response.json()["message"] == "Sesión cerrada exitosamente"
    assert "authToken=" in response.headers["set-cookie"]
    assert "Max-Age=0" in response.headers["set-cookie"]


def test_logout_without_session_still_succeeds(client):
    response = client.post("/api/cerrarSesion")
    assert response.status_code == 200


def test_profile_returns_identity_context(client, admin, auth_headers):
    response = client.get("/api/perfil", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == admin.id
    assert data["role"] == UserRole.ADMIN.value
    assert data["type"] == "doctor"
    assert data["nombre"] == "Marta Ruiz"
    assert data["active"] is True
