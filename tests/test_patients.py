"""
Tests for patient profile endpoints.
"""
from clinic.patients import service as patient_service


def test_admin_lists_only_active_patients(client, admin, make_patient, auth_headers):
    make_patient()
    make_patient(email="baja@clinica.com", name="Baja Perez", active=False)

    response = client.get("/api/pacientes", headers=auth_headers(admin))

    body = response.json()
    assert body["total"] == 1
    profile = body["data"][0]
    assert profile["correo"] == "ana@clinica.com"
    assert "password_hash" not in profile
    assert "recovery_data" not in profile


def test_patient_updates_own_profile(client, patient, auth_headers):
    response = client.put(
        f"/api/pacientes/{patient.id}",
        data={"telefono": "5587654321", "direccion": "Calle 1"},
        headers=auth_headers(patient),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["telefono"] == "5587654321"
    assert data["direccion"] == "Calle 1"
    assert data["nombre"] == "Ana Perez"


def test_profile_update_is_validated(client, patient, auth_headers):
    response = client.put(f"/api/pacientes/{patient.id}", data={"telefono": "abc"}, headers=auth_headers(patient))
    assert response.status_code == 400
    assert response.json()["errors"][0]["campo"] == "telefono"


def test_new_photo_replaces_the_old_one(client, db, patient, auth_headers, monkeypatch):
    patient.profile_image_url = "https://res.cloudinary.com/demo/image/upload/v1/san_rafael/pacientes/old.png"
    db.commit()
    deleted = []
    monkeypatch.setattr(
        "clinic.patients.router.upload_file",
        lambda file, folder: "https://res.cloudinary.com/demo/image/upload/v2/san_rafael/pacientes/new.png",
    )
    monkeypatch.setattr(patient_service, "delete_file", lambda url: deleted.append(url) or True)

    response = client.put(
        f"/api/pacientes/{patient.id}",
        files={"fotoPerfil": ("new.png", b"\x89PNG", "image/png")},
        headers=auth_headers(patient),
    )

    assert response.status_code == 200
    assert response.json()["data"]["fotoPerfilUrl"].endswith("new.png")
    assert deleted == ["https://res.cloudinary.com/demo/image/upload/v1/san_rafael/pacientes/old.png"]


def test_photo_with_wrong_type_is_rejected(client, patient, auth_headers):
    response = client.put(
        f"/api/pacientes/{patient.id}",
        files={"fotoPerfil": ("notes.txt", b"hola", "text/plain")},
        headers=auth_headers(patient),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_FILE"


def test_admin_deactivates_patient(client, db, admin, patient, auth_headers):
    response = client.delete(f"/api/pacientes/{patient.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    db.refresh(patient)
    assert patient.active is False

    login = client.post("/api/iniciarSesion", json={"correo": patient.email, "contrasena": "secret1"})
    assert login.status_code == 401


def test_unknown_patient_is_not_found(client, admin, auth_headers):
    response = client.get("/api/pacientes/missing", headers=auth_headers(admin))
    assert response.status_code == 404
    assert response.json()["message"] == "Paciente no encontrado"
