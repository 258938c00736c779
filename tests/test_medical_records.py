"""
Tests for medical records and their attachments.
"""
import asyncio

import pytest

from clinic.medical_records import router as records_router
from clinic.medical_records import service as records_service

DIAGNOSIS = "Hipertensión arterial leve"


@pytest.fixture
def fake_storage(monkeypatch):
    """Replace Cloudinary uploads and deletions with in-memory bookkeeping."""
    storage = {"uploaded": [], "deleted": []}

    def fake_upload(file, folder):
        url = f"https://res.cloudinary.com/demo/raw/upload/v1/{folder}/{file.filename}"
        storage["uploaded"].append(url)
        return url

    def fake_delete(url):
        storage["deleted"].append(url)
        return True

    monkeypatch.setattr(records_router, "upload_file", fake_upload)
    monkeypatch.setattr(records_service, "delete_file", fake_delete)
    return storage


def _record_form(patient, doctor, **extra):
    form = {"idPaciente": patient.id, "idDoctor": doctor.id, "diagnostico": DIAGNOSIS}
    form.update(extra)
    return form


def test_records_are_restricted_to_doctors_and_admins(client, patient, doctor, auth_headers):
    assert client.get("/api/historias").status_code == 401
    assert client.get("/api/historias", headers=auth_headers(patient)).status_code == 403
    assert client.get("/api/historias", headers=auth_headers(doctor)).status_code == 200


def test_doctor_writes_record_with_attachments(client, patient, doctor, auth_headers, fake_storage):
    response = client.post(
        "/api/historias",
        data=_record_form(patient, doctor, tratamiento="Dieta baja en sodio"),
        files=[
            ("archivosAdjuntos", ("analisis.pdf", b"%PDF-1.4", "application/pdf")),
            ("archivosAdjuntos", ("placa.png", b"\x89PNG", "image/png")),
        ],
        headers=auth_headers(doctor),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["diagnostico"] == DIAGNOSIS
    assert data["archivosAdjuntos"] == fake_storage["uploaded"]
    assert len(data["archivosAdjuntos"]) == 2


def test_short_diagnosis_is_rejected(client, patient, doctor, auth_headers):
    response = client.post(
        "/api/historias",
        data=_record_form(patient, doctor, diagnostico="Gripe"),
        headers=auth_headers(doctor),
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["campo"] == "diagnostico"


def test_too_many_attachments_are_rejected(client, patient, doctor, auth_headers, fake_storage):
    files = [("archivosAdjuntos", (f"doc{i}.pdf", b"%PDF", "application/pdf")) for i in range(6)]

    response = client.post("/api/historias", data=_record_form(patient, doctor), files=files, headers=auth_headers(doctor))

    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_FILE"
    assert fake_storage["uploaded"] == []


def test_update_appends_attachments(client, patient, doctor, auth_headers, fake_storage):
    headers = auth_headers(doctor)
    created = client.post(
        "/api/historias",
        data=_record_form(patient, doctor),
        files=[("archivosAdjuntos", ("uno.pdf", b"%PDF", "application/pdf"))],
        headers=headers,
    ).json()["data"]

    response = client.put(
        f"/api/historias/{created['id']}",
        data={"tratamiento": "Control mensual"},
        files=[("archivosAdjuntos", ("dos.pdf", b"%PDF", "application/pdf"))],
        headers=headers,
    )

    data = response.json()["data"]
    assert data["tratamiento"] == "Control mensual"
    assert [url.rsplit("/", 1)[-1] for url in data["archivosAdjuntos"]] == ["uno.pdf", "dos.pdf"]


def test_delete_removes_stored_attachments(client, patient, doctor, auth_headers, fake_storage):
    headers = auth_headers(doctor)
    created = client.post(
        "/api/historias",
        data=_record_form(patient, doctor),
        files=[("archivosAdjuntos", ("uno.pdf", b"%PDF", "application/pdf"))],
        headers=headers,
    ).json()["data"]

    response = client.delete(f"/api/historias/{created['id']}", headers=headers)

    assert response.status_code == 200
    assert fake_storage["deleted"] == created["archivosAdjuntos"]
    assert client.get(f"/api/historias/{created['id']}", headers=headers).status_code == 404


def test_filter_records_by_patient(client, make_patient, doctor, auth_headers, fake_storage):
    first = make_patient()
    second = make_patient(email="otra@clinica.com", name="Otra Persona")
    headers = auth_headers(doctor)
    client.post("/api/historias", data=_record_form(first, doctor), headers=headers)
    client.post("/api/historias", data=_record_form(second, doctor), headers=headers)

    response = client.get("/api/historias", params={"idPaciente": second.id}, headers=headers)

    assert response.json()["total"] == 1
    assert response.json()["data"][0]["paciente"]["nombre"] == "Otra Persona"


def _event_loop_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def test_storage_calls_run_outside_the_event_loop(client, patient, doctor, auth_headers, monkeypatch):
    on_loop = []

    def fake_upload(file, folder):
        on_loop.append(_event_loop_running())
        return f"https://res.cloudinary.com/demo/raw/upload/v1/{folder}/{file.filename}"

    def fake_delete(url):
        on_loop.append(_event_loop_running())
        return True

    monkeypatch.setattr(records_router, "upload_file", fake_upload)
    monkeypatch.setattr(records_service, "delete_file", fake_delete)
    headers = auth_headers(doctor)

    created = client.post(
        "/api/historias",
        data=_record_form(patient, doctor),
        files=[("archivosAdjuntos", ("uno.pdf", b"%PDF", "application/pdf"))],
        headers=headers,
    ).json()["data"]
    client.put(
        f"/api/historias/{created['id']}",
        files=[("archivosAdjuntos", ("dos.pdf", b"%PDF", "application/pdf"))],
        headers=headers,
    )
    client.delete(f"/api/historias/{created['id']}", headers=headers)

    assert on_loop == [False, False, False, False]
