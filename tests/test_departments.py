"""
Tests for the department endpoints.
"""


def test_departments_are_public_and_sorted(client, admin, auth_headers):
    headers = auth_headers(admin)
    client.post("/api/departamentos", json={"nombre": "Pediatría"}, headers=headers)
    client.post("/api/departamentos", json={"nombre": "Cardiología", "descripcion": "Corazón"}, headers=headers)

    response = client.get("/api/departamentos")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert [d["nombre"] for d in body["data"]] == ["Cardiología", "Pediatría"]


def test_create_department_requires_admin(client, doctor, auth_headers):
    anonymous = client.post("/api/departamentos", json={"nombre": "Neurología"})
    as_doctor = client.post("/api/departamentos", json={"nombre": "Neurología"}, headers=auth_headers(doctor))

    assert anonymous.status_code == 401
    assert as_doctor.status_code == 403


def test_department_names_are_unique_ignoring_case(client, admin, auth_headers):
    headers = auth_headers(admin)
    created = client.post("/api/departamentos", json={"nombre": "  Neurología "}, headers=headers)
    assert created.status_code == 201
    assert created.json()["data"]["nombre"] == "Neurología"

    duplicate = client.post("/api/departamentos", json={"nombre": "NEUROLOGÍA"}, headers=headers)
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "DUPLICATE"


def test_update_and_delete_department(client, admin, auth_headers):
    headers = auth_headers(admin)
    department_id = client.post("/api/departamentos", json={"nombre": "Urgencias"}, headers=headers).json()["data"]["id"]

    updated = client.put(f"/api/departamentos/{department_id}", json={"descripcion": "24 horas"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["data"]["descripcion"] == "24 horas"
    assert updated.json()["data"]["nombre"] == "Urgencias"

    deleted = client.delete(f"/api/departamentos/{department_id}", headers=headers)
    assert deleted.status_code == 200

    missing = client.get(f"/api/departamentos/{department_id}")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Departamento no encontrado"
