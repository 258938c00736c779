"""
Tests for the main application endpoints and the global error envelope.
"""


def test_root_endpoint(client):
    """
    Test the root endpoint returns the API information.
    """
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert "version" in data
    assert data["endpoints"]["citas"] == "/api/citas"


def test_health_check(client):
    """
    Test the health check endpoint returns a healthy status.
    """
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"


def test_unknown_route_uses_not_found_envelope(client):
    response = client.get("/api/no-existe")
    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "message": "Ruta no encontrada",
        "error": "NOT_FOUND",
        "path": "/api/no-existe",
    }


def test_responses_carry_request_id_and_security_headers(client):
    response = client.get("/health")
    assert response.headers["X-Request-ID"]
    assert "X-Process-Time" in response.headers
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_validation_errors_are_listed_per_field(client):
    response = client.post("/api/iniciarSesion", json={"correo": "no-es-correo"})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Errores de validación"
    fields = {error["campo"] for error in body["errors"]}
    assert fields == {"correo", "contrasena"}
    missing = next(error for error in body["errors"] if error["campo"] == "contrasena")
    assert missing["valor"] is None


def test_incoming_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "front-123"})
    assert response.headers["X-Request-ID"] == "front-123"
