def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "Timesheet API running"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/health/db").json() == {"status": "ok"}


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_request_id_echoed(client):
    generated = client.get("/health")
    supplied = client.get("/health", headers={"X-Request-ID": "abc123"})

    assert len(generated.headers["x-request-id"]) == 32
    assert supplied.headers["x-request-id"] == "abc123"
