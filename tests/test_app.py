"""Tests for application-level behaviour: health, envelopes and error mapping."""


async def test_health(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"


async def test_unknown_route_uses_envelope(client):
    response = await client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}


async def test_malformed_id_is_a_validation_error(client, auth_headers):
    response = await client.get("/api/videos/not-a-uuid", headers=auth_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Validation failed"
    assert "video_id" in body["message"]


async def test_validation_error_message_names_field(client):
    response = await client.post("/api/auth/login", json={"password": "secret123"})

    assert response.status_code == 400
    assert "email" in response.json()["message"]
