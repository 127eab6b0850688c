"""Application wiring: unknown routes and request validation errors."""

from httpx import AsyncClient


async def test_unknown_route_uses_error_body(client: AsyncClient) -> None:
    response = await client.get("/api/v1/nope")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "HTTP_ERROR"


async def test_request_validation_error_is_422(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/roles", json={"name": "Too high", "level": 11}, headers=admin_headers
    )
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert any(err["loc"][-1] == "level" for err in body["details"])
