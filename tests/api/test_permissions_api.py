"""Permissions API: catalog entries and the explicit capability check."""

from httpx import AsyncClient


async def test_check_allowed_for_held_permission(
    client: AsyncClient, bind_actor, headers_for
) -> None:
    await bind_actor("viewer-3", "Viewer")
    response = await client.post(
        "/api/v1/permissions/check",
        json={"permissions": ["campaigns_read"]},
        headers=headers_for("viewer-3"),
    )
    assert response.status_code == 200
    assert response.json() == {"allowed": True, "elevated": False, "reason": None}


async def test_check_denied_returns_reason_not_error(
    client: AsyncClient, bind_actor, headers_for
) -> None:
    await bind_actor("viewer-4", "Viewer")
    response = await client.post(
        "/api/v1/permissions/check",
        json={"permissions": ["campaigns_read", "campaigns_delete"], "mode": "all"},
        headers=headers_for("viewer-4"),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["allowed"] is False
    assert body["reason"]["error"] == "CAPABILITY_DENIED"
    assert body["reason"]["details"]["requiredPermission"] == "campaigns_delete"
    assert body["reason"]["details"]["availableActions"] == ["read"]


async def test_check_any_mode(client: AsyncClient, bind_actor, headers_for) -> None:
    await bind_actor("viewer-5", "Viewer")
    response = await client.post(
        "/api/v1/permissions/check",
        json={"permissions": ["campaigns_delete", "reports_read"], "mode": "any"},
        headers=headers_for("viewer-5"),
    )
    assert response.json()["allowed"] is True


async def test_check_elevated(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.post(
        "/api/v1/permissions/check",
        json={"permissions": ["users_manage"]},
        headers=admin_headers,
    )
    assert response.json() == {"allowed": True, "elevated": True, "reason": None}


async def test_check_malformed_key_is_400(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/permissions/check",
        json={"permissions": ["campaigns-read"]},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "permission"}


async def test_check_requires_keys(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.post(
        "/api/v1/permissions/check", json={"permissions": []}, headers=admin_headers
    )
    assert response.status_code == 422


async def test_permission_catalog_crud(
    client: AsyncClient, admin_headers: dict[str, str], seeded
) -> None:
    modules = await client.get("/api/v1/modules", headers=admin_headers)
    reports = next(m for m in modules.json() if m["name"] == "reports")

    created = await client.post(
        "/api/v1/permissions",
        json={"module_id": reports["id"], "action": "manage", "description": "Schedule reports"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    permission = created.json()
    assert permission["key"] == "reports_manage"
    assert permission["display_name"] == "Manage Reports"

    duplicate = await client.post(
        "/api/v1/permissions",
        json={"module_id": reports["id"], "action": "manage"},
        headers=admin_headers,
    )
    assert duplicate.status_code == 409

    listed = await client.get(
        f"/api/v1/permissions?module_id={reports['id']}", headers=admin_headers
    )
    assert [p["key"] for p in listed.json()] == [
        "reports_export",
        "reports_manage",
        "reports_read",
    ]

    fetched = await client.get(f"/api/v1/permissions/{permission['id']}", headers=admin_headers)
    assert fetched.json() == permission

    deleted = await client.delete(f"/api/v1/permissions/{permission['id']}", headers=admin_headers)
    assert deleted.status_code == 204
    gone = await client.get(f"/api/v1/permissions/{permission['id']}", headers=admin_headers)
    assert gone.status_code == 404


async def test_deleting_permission_revokes_it(
    client: AsyncClient, admin_headers: dict[str, str], bind_actor, headers_for
) -> None:
    await bind_actor("viewer-6", "Viewer")
    listed = await client.get("/api/v1/permissions", headers=admin_headers)
    reports_read = next(p for p in listed.json() if p["key"] == "reports_read")

    await client.delete(f"/api/v1/permissions/{reports_read['id']}", headers=admin_headers)

    mine = await client.get("/api/v1/actors/me/permissions", headers=headers_for("viewer-6"))
    assert "reports_read" not in mine.json()["permissions"]


async def test_create_permission_unknown_action_is_422(
    client: AsyncClient, admin_headers: dict[str, str], seeded
) -> None:
    response = await client.post(
        "/api/v1/permissions",
        json={"module_id": "whatever", "action": "approve"},
        headers=admin_headers,
    )
    assert response.status_code == 422
