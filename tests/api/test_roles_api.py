"""Roles API: CRUD, grant replacement and delete invariants over HTTP."""

from httpx import AsyncClient

from entitlements.infrastructure.persistence.repositories import GrantRepository


async def test_list_roles_highest_level_first(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.get("/api/v1/roles", headers=admin_headers)
    assert response.status_code == 200
    assert [r["name"] for r in response.json()] == ["SuperAdmin", "Admin", "Manager", "Viewer"]


async def test_create_role_with_initial_permissions(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/roles",
        json={
            "name": "Analyst",
            "level": 3,
            "description": "Reads and exports reports",
            "permissions": ["reports_read", "reports_export"],
        },
        headers=admin_headers,
    )
    assert response.status_code == 201
    role = response.json()
    assert role["name"] == "Analyst"
    assert role["tier"] == "standard"
    assert role["is_system_role"] is False

    grants = await client.get(f"/api/v1/roles/{role['id']}/permissions", headers=admin_headers)
    assert grants.status_code == 200
    assert grants.json() == {
        "role_id": role["id"],
        "permissions": ["reports_export", "reports_read"],
        "modules": {"reports": ["read", "export"]},
    }


async def test_create_role_with_unknown_permission_creates_nothing(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/roles",
        json={"name": "Broken", "level": 2, "permissions": ["reports_read", "reports_delete"]},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"
    roles = await client.get("/api/v1/roles", headers=admin_headers)
    assert "Broken" not in [r["name"] for r in roles.json()]


async def test_create_elevated_role_by_name(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/roles", json={"name": "super-admin", "level": 9}, headers=admin_headers
    )
    assert response.status_code == 201
    assert response.json()["tier"] == "elevated"


async def test_create_duplicate_role_is_409(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/roles", json={"name": "Manager", "level": 5}, headers=admin_headers
    )
    assert response.status_code == 409
    assert response.json()["error"] == "CATALOG_CONFLICT"


async def test_update_role(
    client: AsyncClient, admin_headers: dict[str, str], seeded
) -> None:
    role_id = seeded["Manager"].id
    response = await client.put(
        f"/api/v1/roles/{role_id}",
        json={"level": 6, "description": "Senior manager"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["level"] == 6
    assert response.json()["name"] == "Manager"


async def test_rename_system_role_is_409(
    client: AsyncClient, admin_headers: dict[str, str], seeded
) -> None:
    response = await client.put(
        f"/api/v1/roles/{seeded['Admin'].id}", json={"name": "Root"}, headers=admin_headers
    )
    assert response.status_code == 409
    assert response.json()["error"] == "SYSTEM_ROLE_PROTECTED"


async def test_get_missing_role_is_404(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.get("/api/v1/roles/missing", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["details"] == {"resource_type": "role", "resource_id": "missing"}


async def test_delete_role_blocked_by_active_binding(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    created = await client.post(
        "/api/v1/roles",
        json={"name": "Temp", "level": 2, "permissions": ["cards_read"]},
        headers=admin_headers,
    )
    role_id = created.json()["id"]
    bound = await client.post(f"/api/v1/actors/temp-user/roles/{role_id}", headers=admin_headers)
    assert bound.status_code == 201

    blocked = await client.delete(f"/api/v1/roles/{role_id}", headers=admin_headers)
    assert blocked.status_code == 409
    assert blocked.json()["error"] == "CATALOG_IN_USE"
    assert blocked.json()["details"]["active_bindings"] == 1

    await client.delete(f"/api/v1/actors/temp-user/roles/{role_id}", headers=admin_headers)
    deleted = await client.delete(f"/api/v1/roles/{role_id}", headers=admin_headers)
    assert deleted.status_code == 204
    missing = await client.get(f"/api/v1/roles/{role_id}", headers=admin_headers)
    assert missing.status_code == 404


async def test_replace_role_permissions(
    client: AsyncClient, admin_headers: dict[str, str], seeded
) -> None:
    role_id = seeded["Viewer"].id
    response = await client.put(
        f"/api/v1/roles/{role_id}/permissions",
        json={"permissions": ["brands_read", "brands_update", "brands_read"]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["permissions"] == ["brands_read", "brands_update"]
    assert response.json()["modules"] == {"brands": ["read", "update"]}


async def test_replace_with_unknown_key_keeps_previous_set(
    client: AsyncClient, admin_headers: dict[str, str], seeded
) -> None:
    role_id = seeded["Viewer"].id
    before = await client.get(f"/api/v1/roles/{role_id}/permissions", headers=admin_headers)
    response = await client.put(
        f"/api/v1/roles/{role_id}/permissions",
        json={"permissions": ["brands_read", "brands_fly"]},
        headers=admin_headers,
    )
    assert response.status_code == 400
    after = await client.get(f"/api/v1/roles/{role_id}/permissions", headers=admin_headers)
    assert after.json() == before.json()


async def test_manager_cannot_administer_roles(
    client: AsyncClient, bind_actor, headers_for, seeded
) -> None:
    await bind_actor("manager-1", "Manager")
    response = await client.put(
        f"/api/v1/roles/{seeded['Viewer'].id}/permissions",
        json={"permissions": []},
        headers=headers_for("manager-1"),
    )
    assert response.status_code == 403
    assert response.json()["details"]["requiredPermission"] == "roles_update"


async def test_update_role_rejects_explicit_null(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    created = await client.post(
        "/api/v1/roles", json={"name": "Auditor", "level": 2}, headers=admin_headers
    )
    role_id = created.json()["id"]
    for field in ("is_active", "level", "name"):
        response = await client.put(
            f"/api/v1/roles/{role_id}", json={field: None}, headers=admin_headers
        )
        assert response.status_code == 422, field
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert any(err["loc"][-1] == field for err in body["details"])

    cleared = await client.put(
        f"/api/v1/roles/{role_id}", json={"description": None}, headers=admin_headers
    )
    assert cleared.status_code == 200
    assert cleared.json()["is_active"] is True


class _CommitAwareCache:
    """Permission cache double that records the grant set visible at invalidation."""

    def __init__(self, session_factory, role_id: str) -> None:
        self._session_factory = session_factory
        self._role_id = role_id
        self.seen_at_invalidation: list[set[str]] = []

    def is_available(self) -> bool:
        return True

    async def get(self, key):
        return None

    async def set(self, key, value, ttl=None):
        return True

    async def delete(self, key):
        return True

    async def delete_pattern(self, pattern):
        async with self._session_factory() as session:
            self.seen_at_invalidation.append(
                await GrantRepository(session).get_permission_keys_for_roles([self._role_id])
            )
        return 1


async def test_grant_replace_invalidates_cache_after_commit(
    app, client: AsyncClient, admin_headers: dict[str, str], seeded, session_factory
) -> None:
    viewer_id = seeded["Viewer"].id
    cache = _CommitAwareCache(session_factory, viewer_id)
    app.state.cache = cache

    response = await client.put(
        f"/api/v1/roles/{viewer_id}/permissions",
        json={"permissions": ["reports_read", "reports_export"]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert cache.seen_at_invalidation == [{"reports_read", "reports_export"}]
