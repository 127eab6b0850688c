"""Multi-key and module-level route gates on a business router."""

from typing import Annotated

import pytest
from fastapi import APIRouter, Depends
from httpx import AsyncClient

from entitlements.api.v1.dependencies import (
    require_all_permissions,
    require_any_permission,
    require_module_access,
)
from entitlements.application.dtos.actor import Actor


def _gated_router() -> APIRouter:
    router = APIRouter()

    @router.get("/export")
    async def export_anything(
        actor: Annotated[
            Actor, Depends(require_any_permission("campaigns_export", "reports_export"))
        ],
    ):
        return {"actor": actor.id}

    @router.get("/campaigns/export")
    async def export_campaigns(
        actor: Annotated[
            Actor, Depends(require_all_permissions("campaigns_read", "campaigns_export"))
        ],
    ):
        return {"actor": actor.id}

    @router.get("/campaigns")
    async def campaigns_home(
        actor: Annotated[Actor, Depends(require_module_access("campaigns"))],
    ):
        return {"actor": actor.id}

    return router


@pytest.fixture
def gated_app(app):
    app.include_router(_gated_router(), prefix="/api/v1/gated")
    return app


async def test_any_permission_gate(
    client: AsyncClient, gated_app, bind_actor, headers_for
) -> None:
    await bind_actor("user-viewer", "Viewer")
    await bind_actor("user-manager", "Manager")

    denied = await client.get("/api/v1/gated/export", headers=headers_for("user-viewer"))
    assert denied.status_code == 403
    body = denied.json()
    assert body["error"] == "CAPABILITY_DENIED"
    assert body["details"]["requiredPermission"] == "campaigns_export"
    assert body["details"]["userRole"] == "Viewer"

    allowed = await client.get("/api/v1/gated/export", headers=headers_for("user-manager"))
    assert allowed.status_code == 200
    assert allowed.json() == {"actor": "user-manager"}


async def test_all_permissions_gate_reports_first_missing_key(
    client: AsyncClient, gated_app, admin_headers, bind_actor, headers_for
) -> None:
    await bind_actor("user-manager", "Manager")

    denied = await client.get(
        "/api/v1/gated/campaigns/export", headers=headers_for("user-manager")
    )
    assert denied.status_code == 403
    details = denied.json()["details"]
    assert details["requiredPermission"] == "campaigns_export"
    assert details["availableActions"] == ["read", "create", "update"]

    assert (
        await client.get("/api/v1/gated/campaigns/export", headers=admin_headers)
    ).status_code == 200


async def test_module_access_gate(
    client: AsyncClient, gated_app, seeded, bind_actor, headers_for
) -> None:
    await bind_actor("user-viewer", "Viewer")

    allowed = await client.get("/api/v1/gated/campaigns", headers=headers_for("user-viewer"))
    assert allowed.status_code == 200

    denied = await client.get("/api/v1/gated/campaigns", headers=headers_for("user-unbound"))
    assert denied.status_code == 403
    body = denied.json()
    assert body["error"] == "CAPABILITY_DENIED"
    assert body["details"]["requiredModule"] == "campaigns"
    assert body["details"]["userRole"] == "none"
    assert body["details"]["availableActions"] == []


def test_gates_validate_keys_when_declared() -> None:
    with pytest.raises(ValueError):
        require_any_permission()
    with pytest.raises(ValueError):
        require_all_permissions()
    with pytest.raises(ValueError):
        require_any_permission("campaigns_read", "campaigns_fly")
    with pytest.raises(ValueError):
        require_all_permissions("nounderscore")
    with pytest.raises(ValueError):
        require_module_access("Campaigns")
