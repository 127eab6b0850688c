"""End-to-end access scenarios: capability gate plus ownership filter on owned rows."""

from datetime import timedelta

from sqlalchemy import select

from entitlements.domain.decisions import DenialKind
from entitlements.shared.utils.datetime import utc_now


async def _manager_with(services, seeded_keys: list[str], actor_id: str = "user-u"):
    await services.seeder.seed()
    manager = await services.role_repo.get_by_name("Manager")
    await services.roles.replace_role_permissions(manager.id, seeded_keys)
    await services.bindings.bind(actor_id, manager.id)
    return manager


async def test_manager_scenario(services, campaign_model) -> None:
    """Manager U can read/create, not delete; SuperAdmin S may delete and sees everything."""
    Campaign = campaign_model
    await _manager_with(services, ["campaigns_read", "campaigns_create"])
    superadmin = await services.role_repo.get_by_name("SuperAdmin")
    await services.bindings.bind("user-s", superadmin.id)

    u = await services.authorization.load_actor("user-u")
    assert (await services.authorization.authorize(u, "campaigns_read")).allowed
    denied = await services.authorization.authorize(u, "campaigns_delete")
    assert not denied.allowed
    assert denied.reason.available_actions == ("read", "create")
    assert denied.reason.user_role == "Manager"

    draft = services.ownership.assign_owner(u, {"name": "Spring launch", "owner_id": "user-v"})
    own = Campaign(**draft)
    others = Campaign(name="Summer sale", owner_id="user-v")
    services.session.add_all([own, others])
    await services.session.flush()
    assert own.owner_id == "user-u"

    ownership_denied = services.ownership.check_ownership(u, others, "campaign")
    assert ownership_denied.reason.kind is DenialKind.OWNERSHIP

    s = await services.authorization.load_actor("user-s")
    assert s.is_elevated
    assert (await services.authorization.authorize(s, "campaigns_delete")).elevated
    assert services.ownership.check_ownership(s, others).allowed

    query = select(Campaign).order_by(Campaign.name)
    visible_to_s = (
        await services.session.execute(services.ownership.apply_ownership_predicate(s, query))
    ).scalars().all()
    assert {c.owner_id for c in visible_to_s} == {"user-u", "user-v"}

    await services.session.delete(others)
    await services.session.flush()
    remaining = (await services.session.execute(query)).scalars().all()
    assert [c.name for c in remaining] == ["Spring launch"]


async def test_list_query_never_returns_other_owners_rows(services, campaign_model) -> None:
    Campaign = campaign_model
    await _manager_with(services, ["campaigns_read"], actor_id="alice")
    services.session.add_all(
        [
            Campaign(name="a1", owner_id="alice"),
            Campaign(name="a2", owner_id="alice"),
            Campaign(name="b1", owner_id="bob"),
            Campaign(name="c1", owner_id="carol"),
        ]
    )
    await services.session.flush()
    alice = await services.authorization.load_actor("alice")

    query = services.ownership.apply_ownership_predicate(alice, select(Campaign))
    rows = (await services.session.execute(query)).scalars().all()

    assert sorted(c.name for c in rows) == ["a1", "a2"]
    assert {c.owner_id for c in rows} == {"alice"}


async def test_replacing_grants_takes_effect_on_next_check(services) -> None:
    await _manager_with(services, ["campaigns_read", "campaigns_create"])
    manager = await services.role_repo.get_by_name("Manager")

    await services.roles.replace_role_permissions(manager.id, ["campaigns_read"])

    assert await services.resolver.resolve("user-u") == {"campaigns_read"}
    u = await services.authorization.load_actor("user-u")
    assert not (await services.authorization.authorize(u, "campaigns_create")).allowed


async def test_elevated_actor_allowed_for_keys_without_grants(services) -> None:
    await services.seeder.seed()
    elevated = await services.roles.create_role("Operators", level=10)
    await services.bindings.bind("ops", elevated.id)
    ops = await services.authorization.load_actor("ops")
    for key in ("campaigns_delete", "reports_manage", "users_export"):
        decision = await services.authorization.authorize(ops, key)
        assert decision.allowed and decision.elevated


async def test_expired_superadmin_binding_loses_elevation(services) -> None:
    await services.seeder.seed()
    superadmin = await services.role_repo.get_by_name("SuperAdmin")
    await services.binding_repo.create_binding(
        "former", superadmin.id, expires_at=utc_now() - timedelta(minutes=5)
    )
    former = await services.authorization.load_actor("former")
    assert not former.is_elevated
    assert not (await services.authorization.authorize(former, "campaigns_read")).allowed
