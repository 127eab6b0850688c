"""Pytest configuration and fixtures for the entitlement service.

Every test gets its own SQLite database file (aiosqlite, NullPool) with the
schema created from the ORM metadata. HTTP tests run against create_app()
with get_db / get_db_transactional overridden onto that same database, so
data seeded through the services is what the API sees.
"""

import os

# Settings are validated on first get_settings(); set required env before any
# entitlements import (entitlements.main builds the app at import time).
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./entitlements-test.db"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["PERMISSION_CACHE_ENABLED"] = "false"

from dataclasses import dataclass  # noqa: E402
from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy import String  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402
from sqlalchemy.orm import Mapped, mapped_column  # noqa: E402

from entitlements.application.dtos.role import RoleResult  # noqa: E402
from entitlements.application.services import (  # noqa: E402
    AuthorizationService,
    BindingService,
    CatalogSeeder,
    CatalogService,
    ElevationClassifier,
    OwnershipFilter,
    PermissionResolver,
    RoleService,
)
from entitlements.core.config import get_settings  # noqa: E402
from entitlements.core.limiter import limiter  # noqa: E402
from entitlements.infrastructure.persistence.database import (  # noqa: E402
    Base,
    build_engine,
    build_session_factory,
    get_db,
    get_db_transactional,
    transactional_session,
)
from entitlements.infrastructure.persistence.models import (  # noqa: E402
    CuidMixin,
    OwnedMixin,
)
from entitlements.infrastructure.persistence.repositories import (  # noqa: E402
    BindingRepository,
    GrantRepository,
    ModuleRepository,
    PermissionRepository,
    RoleRepository,
)
from entitlements.main import create_app  # noqa: E402
from entitlements.shared.utils.datetime import utc_now  # noqa: E402

get_settings.cache_clear()

SUPERADMIN_ACTOR = "actor-superadmin"


class Campaign(OwnedMixin, CuidMixin, Base):
    """Owned business row used to exercise the ownership filter end to end."""

    __tablename__ = "test_campaign"

    name: Mapped[str] = mapped_column(String(255), nullable=False)


@dataclass
class Services:
    """Repositories and services sharing one session (one unit of work)."""

    session: AsyncSession
    module_repo: ModuleRepository
    permission_repo: PermissionRepository
    role_repo: RoleRepository
    grant_repo: GrantRepository
    binding_repo: BindingRepository
    classifier: ElevationClassifier
    resolver: PermissionResolver
    authorization: AuthorizationService
    roles: RoleService
    catalog: CatalogService
    bindings: BindingService
    seeder: CatalogSeeder
    ownership: OwnershipFilter


def build_services(session: AsyncSession) -> Services:
    """Wire services on session the way the API dependencies do."""
    settings = get_settings()
    module_repo = ModuleRepository(session)
    permission_repo = PermissionRepository(session)
    role_repo = RoleRepository(session)
    grant_repo = GrantRepository(session)
    binding_repo = BindingRepository(session)
    classifier = ElevationClassifier(
        threshold=settings.elevation_threshold,
        elevated_role_names=settings.elevated_role_names,
    )
    resolver = PermissionResolver(binding_repo, grant_repo)
    authorization = AuthorizationService(
        binding_repo,
        resolver,
        classifier,
        suggestion=settings.access_denied_suggestion,
    )
    roles = RoleService(
        role_repo, permission_repo, grant_repo, binding_repo, classifier, authorization
    )
    catalog = CatalogService(module_repo, permission_repo, grant_repo, authorization)
    return Services(
        session=session,
        module_repo=module_repo,
        permission_repo=permission_repo,
        role_repo=role_repo,
        grant_repo=grant_repo,
        binding_repo=binding_repo,
        classifier=classifier,
        resolver=resolver,
        authorization=authorization,
        roles=roles,
        catalog=catalog,
        bindings=BindingService(binding_repo, role_repo, authorization),
        seeder=CatalogSeeder(catalog, roles, module_repo, permission_repo, role_repo),
        ownership=OwnershipFilter(settings.owner_attribute),
    )


def make_token(
    actor_id: str,
    *,
    expires_in: timedelta = timedelta(hours=1),
    secret: str | None = None,
) -> str:
    """Mint a bearer token the way the upstream identity provider would."""
    settings = get_settings()
    payload = {"sub": actor_id, "exp": utc_now() + expires_in}
    key = secret or settings.secret_key.get_secret_value()
    return jwt.encode(payload, key, algorithm=settings.algorithm)


def auth_headers_for(actor_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(actor_id)}"}


@pytest.fixture
async def engine(tmp_path):
    """Fresh SQLite database file per test with the full schema."""
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'entitlements.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def db_session(session_factory) -> AsyncSession:
    """Session for repository/service tests. Rolls back after the test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def services(db_session: AsyncSession) -> Services:
    return build_services(db_session)


@pytest.fixture
async def seeded(session_factory) -> dict[str, RoleResult]:
    """Commit the default catalog; return the seeded roles by name."""
    async with session_factory() as session:
        async with session.begin():
            await build_services(session).seeder.seed()
        roles = await build_services(session).roles.list_roles()
    return {r.name: r for r in roles}


@pytest.fixture
def bind_actor(session_factory, seeded):
    """Bind an actor to a seeded role by name in its own committed transaction."""

    async def _bind(actor_id: str, role_name: str, expires_at: datetime | None = None):
        async with session_factory() as session:
            async with session.begin():
                return await build_services(session).bindings.bind(
                    actor_id, seeded[role_name].id, bound_by="tests", expires_at=expires_at
                )

    return _bind


@pytest.fixture
async def admin_headers(bind_actor) -> dict[str, str]:
    """Headers for an actor bound to the elevated SuperAdmin role."""
    await bind_actor(SUPERADMIN_ACTOR, "SuperAdmin")
    return auth_headers_for(SUPERADMIN_ACTOR)


@pytest.fixture
def app(session_factory) -> FastAPI:
    """Application with DB dependencies pointed at the per-test database."""
    application = create_app()

    async def _get_db():
        async with session_factory() as session:
            yield session

    async def _get_db_transactional():
        async with transactional_session(session_factory) as session:
            yield session

    application.dependency_overrides[get_db] = _get_db
    application.dependency_overrides[get_db_transactional] = _get_db_transactional
    limiter.reset()
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def campaign_model() -> type[Campaign]:
    return Campaign


@pytest.fixture
def headers_for():
    """Callable returning bearer headers for an actor id."""
    return auth_headers_for


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def services_factory():
    """build_services, for tests that need a second unit of work."""
    return build_services
