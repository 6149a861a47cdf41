"""
Pytest fixtures - test DB, client, tenants and auth (TDD/BDD support).
Challenge: Isolated tests; no PostgreSQL, Redis, broker or n8n needed.
"""

import os

# Settings are read at import time; configure before importing the app.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("REDIS_URL", "redis://localhost:6399/0")

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from kalkyla.core.rate_limit import rate_limiter
from kalkyla.core.security import create_access_token, hash_password
from kalkyla.db.base import Base
from kalkyla.db.models import BatteryBrand, BatteryConfig, Natagare, Organization, User
from kalkyla.db.models.enums import UserRole
from kalkyla.db.session import get_db
from kalkyla.main import app

TEST_DATABASE_URL = os.environ["DATABASE_URL"]
PASSWORD = "Sakert-Losen1"


@pytest.fixture(autouse=True)
def clear_rate_limits():
    rate_limiter.clear()
    yield
    rate_limiter.clear()


@pytest.fixture(autouse=True)
def no_cache(monkeypatch):
    """Quarterly price cache always misses; the database is the source of truth."""

    async def miss(key):
        return None

    async def ok(*args, **kwargs):
        return True

    monkeypatch.setattr("kalkyla.services.electricity_service.cache_get_json", miss)
    monkeypatch.setattr("kalkyla.services.electricity_service.cache_set_json", ok)
    monkeypatch.setattr("kalkyla.services.electricity_service.cache_delete", ok)


@pytest.fixture
def webhooks(monkeypatch) -> list[tuple[str, dict]]:
    """Captured n8n and company webhooks instead of queueing them."""
    sent: list[tuple[str, dict]] = []

    def capture(webhook_type, payload):
        sent.append((webhook_type, payload))

    def capture_company(url, payload):
        sent.append((url, payload))

    for module in ("calculation_service", "lead_service", "auth_service"):
        monkeypatch.setattr(f"kalkyla.services.{module}.dispatch_webhook", capture)
    monkeypatch.setattr("kalkyla.services.lead_service.dispatch_company_webhook", capture_company)
    return sent


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as s:
        yield s


@pytest_asyncio.fixture
async def client(session: AsyncSession):
    async def override_get_db():
        yield session
        await session.commit()

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _add(session: AsyncSession, entity):
    session.add(entity)
    await session.flush()
    await session.refresh(entity)
    return entity


async def make_user(session: AsyncSession, email: str, role: UserRole, org: Organization | None, **kw) -> User:
    return await _add(
        session,
        User(
            email=email,
            name=kw.pop("name", email.split("@")[0].title()),
            hashed_password=hash_password(kw.pop("password", PASSWORD)),
            role=role,
            org_id=org.id if org else None,
            is_active=kw.pop("is_active", True),
        ),
    )


def headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest_asyncio.fixture
async def org(session: AsyncSession) -> Organization:
    return await _add(session, Organization(name="Test Solar AB", slug="test-solar"))


@pytest_asyncio.fixture
async def other_org(session: AsyncSession) -> Organization:
    return await _add(session, Organization(name="Annan Sol AB", slug="annan-sol"))


@pytest_asyncio.fixture
async def affiliated_org(session: AsyncSession) -> Organization:
    return await _add(
        session,
        Organization(
            name="Proffs Partner AB",
            slug="proffs-partner",
            is_proffskontakt_affiliated=True,
            installer_fixed_cut=Decimal("15000"),
            margin_alert_threshold=Decimal("20000"),
        ),
    )


@pytest_asyncio.fixture
async def super_admin(session: AsyncSession) -> User:
    return await make_user(session, "admin@kalkyla.se", UserRole.SUPER_ADMIN, None, name="Super Admin")


@pytest_asyncio.fixture
async def org_admin(session: AsyncSession, org: Organization) -> User:
    return await make_user(session, "anna@testsolar.se", UserRole.ORG_ADMIN, org, name="Anna Admin")


@pytest_asyncio.fixture
async def closer(session: AsyncSession, org: Organization) -> User:
    return await make_user(session, "carl@testsolar.se", UserRole.CLOSER, org, name="Carl Closer")


@pytest_asyncio.fixture
async def other_closer(session: AsyncSession, org: Organization) -> User:
    return await make_user(session, "cecilia@testsolar.se", UserRole.CLOSER, org, name="Cecilia Closer")


@pytest.fixture
def super_headers(super_admin: User) -> dict:
    return headers_for(super_admin)


@pytest.fixture
def admin_headers(org_admin: User) -> dict:
    return headers_for(org_admin)


@pytest.fixture
def closer_headers(closer: User) -> dict:
    return headers_for(closer)


async def make_catalogue(session: AsyncSession, org: Organization, brand_name: str = "Emaldo"):
    """A grid operator and one battery for org."""
    natagare = await _add(
        session,
        Natagare(
            org_id=org.id,
            name="Ellevio",
            day_rate_sek_kw=Decimal("81.25"),
            night_rate_sek_kw=Decimal("40.625"),
            day_start_hour=6,
            day_end_hour=22,
            is_default=False,
        ),
    )
    brand = await _add(session, BatteryBrand(org_id=org.id, name=brand_name))
    config = await _add(
        session,
        BatteryConfig(
            org_id=org.id,
            brand_id=brand.id,
            name="Power Store 10",
            capacity_kwh=Decimal("10"),
            max_discharge_kw=Decimal("5"),
            max_charge_kw=Decimal("5"),
            charge_efficiency=Decimal("95"),
            discharge_efficiency=Decimal("95"),
            warranty_years=10,
            guaranteed_cycles=6000,
            degradation_per_year=Decimal("2"),
            cost_price=Decimal("40000"),
        ),
    )
    return natagare, config


@pytest_asyncio.fixture
async def catalogue(session: AsyncSession, org: Organization):
    return await make_catalogue(session, org)


def flat_profile(kwh_per_hour: float = 2.0) -> dict:
    return {"data": [[kwh_per_hour] * 24 for _ in range(12)]}


def draft_payload(natagare: Natagare, config: BatteryConfig, **overrides) -> dict:
    payload = {
        "customer_name": "Familjen Svensson",
        "postal_code": "11122",
        "elomrade": "SE3",
        "natagare_id": natagare.id,
        "annual_consumption_kwh": 17280,
        "consumption_profile": flat_profile(),
        "batteries": [{"battery_config_id": config.id, "total_price_ex_vat": 80000, "installation_cost": 0}],
    }
    payload.update(overrides)
    return payload


FINALIZE_PRICES = {"day_price_ore": 150, "night_price_ore": 50}
