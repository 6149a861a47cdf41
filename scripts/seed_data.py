#!/usr/bin/env python3
"""
Seed script: a super admin, two installer organizations with users, default grid
operators and a sample battery catalogue. Writes straight to the database.
Idempotent: existing rows (matched by email, slug or name) are left alone.
Run after `alembic upgrade head`:
  python scripts/seed_data.py
  python scripts/seed_data.py --password 'Annat-L0senord!'
"""

import argparse
import asyncio
from decimal import Decimal

from kalkyla.core.security import hash_password
from kalkyla.db.models import BatteryBrand, BatteryConfig, Organization, User
from kalkyla.db.models.enums import UserRole
from kalkyla.db.repositories.battery_repository import BatteryBrandRepository, BatteryConfigRepository
from kalkyla.db.repositories.organization_repository import OrganizationRepository
from kalkyla.db.repositories.user_repository import UserRepository
from kalkyla.db.session import session_scope
from kalkyla.services.natagare_service import seed_default_natagare

ORGANIZATIONS = [
    {"name": "Test Solar AB", "slug": "test-solar", "is_proffskontakt_affiliated": False},
    {
        "name": "Proffs Partner AB",
        "slug": "proffs-partner",
        "is_proffskontakt_affiliated": True,
        "installer_fixed_cut": Decimal("15000"),
        "margin_alert_threshold": Decimal("20000"),
    },
]

# (email, name, role, org slug)
USERS = [
    ("admin@kalkyla.se", "Super Admin", UserRole.SUPER_ADMIN, None),
    ("admin@test-solar.se", "Anna Admin", UserRole.ORG_ADMIN, "test-solar"),
    ("closer@test-solar.se", "Carl Closer", UserRole.CLOSER, "test-solar"),
    ("admin@proffs-partner.se", "Per Partner", UserRole.ORG_ADMIN, "proffs-partner"),
]

# (brand, config name, kWh, discharge kW, charge kW, cost price)
BATTERIES = [
    ("Emaldo", "Emaldo Power Store 10", Decimal("10.24"), Decimal("5"), Decimal("5"), Decimal("45000")),
    ("Emaldo", "Emaldo Power Store 15", Decimal("15.36"), Decimal("7.5"), Decimal("7.5"), Decimal("62000")),
    ("Huawei", "LUNA2000-10", Decimal("10"), Decimal("5"), Decimal("5"), Decimal("52000")),
]


async def seed(password: str) -> dict[str, int]:
    counts = {"organizations": 0, "users": 0, "natagare": 0, "battery_configs": 0}
    async with session_scope() as session:
        org_repo = OrganizationRepository(session)
        user_repo = UserRepository(session)
        brand_repo = BatteryBrandRepository(session)
        config_repo = BatteryConfigRepository(session)

        orgs: dict[str, Organization] = {}
        for values in ORGANIZATIONS:
            org = await org_repo.get_by_slug(values["slug"])
            if org is None:
                org = await org_repo.add(Organization(**values))
                counts["organizations"] += 1
            orgs[org.slug] = org
            counts["natagare"] += await seed_default_natagare(session, org.id)

        for email, name, role, slug in USERS:
            if await user_repo.get_by_email(email):
                continue
            await user_repo.add(
                User(
                    email=email,
                    name=name,
                    role=role,
                    org_id=orgs[slug].id if slug else None,
                    hashed_password=hash_password(password),
                    is_active=True,
                )
            )
            counts["users"] += 1

        for org in orgs.values():
            for brand_name, config_name, capacity, discharge, charge, cost in BATTERIES:
                brand = await brand_repo.get_by_name(org.id, brand_name)
                if brand is None:
                    brand = await brand_repo.add(BatteryBrand(org_id=org.id, name=brand_name))
                if await config_repo.get_by_brand_and_name(org.id, brand.id, config_name):
                    continue
                await config_repo.add(
                    BatteryConfig(
                        org_id=org.id,
                        brand_id=brand.id,
                        name=config_name,
                        capacity_kwh=capacity,
                        max_discharge_kw=discharge,
                        max_charge_kw=charge,
                        charge_efficiency=Decimal("95"),
                        discharge_efficiency=Decimal("95"),
                        warranty_years=10,
                        guaranteed_cycles=6000,
                        degradation_per_year=Decimal("2"),
                        cost_price=cost,
                        is_extension_cabinet=False,
                        is_new_stack=True,
                        is_active=True,
                    )
                )
                counts["battery_configs"] += 1
    return counts


def main():
    ap = argparse.ArgumentParser(description="Seed organizations, users and battery catalogue")
    ap.add_argument("--password", default="Kalkyla-Demo-2026", help="Password for every seeded user")
    args = ap.parse_args()

    counts = asyncio.run(seed(args.password))
    print("Done. Created: " + ", ".join(f"{k}={v}" for k, v in counts.items()))
    print("Log in as admin@kalkyla.se, admin@test-solar.se or closer@test-solar.se")


if __name__ == "__main__":
    main()
