"""Initial schema: tenants, users, batteries, grid operators, calculations, prices, leads

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(50), nullable=False),
        sa.Column("logo_url", sa.String(500), nullable=True),
        sa.Column("primary_color", sa.String(7), nullable=False, server_default="#3B82F6"),
        sa.Column("secondary_color", sa.String(7), nullable=False, server_default="#1E40AF"),
        sa.Column("is_proffskontakt_affiliated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("installer_fixed_cut", sa.Numeric(12, 2), nullable=True),
        sa.Column("margin_alert_threshold", sa.Numeric(12, 2), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_organizations_slug", "organizations", ["slug"], unique=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="CLOSER"),
        sa.Column("org_id", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["org_id"], ["organizations.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_org_id", "users", ["org_id"], unique=False)

    op.create_table(
        "password_reset_tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("token", sa.String(64), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_password_reset_tokens_token", "password_reset_tokens", ["token"], unique=True)
    op.create_index("ix_password_reset_tokens_user_id", "password_reset_tokens", ["user_id"], unique=False)

    op.create_table(
        "battery_brands",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("org_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("logo_url", sa.String(500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["org_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("org_id", "name", name="uq_battery_brands_org_name"),
    )
    op.create_index("ix_battery_brands_org_id", "battery_brands", ["org_id"], unique=False)

    op.create_table(
        "battery_configs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("org_id", sa.Integer(), nullable=False),
        sa.Column("brand_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("capacity_kwh", sa.Numeric(10, 2), nullable=False),
        sa.Column("max_discharge_kw", sa.Numeric(10, 2), nullable=False),
        sa.Column("max_charge_kw", sa.Numeric(10, 2), nullable=False),
        sa.Column("charge_efficiency", sa.Numeric(5, 2), nullable=False),
        sa.Column("discharge_efficiency", sa.Numeric(5, 2), nullable=False),
        sa.Column("warranty_years", sa.Integer(), nullable=False),
        sa.Column("guaranteed_cycles", sa.Integer(), nullable=False),
        sa.Column("degradation_per_year", sa.Numeric(5, 2), nullable=False),
        sa.Column("cost_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("is_extension_cabinet", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_new_stack", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["org_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["brand_id"], ["battery_brands.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("org_id", "brand_id", "name", name="uq_battery_configs_org_brand_name"),
    )
    op.create_index("ix_battery_configs_org_id", "battery_configs", ["org_id"], unique=False)
    op.create_index("ix_battery_configs_brand_id", "battery_configs", ["brand_id"], unique=False)

    op.create_table(
        "natagare",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("org_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("day_rate_sek_kw", sa.Numeric(10, 3), nullable=False),
        sa.Column("night_rate_sek_kw", sa.Numeric(10, 3), nullable=False),
        sa.Column("day_start_hour", sa.Integer(), nullable=False, server_default="6"),
        sa.Column("day_end_hour", sa.Integer(), nullable=False, server_default="22"),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["org_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("org_id", "name", name="uq_natagare_org_name"),
    )
    op.create_index("ix_natagare_org_id", "natagare", ["org_id"], unique=False)

    op.create_table(
        "calculations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("org_id", sa.Integer(), nullable=False),
        sa.Column("created_by_id", sa.Integer(), nullable=False),
        sa.Column("natagare_id", sa.Integer(), nullable=False),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("postal_code", sa.String(10), nullable=True),
        sa.Column("elomrade", sa.String(3), nullable=False),
        sa.Column("annual_consumption_kwh", sa.Numeric(12, 2), nullable=False),
        sa.Column("consumption_profile", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="DRAFT"),
        sa.Column("results", sa.JSON(), nullable=True),
        sa.Column("parameters", sa.JSON(), nullable=True),
        sa.Column("finalized_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("share_code", sa.String(32), nullable=True),
        sa.Column("share_password_hash", sa.String(255), nullable=True),
        sa.Column("share_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("share_created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("share_is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("custom_greeting", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["org_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["natagare_id"], ["natagare.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_calculations_org_id", "calculations", ["org_id"], unique=False)
    op.create_index("ix_calculations_created_by_id", "calculations", ["created_by_id"], unique=False)
    op.create_index("ix_calculations_status", "calculations", ["status"], unique=False)
    op.create_index("ix_calculations_share_code", "calculations", ["share_code"], unique=True)

    op.create_table(
        "calculation_batteries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("calculation_id", sa.Integer(), nullable=False),
        sa.Column("battery_config_id", sa.Integer(), nullable=False),
        sa.Column("total_price_ex_vat", sa.Numeric(12, 2), nullable=False),
        sa.Column("installation_cost", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["calculation_id"], ["calculations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["battery_config_id"], ["battery_configs.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_calculation_batteries_calculation_id", "calculation_batteries", ["calculation_id"], unique=False
    )

    op.create_table(
        "calculation_views",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("calculation_id", sa.Integer(), nullable=False),
        sa.Column("viewed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("user_agent", sa.String(500), nullable=True),
        sa.Column("ip_hash", sa.String(16), nullable=True),
        sa.ForeignKeyConstraint(["calculation_id"], ["calculations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_calculation_views_calculation_id", "calculation_views", ["calculation_id"], unique=False)

    op.create_table(
        "calculation_variants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("calculation_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("consumption_profile", sa.JSON(), nullable=False),
        sa.Column("annual_consumption_kwh", sa.Numeric(12, 2), nullable=False),
        sa.Column("results", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["calculation_id"], ["calculations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_calculation_variants_calculation_id", "calculation_variants", ["calculation_id"], unique=False
    )

    op.create_table(
        "electricity_prices",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("elomrade", sa.String(3), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("hour", sa.Integer(), nullable=False),
        sa.Column("price_ore", sa.Numeric(10, 4), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("elomrade", "date", "hour", name="uq_electricity_prices_zone_date_hour"),
    )
    op.create_index("ix_electricity_prices_date", "electricity_prices", ["date"], unique=False)

    op.create_table(
        "electricity_prices_quarterly",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("elomrade", sa.String(3), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("quarter", sa.Integer(), nullable=False),
        sa.Column("avg_day_price_ore", sa.Numeric(10, 4), nullable=False),
        sa.Column("avg_night_price_ore", sa.Numeric(10, 4), nullable=False),
        sa.Column("avg_price_ore", sa.Numeric(10, 4), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("elomrade", "year", "quarter", name="uq_electricity_quarterly_zone_period"),
    )

    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("webhook_url", sa.String(500), nullable=True),
        sa.Column("accepts_battery", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("accepts_solar", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("max_leads_per_day", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("leads_today", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_lead_reset_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("service_area_polygon", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "leads",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("property_type", sa.String(20), nullable=False),
        sa.Column("postal_code", sa.String(10), nullable=False),
        sa.Column("elomrade", sa.String(3), nullable=False),
        sa.Column("annual_kwh", sa.Numeric(12, 2), nullable=False),
        sa.Column("has_existing_solar", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("interest_type", sa.String(10), nullable=False),
        sa.Column("budget", sa.String(20), nullable=False),
        sa.Column("timeline", sa.String(20), nullable=False),
        sa.Column("calculation_snapshot", sa.JSON(), nullable=True),
        sa.Column("source", sa.String(100), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="NEW"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_leads_status", "leads", ["status"], unique=False)

    op.create_table(
        "lead_company_matches",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lead_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("notified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notification_method", sa.String(50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["lead_id"], ["leads.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_lead_company_matches_lead_id", "lead_company_matches", ["lead_id"], unique=False)
    op.create_index("ix_lead_company_matches_company_id", "lead_company_matches", ["company_id"], unique=False)


def downgrade() -> None:
    op.drop_table("lead_company_matches")
    op.drop_table("leads")
    op.drop_table("companies")
    op.drop_table("electricity_prices_quarterly")
    op.drop_index("ix_electricity_prices_date", "electricity_prices")
    op.drop_table("electricity_prices")
    op.drop_table("calculation_variants")
    op.drop_table("calculation_views")
    op.drop_table("calculation_batteries")
    op.drop_table("calculations")
    op.drop_table("natagare")
    op.drop_table("battery_configs")
    op.drop_table("battery_brands")
    op.drop_table("password_reset_tokens")
    op.drop_index("ix_users_email", "users")
    op.drop_table("users")
    op.drop_index("ix_organizations_slug", "organizations")
    op.drop_table("organizations")
