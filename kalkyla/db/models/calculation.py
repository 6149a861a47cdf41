"""
Calculation model - a customer ROI calculation plus its share link state.
Challenge: Quote data (batteries, prices) and public sharing live on one aggregate.
Design: Share fields sit on the calculation row; views and prospect variants are child tables.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kalkyla.db.base import Base, TimestampMixin
from kalkyla.db.models.enums import CalculationStatus, Elomrade

if TYPE_CHECKING:
    from kalkyla.db.models.battery import BatteryConfig
    from kalkyla.db.models.natagare import Natagare
    from kalkyla.db.models.organization import Organization
    from kalkyla.db.models.user import User


class Calculation(TimestampMixin, Base):
    __tablename__ = "calculations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    org_id: Mapped[int] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    natagare_id: Mapped[int] = mapped_column(ForeignKey("natagare.id"), nullable=False)

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    postal_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    elomrade: Mapped[Elomrade] = mapped_column(Enum(Elomrade, native_enum=False, length=3), nullable=False)
    annual_consumption_kwh: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    # {"data": [[24 hourly kWh] x 12 months]}
    consumption_profile: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    status: Mapped[CalculationStatus] = mapped_column(
        Enum(CalculationStatus, native_enum=False, length=10),
        nullable=False,
        default=CalculationStatus.DRAFT,
        index=True,
    )
    # Engine output (camelCase keys, floats) and the control parameters used to produce it
    results: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    parameters: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    finalized_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Share link
    share_code: Mapped[str | None] = mapped_column(String(32), unique=True, index=True, nullable=True)
    share_password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    share_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    share_created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    share_is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    custom_greeting: Mapped[str | None] = mapped_column(Text, nullable=True)

    organization: Mapped["Organization"] = relationship("Organization", lazy="selectin")
    created_by: Mapped["User"] = relationship("User", lazy="selectin")
    natagare: Mapped["Natagare"] = relationship("Natagare", lazy="selectin")
    batteries: Mapped[list["CalculationBattery"]] = relationship(
        "CalculationBattery",
        back_populates="calculation",
        cascade="all, delete-orphan",
        order_by="CalculationBattery.sort_order",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Calculation(id={self.id}, customer={self.customer_name}, status={self.status})>"


class CalculationBattery(Base):
    """A battery quoted in a calculation, with the sale price for this customer."""

    __tablename__ = "calculation_batteries"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    calculation_id: Mapped[int] = mapped_column(
        ForeignKey("calculations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    battery_config_id: Mapped[int] = mapped_column(ForeignKey("battery_configs.id"), nullable=False)
    total_price_ex_vat: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    installation_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    calculation: Mapped[Calculation] = relationship("Calculation", back_populates="batteries")
    battery_config: Mapped["BatteryConfig"] = relationship("BatteryConfig", lazy="selectin")


class CalculationView(Base):
    """One open of a public share link. IP is stored hashed."""

    __tablename__ = "calculation_views"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    calculation_id: Mapped[int] = mapped_column(
        ForeignKey("calculations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    viewed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    ip_hash: Mapped[str | None] = mapped_column(String(16), nullable=True)


class CalculationVariant(Base):
    """Prospect's own what-if version of a shared calculation."""

    __tablename__ = "calculation_variants"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    calculation_id: Mapped[int] = mapped_column(
        ForeignKey("calculations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    consumption_profile: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    annual_consumption_kwh: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    results: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
