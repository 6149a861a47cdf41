"""
Battery catalogue - brands and the sellable configurations under them.
Both are scoped to an organization (each installer keeps its own price list).
"""

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kalkyla.db.base import Base, TimestampMixin



class BatteryBrand(TimestampMixin, Base):
    __tablename__ = "battery_brands"
    __table_args__ = (UniqueConstraint("org_id", "name", name="uq_battery_brands_org_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    org_id: Mapped[int] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<BatteryBrand(id={self.id}, name={self.name})>"


class BatteryConfig(TimestampMixin, Base):
    """A specific battery product with technical specs and cost price."""

    __tablename__ = "battery_configs"
    __table_args__ = (
        UniqueConstraint("org_id", "brand_id", "name", name="uq_battery_configs_org_brand_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    org_id: Mapped[int] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    brand_id: Mapped[int] = mapped_column(ForeignKey("battery_brands.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    capacity_kwh: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    max_discharge_kw: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    max_charge_kw: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    # Percentages (0-100)
    charge_efficiency: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    discharge_efficiency: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    warranty_years: Mapped[int] = mapped_column(Integer, nullable=False)
    guaranteed_cycles: Mapped[int] = mapped_column(Integer, nullable=False)
    degradation_per_year: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    cost_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    is_extension_cabinet: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_new_stack: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    brand: Mapped[BatteryBrand] = relationship("BatteryBrand", lazy="selectin")

    @property
    def brand_name(self) -> str:
        return self.brand.name

    @property
    def is_emaldo(self) -> bool:
        """Emaldo batteries get zone-based guaranteed grid services income."""
        return "emaldo" in self.brand.name.lower()

    def __repr__(self) -> str:
        return f"<BatteryConfig(id={self.id}, name={self.name})>"
