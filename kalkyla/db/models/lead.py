"""
Lead generation - public questionnaire submissions matched to installer companies.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kalkyla.db.base import Base, TimestampMixin
from kalkyla.db.models.enums import Budget, Elomrade, InterestType, LeadStatus, PropertyType, Timeline


class Company(TimestampMixin, Base):
    """Installer company receiving leads, with a daily quota."""

    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    webhook_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    accepts_battery: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    accepts_solar: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    max_leads_per_day: Mapped[int] = mapped_column(Integer, default=10, nullable=False)
    leads_today: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_lead_reset_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    service_area_polygon: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    def accepts(self, interest: InterestType) -> bool:
        if interest == InterestType.BATTERY:
            return self.accepts_battery
        if interest == InterestType.SOLAR:
            return self.accepts_solar
        return self.accepts_battery or self.accepts_solar

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name={self.name})>"


class Lead(TimestampMixin, Base):
    __tablename__ = "leads"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    property_type: Mapped[PropertyType] = mapped_column(
        Enum(PropertyType, native_enum=False, length=20), nullable=False
    )
    postal_code: Mapped[str] = mapped_column(String(10), nullable=False)
    elomrade: Mapped[Elomrade] = mapped_column(Enum(Elomrade, native_enum=False, length=3), nullable=False)
    annual_kwh: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    has_existing_solar: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    interest_type: Mapped[InterestType] = mapped_column(
        Enum(InterestType, native_enum=False, length=10), nullable=False
    )
    budget: Mapped[Budget] = mapped_column(Enum(Budget, native_enum=False, length=20), nullable=False)
    timeline: Mapped[Timeline] = mapped_column(Enum(Timeline, native_enum=False, length=20), nullable=False)
    calculation_snapshot: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    source: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[LeadStatus] = mapped_column(
        Enum(LeadStatus, native_enum=False, length=20), nullable=False, default=LeadStatus.NEW, index=True
    )

    matches: Mapped[list["LeadCompanyMatch"]] = relationship(
        "LeadCompanyMatch", back_populates="lead", lazy="selectin", cascade="all, delete-orphan"
    )


class LeadCompanyMatch(Base):
    __tablename__ = "lead_company_matches"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    lead_id: Mapped[int] = mapped_column(ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    notified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notification_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    lead: Mapped[Lead] = relationship("Lead", back_populates="matches")
    company: Mapped[Company] = relationship("Company", lazy="selectin")
