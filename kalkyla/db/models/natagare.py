"""
Nätägare (grid operator) - effect tariff rates per organization.
"""

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from kalkyla.db.base import Base, TimestampMixin


class Natagare(TimestampMixin, Base):
    """Grid operator with day/night effect tariff in SEK/kW."""

    __tablename__ = "natagare"
    __table_args__ = (UniqueConstraint("org_id", "name", name="uq_natagare_org_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    org_id: Mapped[int] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    day_rate_sek_kw: Mapped[Decimal] = mapped_column(Numeric(10, 3), nullable=False)
    night_rate_sek_kw: Mapped[Decimal] = mapped_column(Numeric(10, 3), nullable=False)
    day_start_hour: Mapped[int] = mapped_column(Integer, nullable=False, default=6)
    day_end_hour: Mapped[int] = mapped_column(Integer, nullable=False, default=22)
    # Seeded operators; protected from deletion
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Natagare(id={self.id}, name={self.name})>"
