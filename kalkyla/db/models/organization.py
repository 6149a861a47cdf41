"""
Organization model - the tenant boundary. Every battery, grid operator and
calculation belongs to exactly one organization.
"""

from decimal import Decimal

from sqlalchemy import Boolean, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from kalkyla.db.base import Base, TimestampMixin


class Organization(TimestampMixin, Base):
    """Installer company using the platform. Branding is shown on share links."""

    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    primary_color: Mapped[str] = mapped_column(String(7), nullable=False, default="#3B82F6")
    secondary_color: Mapped[str] = mapped_column(String(7), nullable=False, default="#1E40AF")
    # ProffsKontakt affiliates get margin tracking
    is_proffskontakt_affiliated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    installer_fixed_cut: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    margin_alert_threshold: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, slug={self.slug})>"
