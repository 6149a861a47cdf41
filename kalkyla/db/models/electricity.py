"""
Electricity spot prices - hourly rows from the price API and quarterly averages
used as calculation defaults. Prices are öre/kWh.
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import Date, DateTime, Enum, Integer, Numeric, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from kalkyla.db.base import Base
from kalkyla.db.models.enums import Elomrade


class ElectricityPrice(Base):
    __tablename__ = "electricity_prices"
    __table_args__ = (
        UniqueConstraint("elomrade", "date", "hour", name="uq_electricity_prices_zone_date_hour"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    elomrade: Mapped[Elomrade] = mapped_column(Enum(Elomrade, native_enum=False, length=3), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    hour: Mapped[int] = mapped_column(Integer, nullable=False)
    price_ore: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class ElectricityPriceQuarterly(Base):
    __tablename__ = "electricity_prices_quarterly"
    __table_args__ = (
        UniqueConstraint("elomrade", "year", "quarter", name="uq_electricity_quarterly_zone_period"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    elomrade: Mapped[Elomrade] = mapped_column(Enum(Elomrade, native_enum=False, length=3), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    quarter: Mapped[int] = mapped_column(Integer, nullable=False)
    avg_day_price_ore: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False)
    avg_night_price_ore: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False)
    avg_price_ore: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
