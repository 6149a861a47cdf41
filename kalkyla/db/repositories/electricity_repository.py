"""
Electricity price storage.
Challenge: Idempotent imports - the same day can be fetched many times.
Design: Select-then-update upserts keyed on the natural unique keys (portable across Postgres and SQLite).
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import select

from kalkyla.db.models.electricity import ElectricityPrice, ElectricityPriceQuarterly
from kalkyla.db.models.enums import Elomrade
from kalkyla.db.repositories.base_repository import BaseRepository


class ElectricityPriceRepository(BaseRepository[ElectricityPrice]):
    def __init__(self, session):
        super().__init__(session, ElectricityPrice)

    async def upsert_hourly(self, elomrade: Elomrade, date: dt.date, hour: int, price_ore: Decimal) -> None:
        result = await self.session.execute(
            select(ElectricityPrice).where(
                ElectricityPrice.elomrade == elomrade,
                ElectricityPrice.date == date,
                ElectricityPrice.hour == hour,
            )
        )
        existing = result.scalar_one_or_none()
        if existing:
            existing.price_ore = price_ore
        else:
            self.session.add(ElectricityPrice(elomrade=elomrade, date=date, hour=hour, price_ore=price_ore))
        await self.session.flush()

    async def get_range(self, elomrade: Elomrade, start: dt.date, end: dt.date) -> list[ElectricityPrice]:
        """Hourly rows with start <= date <= end."""
        result = await self.session.execute(
            select(ElectricityPrice)
            .where(
                ElectricityPrice.elomrade == elomrade,
                ElectricityPrice.date >= start,
                ElectricityPrice.date <= end,
            )
            .order_by(ElectricityPrice.date, ElectricityPrice.hour)
        )
        return list(result.scalars().all())


class QuarterlyPriceRepository(BaseRepository[ElectricityPriceQuarterly]):
    def __init__(self, session):
        super().__init__(session, ElectricityPriceQuarterly)

    async def upsert(
        self,
        elomrade: Elomrade,
        year: int,
        quarter: int,
        *,
        avg_day: Decimal,
        avg_night: Decimal,
        avg_all: Decimal,
    ) -> ElectricityPriceQuarterly:
        result = await self.session.execute(
            select(ElectricityPriceQuarterly).where(
                ElectricityPriceQuarterly.elomrade == elomrade,
                ElectricityPriceQuarterly.year == year,
                ElectricityPriceQuarterly.quarter == quarter,
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            row = ElectricityPriceQuarterly(elomrade=elomrade, year=year, quarter=quarter)
            self.session.add(row)
        row.avg_day_price_ore = avg_day
        row.avg_night_price_ore = avg_night
        row.avg_price_ore = avg_all
        await self.session.flush()
        return row

    async def history(self, elomrade: Elomrade, limit: int = 8) -> list[ElectricityPriceQuarterly]:
        result = await self.session.execute(
            select(ElectricityPriceQuarterly)
            .where(ElectricityPriceQuarterly.elomrade == elomrade)
            .order_by(ElectricityPriceQuarterly.year.desc(), ElectricityPriceQuarterly.quarter.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def latest(self, elomrade: Elomrade) -> ElectricityPriceQuarterly | None:
        rows = await self.history(elomrade, limit=1)
        return rows[0] if rows else None
