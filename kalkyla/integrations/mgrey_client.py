"""
Client for the mgrey.se espot API (Nord Pool day-ahead prices per Swedish zone).
The API labels values "price_sek" but they are öre/kWh.
"""

import datetime as dt
import logging
from decimal import Decimal

import httpx

from kalkyla.config import get_settings
from kalkyla.db.models.enums import Elomrade

logger = logging.getLogger(__name__)


class PriceFetchError(Exception):
    pass


async def fetch_day_prices(
    day: dt.date, *, client: httpx.AsyncClient | None = None
) -> dict[Elomrade, list[tuple[int, Decimal]]]:
    """Hourly prices for all four zones on `day`: {zone: [(hour, öre/kWh), ...]}."""
    settings = get_settings()
    params = {"format": "json", "date": day.isoformat()}
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=30.0)
    try:
        response = await client.get(settings.electricity_api_url, params=params)
    except httpx.HTTPError as exc:
        raise PriceFetchError(f"Request failed: {exc}") from exc
    finally:
        if owns_client:
            await client.aclose()

    if response.status_code != 200:
        raise PriceFetchError(f"API error: {response.status_code}")

    try:
        data = response.json()
    except ValueError as exc:
        raise PriceFetchError("Response is not JSON") from exc
    if not isinstance(data, dict) or not isinstance(data.get("SE1"), list):
        raise PriceFetchError("Invalid API response format")

    prices: dict[Elomrade, list[tuple[int, Decimal]]] = {}
    try:
        for zone in Elomrade:
            prices[zone] = [
                (int(row["hour"]), Decimal(str(row["price_sek"]))) for row in data.get(zone.value) or []
            ]
    except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
        raise PriceFetchError(f"Malformed price row: {exc}") from exc
    logger.debug("Fetched %d zones for %s", len(prices), day)
    return prices
