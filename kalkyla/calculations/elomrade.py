"""Swedish postal code -> electricity price zone (SE1-SE4)."""

import re

from kalkyla.db.models.enums import Elomrade

_POSTAL_RE = re.compile(r"^\d{5}$")

# Checked in order; SE3 is the catch-all for the rest of the country
_RANGES: list[tuple[int, int, Elomrade]] = [
    (95000, 98999, Elomrade.SE1),  # Norrbotten
    (80000, 89999, Elomrade.SE2),  # Norrland south of SE1
    (20000, 39999, Elomrade.SE4),  # Skåne, Blekinge, southern Småland
    (10000, 79999, Elomrade.SE3),  # Stockholm, Göteborg, central Sweden
]


def _normalize(postal_code: str) -> str:
    return re.sub(r"\s+", "", postal_code or "")


def is_valid_postal_code(postal_code: str) -> bool:
    return bool(_POSTAL_RE.match(_normalize(postal_code)))


def get_elomrade_from_postal_code(postal_code: str) -> Elomrade | None:
    """None when the code is not five digits after removing whitespace."""
    cleaned = _normalize(postal_code)
    if not _POSTAL_RE.match(cleaned):
        return None
    number = int(cleaned)
    for low, high, zone in _RANGES:
        if low <= number <= high:
            return zone
    return Elomrade.SE3


def format_postal_code(postal_code: str) -> str:
    """Format as "123 45"; anything that is not five digits is returned unchanged."""
    cleaned = _normalize(postal_code)
    if not _POSTAL_RE.match(cleaned):
        return postal_code
    return f"{cleaned[:3]} {cleaned[3:]}"
