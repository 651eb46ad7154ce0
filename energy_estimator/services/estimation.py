"""
Table-driven heuristics for house size, window count and energy use.

Pure functions: no I/O, deterministic for a given LocationRecord.
"""
from typing import Optional

from ..core.utils import round_half_up
from ..data.base import LocationRecord

# Base floor area (sq ft) by property type
HOUSE_SIZE_BY_TYPE = {
    "house": 2000,
    "residential": 2000,
    "apartment": 1000,
    "condo": 1200,
    "default": 1800,
}

# Windows per sq ft, e.g. 0.015 = 1.5 windows per 100 sq ft
WINDOWS_BY_TYPE = {
    "house": 0.015,
    "residential": 0.015,
    "apartment": 0.01,
    "condo": 0.01,
    "default": 0.012,
}

MULTI_UNIT_FACTOR = 0.75      # house number like "4/12"
NAMED_BUILDING_FACTOR = 0.5   # high-rise or named complex
ENERGY_KWH_PER_SQFT = 0.5     # monthly

def _lookup(table: dict, property_type: Optional[str]):
    key = (property_type or "").strip().lower()
    return table.get(key, table["default"])

def estimate_house_size(location: LocationRecord) -> int:
    size = float(_lookup(HOUSE_SIZE_BY_TYPE, location.property_type))

    details = location.address_details
    if details is not None:
        if details.house_number and "/" in details.house_number:
            size *= MULTI_UNIT_FACTOR
        if details.building:
            size *= NAMED_BUILDING_FACTOR

    return round_half_up(size)

def estimate_window_count(house_size: int, location: LocationRecord) -> int:
    ratio = _lookup(WINDOWS_BY_TYPE, location.property_type)
    return round_half_up(house_size * ratio)

def estimate_fallback_energy(house_size: int) -> int:
    """Monthly kWh used when no external statistic is available."""
    return round_half_up(house_size * ENERGY_KWH_PER_SQFT)

def estimate_annual_energy(monthly_kwh: int) -> int:
    return monthly_kwh * 12

def estimate_monthly_cost(monthly_kwh: int, rate_per_kwh: float) -> int:
    return round_half_up(monthly_kwh * rate_per_kwh)
