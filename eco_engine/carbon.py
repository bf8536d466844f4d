from __future__ import annotations

from typing import List

# kg CO2 per unit of daily activity
TRANSPORT_KG_PER_KM = 0.2
ENERGY_KG_PER_KWH = 0.8
MEAT_MEAL_KG = 2.5

MAX_TRANSPORT_KM = 100.0
MAX_ENERGY_KWH = 100.0
MAX_MEAT_MEALS = 10.0

FOOTPRINT_TIPS: List[str] = [
    "Walk, bike, or use public transport whenever possible.",
    "Switch to renewable energy sources at home.",
    "Eat more plant-based meals.",
    "Reduce, reuse, and recycle.",
    "Conserve water and electricity.",
    "Buy local and seasonal products.",
]


def _check_range(name: str, value: float, upper: float) -> float:
    value = float(value)
    if not 0.0 <= value <= upper:
        raise ValueError(f"{name} must be between 0 and {upper:g}, got {value:g}")
    return value


def estimate_footprint(transport_km: float, energy_kwh: float, meat_meals: float) -> float:
    """Daily carbon footprint in kg CO2 from distance driven, energy used and meat meals."""
    transport_km = _check_range("transport_km", transport_km, MAX_TRANSPORT_KM)
    energy_kwh = _check_range("energy_kwh", energy_kwh, MAX_ENERGY_KWH)
    meat_meals = _check_range("meat_meals", meat_meals, MAX_MEAT_MEALS)
    return (
        transport_km * TRANSPORT_KG_PER_KM
        + energy_kwh * ENERGY_KG_PER_KWH
        + meat_meals * MEAT_MEAL_KG
    )
