from __future__ import annotations

import datetime as dt
import math
from typing import Optional, Tuple

import numpy as np

from ..dates import compact_date
from ..models import EnvironmentalReading, TemperatureHistoryPoint

BASE_TEMPERATURE_C = 20.0
BASE_CLOUD_COVER_PCT = 50.0
BASE_SOLAR_RADIATION_WM2 = 250.0

WINTER_MONTHS = (12, 1, 2)  # northern hemisphere
SUMMER_MONTHS = (6, 7, 8)

HISTORY_DAYS = 7
HISTORY_JITTER_C = 2


def _check_month(month: int) -> None:
    if not 1 <= int(month) <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def latitude_factor(latitude: float) -> float:
    """1.0 at the equator, 0.0 at the poles."""
    return (90.0 - abs(latitude)) / 90.0


def is_northern(latitude: float) -> bool:
    # the equator takes the northern branch
    return latitude >= 0


def seasonal_factor(latitude: float, month: int, winter: float, summer: float) -> float:
    """Pick the winter/summer/shoulder factor for `month` in the latitude's hemisphere."""
    _check_month(month)
    north = is_northern(latitude)
    if month in WINTER_MONTHS:
        return winter if north else summer
    if month in SUMMER_MONTHS:
        return summer if north else winter
    return 1.0


def estimate_temperature(latitude: float, month: int) -> float:
    factor = seasonal_factor(latitude, month, winter=0.5, summer=1.5)
    return _round_half_up(BASE_TEMPERATURE_C * latitude_factor(latitude) * factor)


def estimate_cloud_cover(latitude: float, month: int) -> float:
    # cloudier in winter, the opposite skew from temperature
    factor = seasonal_factor(latitude, month, winter=1.2, summer=0.8)
    value = BASE_CLOUD_COVER_PCT * latitude_factor(latitude) * factor
    return min(100.0, max(0.0, value))


def estimate_solar_radiation(latitude: float, month: int) -> float:
    factor = seasonal_factor(latitude, month, winter=0.6, summer=1.4)
    return _round_half_up(BASE_SOLAR_RADIATION_WM2 * latitude_factor(latitude) * factor)


def generate_fallback_history(
    base_temp: float,
    today: dt.date,
    rng: Optional[np.random.Generator] = None,
    days: int = HISTORY_DAYS,
) -> Tuple[TemperatureHistoryPoint, ...]:
    """Plausible trend line: one point per day for `days` days ending today, +/-2 C integer jitter."""
    rng = rng or np.random.default_rng()
    points = []
    for days_ago in range(days):
        jitter = int(rng.integers(-HISTORY_JITTER_C, HISTORY_JITTER_C + 1))
        points.append(
            TemperatureHistoryPoint(
                date=compact_date(today - dt.timedelta(days=days_ago)),
                value=float(base_temp + jitter),
            )
        )
    return tuple(sorted(points, key=lambda p: p.date))


def estimate_reading(
    latitude: float,
    today: dt.date,
    error: str,
    rng: Optional[np.random.Generator] = None,
) -> EnvironmentalReading:
    """Build a fully estimated reading for `latitude` in the month of `today`."""
    try:
        lat = float(latitude)
    except (TypeError, ValueError):
        lat = 0.0
    if not math.isfinite(lat):
        lat = 0.0
    lat = min(90.0, max(-90.0, lat))
    month = today.month
    temperature = estimate_temperature(lat, month)
    return EnvironmentalReading.estimated(
        temperature=temperature,
        cloud_cover=estimate_cloud_cover(lat, month),
        solar_radiation=estimate_solar_radiation(lat, month),
        history=generate_fallback_history(temperature, today, rng=rng),
        error=error,
    )
