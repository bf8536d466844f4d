"""Domain types shared by the engine and the service layer."""
from __future__ import annotations

import io
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from PIL import Image

from .errors import InvalidCoordinatesError

IMAGE_SIZE = 512


def is_valid_coordinates(latitude: float, longitude: float) -> bool:
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        return False
    # NaN fails both comparisons
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


@dataclass(frozen=True)
class Location:
    """A resolved place. Replaced wholesale, never mutated."""

    latitude: float
    longitude: float
    name: str

    @classmethod
    def create(cls, latitude: float, longitude: float, name: Optional[str] = None) -> "Location":
        if not is_valid_coordinates(latitude, longitude):
            raise InvalidCoordinatesError(detail=f"lat={latitude!r}, lon={longitude!r}")
        lat, lon = float(latitude), float(longitude)
        return cls(latitude=lat, longitude=lon, name=name or f"{lat:.4f}, {lon:.4f}")

    def to_dict(self) -> Dict[str, Any]:
        return {"latitude": self.latitude, "longitude": self.longitude, "name": self.name}


DEFAULT_LOCATION = Location(latitude=40.7128, longitude=-74.0060, name="New York")


@dataclass(frozen=True)
class TemperatureHistoryPoint:
    date: str  # yyyyMMdd
    value: float


@dataclass(frozen=True)
class EnvironmentalReading:
    """Snapshot of temperature, cloud cover and solar radiation for a location.

    A reading is either fully real (`is_estimated=False`, no error) or fully
    estimated (`is_estimated=True` with the classified error message). Use the
    `real` and `estimated` constructors rather than building one by hand.
    """

    temperature: float
    cloud_cover: float
    solar_radiation: float
    history: Tuple[TemperatureHistoryPoint, ...] = field(default_factory=tuple)
    is_estimated: bool = False
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.is_estimated and not self.error:
            raise ValueError("estimated readings must carry an error message")
        if not self.is_estimated and self.error is not None:
            raise ValueError("real readings cannot carry an error message")
        for a, b in zip(self.history, self.history[1:]):
            if a.date > b.date:
                raise ValueError("history must be sorted ascending by date")

    @classmethod
    def real(
        cls,
        temperature: float,
        cloud_cover: float,
        solar_radiation: float,
        history: Sequence[TemperatureHistoryPoint],
    ) -> "EnvironmentalReading":
        return cls(
            temperature=float(temperature),
            cloud_cover=float(cloud_cover),
            solar_radiation=float(solar_radiation),
            history=tuple(history),
        )

    @classmethod
    def estimated(
        cls,
        temperature: float,
        cloud_cover: float,
        solar_radiation: float,
        history: Sequence[TemperatureHistoryPoint],
        error: str,
    ) -> "EnvironmentalReading":
        return cls(
            temperature=float(temperature),
            cloud_cover=float(cloud_cover),
            solar_radiation=float(solar_radiation),
            history=tuple(history),
            is_estimated=True,
            error=error,
        )

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.temperature, self.cloud_cover, self.solar_radiation))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "cloud_cover": self.cloud_cover,
            "solar_radiation": self.solar_radiation,
            "history": [{"date": p.date, "value": p.value} for p in self.history],
            "is_estimated": self.is_estimated,
            "error": self.error,
        }


class ImagerySource(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"
    SYNTHESIZED = "synthesized"


@dataclass
class ImageryResult:
    image: Image.Image
    source: ImagerySource

    @property
    def is_synthesized(self) -> bool:
        return self.source is ImagerySource.SYNTHESIZED

    def to_png_bytes(self) -> bytes:
        buf = io.BytesIO()
        self.image.save(buf, format="PNG")
        return buf.getvalue()


NO_FUN_FACT = "No fun fact available for this location."


@dataclass(frozen=True)
class FunFact:
    summary: Optional[str] = None
    image_url: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def unavailable(cls) -> "FunFact":
        return cls(error=NO_FUN_FACT)


@dataclass(frozen=True)
class NewsItem:
    title: str
    pub_date: str
    link: str
