from __future__ import annotations

from typing import List, Optional

import structlog
from pydantic import BaseModel, Field, model_validator

from eco_engine.models import EnvironmentalReading, FunFact, Location

from ..services.state import FetchResult

logger = structlog.get_logger()


class LocationModel(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    name: str

    @classmethod
    def from_location(cls, location: Location) -> "LocationModel":
        return cls(latitude=location.latitude, longitude=location.longitude, name=location.name)


class HistoryPoint(BaseModel):
    date: str = Field(..., description="yyyyMMdd")
    value: float


class ReadingModel(BaseModel):
    temperature: float
    cloud_cover: float = Field(..., ge=0.0, le=100.0)
    solar_radiation: float
    history: List[HistoryPoint]
    is_estimated: bool
    error: Optional[str] = None

    @model_validator(mode="after")
    def _soft_check_provenance(self) -> "ReadingModel":
        if self.is_estimated != (self.error is not None):
            logger.warning("reading_provenance_inconsistent", is_estimated=self.is_estimated, error=self.error)
        return self

    @classmethod
    def from_reading(cls, reading: EnvironmentalReading) -> "ReadingModel":
        return cls(**reading.to_dict())


class EnvironmentResponse(BaseModel):
    request_id: int
    location: Optional[LocationModel] = None
    reading: ReadingModel
    imagery_source: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "request_id": 3,
                    "location": {"latitude": 40.7128, "longitude": -74.006, "name": "New York"},
                    "reading": {
                        "temperature": 7.0,
                        "cloud_cover": 40.0,
                        "solar_radiation": 150.0,
                        "history": [{"date": "20240101", "value": 5.0}, {"date": "20240102", "value": 7.0}],
                        "is_estimated": False,
                        "error": None,
                    },
                    "imagery_source": "secondary",
                }
            ]
        }
    }

    @classmethod
    def from_result(cls, result: FetchResult) -> "EnvironmentResponse":
        return cls(
            request_id=result.request_id,
            location=LocationModel.from_location(result.location) if result.location else None,
            reading=ReadingModel.from_reading(result.reading),
            imagery_source=result.imagery.source.value if result.imagery else None,
        )


class FunFactModel(BaseModel):
    summary: Optional[str] = None
    image_url: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_fun_fact(cls, fact: FunFact) -> "FunFactModel":
        return cls(summary=fact.summary, image_url=fact.image_url, error=fact.error)


class SearchRequest(BaseModel):
    query: str = Field("", max_length=200)


class SessionSnapshot(BaseModel):
    location: LocationModel
    current: Optional[EnvironmentResponse] = None
    fun_fact: FunFactModel
