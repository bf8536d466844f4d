from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import pandas as pd
import requests
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..errors import NoDataAvailableError
from ..models import EnvironmentalReading, TemperatureHistoryPoint

# POWER marks missing days with this sentinel instead of null
POWER_FILL_VALUE = -999.0


class PowerParameters(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    temperature: Dict[str, Optional[float]] = Field(
        default_factory=dict, validation_alias=AliasChoices("T2M_MAX", "T2M", "temperature")
    )
    solar_radiation: Dict[str, Optional[float]] = Field(
        default_factory=dict, validation_alias=AliasChoices("ALLSKY_SFC_SW_DWN", "solar_radiation")
    )
    cloud_cover: Dict[str, Optional[float]] = Field(
        default_factory=dict, validation_alias=AliasChoices("CLOUD_AMT", "cloud_cover")
    )


class FeatureProperties(BaseModel):
    model_config = ConfigDict(extra="allow")

    parameter: PowerParameters = Field(default_factory=PowerParameters)


class PowerFeature(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str = "Feature"
    geometry: Optional[Dict[str, Any]] = None
    properties: FeatureProperties = Field(default_factory=FeatureProperties)


class PowerResponse(BaseModel):
    """Daily point response from the climate data API.

    The API answers either with a single GeoJSON Feature (parameters under
    `properties.parameter`) or with a `features` list; both shapes are accepted.
    """

    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    messages: Optional[List[str]] = None
    geometry: Optional[Dict[str, Any]] = None
    properties: Optional[FeatureProperties] = None
    features: Optional[List[PowerFeature]] = None
    header: Optional[Dict[str, Any]] = None

    def location_feature(self) -> Optional[PowerFeature]:
        if self.features is not None:
            return self.features[0] if self.features else None
        if self.type == "Feature" and self.properties is not None:
            return PowerFeature(type="Feature", geometry=self.geometry, properties=self.properties)
        return None


class ClimateClient(Protocol):
    """Provider-agnostic daily climate client interface."""

    def fetch_daily(self, lat: float, lon: float, start: str, end: str) -> PowerResponse:
        """Fetch daily values between `start` and `end` (inclusive, yyyyMMdd)."""
        ...


@dataclass
class PowerClient:
    """NASA POWER implementation of `ClimateClient`.

    Notes and assumptions:
    - Uses the daily point endpoint with the configured time standard (UTC by default).
    - Requests max air temperature at 2m, all-sky surface shortwave downward
      irradiance and cloud amount.
    - Retries are applied for transient HTTP errors (429/5xx) with exponential backoff;
      after retries the final response is raised via `raise_for_status`.
    """

    base_url: str = "https://power.larc.nasa.gov/api/temporal/daily/point"
    parameters: str = "T2M_MAX,ALLSKY_SFC_SW_DWN,CLOUD_AMT"
    community: str = "SB"
    time_standard: str = "UTC"
    timeout_connect: float = 5.0
    timeout_read: float = 5.0
    max_retries: int = 2
    backoff_factor: float = 0.5
    user_agent: Optional[str] = None

    def _session(self) -> requests.Session:
        s = requests.Session()
        retries = Retry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retries)
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        if self.user_agent:
            s.headers["User-Agent"] = self.user_agent
        return s

    def fetch_daily(self, lat: float, lon: float, start: str, end: str) -> PowerResponse:
        params = {
            "parameters": self.parameters,
            "community": self.community,
            "longitude": lon,
            "latitude": lat,
            "start": start,
            "end": end,
            "time-standard": self.time_standard,
        }
        timeout = (self.timeout_connect, self.timeout_read)
        with self._session() as s:
            resp = s.get(self.base_url, params=params, timeout=timeout)
            resp.raise_for_status()
            data = resp.json()
        return PowerResponse.model_validate(data)


def _ordered_series(values: Dict[str, Optional[float]]) -> pd.Series:
    """Date-keyed values as a float Series sorted ascending by date, fill values dropped."""
    present = {str(k): v for k, v in values.items() if v is not None}
    series = pd.Series(present, dtype=float)
    series = series[series != POWER_FILL_VALUE]
    return series.sort_index()


def extract_reading(response: PowerResponse) -> EnvironmentalReading:
    """Turn a climate response into a real reading.

    Current temperature is the latest point of the temperature history. Cloud
    cover and solar radiation each take the last chronological value of their
    own series, which may cover different dates.

    Raises
    ------
    NoDataAvailableError
        When there is no location feature or a required series is empty.
    """
    feature = response.location_feature()
    if feature is None:
        raise NoDataAvailableError(detail="response has no location feature")

    parameter = feature.properties.parameter
    temperature = _ordered_series(parameter.temperature)
    if temperature.empty:
        raise NoDataAvailableError(detail="No temperature data available")
    cloud = _ordered_series(parameter.cloud_cover)
    solar = _ordered_series(parameter.solar_radiation)
    if cloud.empty or solar.empty:
        raise NoDataAvailableError(detail="No cloud cover or solar radiation data available")

    history = [TemperatureHistoryPoint(date=date, value=float(value)) for date, value in temperature.items()]
    return EnvironmentalReading.real(
        temperature=history[-1].value,
        cloud_cover=float(cloud.iloc[-1]),
        solar_radiation=float(solar.iloc[-1]),
        history=history,
    )
