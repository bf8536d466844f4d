from __future__ import annotations

import asyncio
import datetime as dt
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, Optional

import structlog

from eco_engine.dates import trailing_window, utc_today
from eco_engine.errors import InvalidCoordinatesError, classify_error
from eco_engine.estimation import estimate_reading
from eco_engine.ingestion.imagery import ImageryChain, PointEndpoint, WmsEndpoint
from eco_engine.ingestion.power import ClimateClient, PowerClient, extract_reading
from eco_engine.models import EnvironmentalReading, ImageryResult, ImagerySource, Location

from ..config import AppSettings
from .state import FetchResult

logger = structlog.get_logger()


def build_imagery_chain(settings: AppSettings) -> ImageryChain:
    return ImageryChain(
        endpoints=[
            WmsEndpoint(ImagerySource.PRIMARY, settings.imagery_primary_url, settings.imagery_primary_layer),
            WmsEndpoint(
                ImagerySource.SECONDARY,
                settings.imagery_secondary_url,
                settings.imagery_secondary_layer,
                upper_case_params=True,
            ),
            PointEndpoint(ImagerySource.TERTIARY, settings.imagery_tertiary_url, settings.imagery_tertiary_product),
        ],
        timeout_connect=settings.imagery_timeout_connect,
        timeout_read=settings.imagery_timeout_read,
        user_agent=settings.http_user_agent,
    )


def build_power_client(settings: AppSettings) -> PowerClient:
    return PowerClient(
        base_url=settings.power_base_url,
        parameters=settings.power_parameters,
        community=settings.power_community,
        time_standard=settings.power_time_standard,
        timeout_connect=settings.power_timeout_connect,
        timeout_read=settings.power_timeout_read,
        max_retries=settings.power_max_retries,
        backoff_factor=settings.power_backoff_factor,
        user_agent=settings.http_user_agent,
    )


class EnvironmentService:
    """Fetch environmental readings with imagery, degrading to estimates on failure.

    The climate request and the imagery chain start together and run on a
    bounded worker pool; each is awaited independently. `fetch_reading` never
    raises: every failure becomes an estimated reading with a classified message.
    """

    def __init__(
        self,
        settings: AppSettings,
        client: Optional[ClimateClient] = None,
        imagery: Optional[ImageryChain] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        today: Callable[[], dt.date] = utc_today,
    ):
        self.settings = settings
        self.client = client or build_power_client(settings)
        self.imagery = imagery or build_imagery_chain(settings)
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(
            max_workers=max(1, settings.worker_pool_size), thread_name_prefix="eco-io"
        )
        self._today = today

    async def run_blocking(self, func: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, partial(func, *args))

    def _load_reading(self, location: Location, today: dt.date) -> EnvironmentalReading:
        start, end = trailing_window(today, self.settings.history_days)
        logger.debug("power_fetch", lat=location.latitude, lon=location.longitude, start=start, end=end)
        response = self.client.fetch_daily(location.latitude, location.longitude, start, end)
        if response.messages:
            logger.warning("power_api_messages", messages=response.messages)
        return extract_reading(response)

    def _estimated(self, latitude: float, today: dt.date, exc: BaseException) -> EnvironmentalReading:
        error = classify_error(exc)
        logger.warning(
            "environment_fetch_failed",
            category=error.category,
            message=error.message,
            detail=error.detail,
        )
        return estimate_reading(latitude, today, error=error.message)

    async def fetch_reading(
        self,
        latitude: float,
        longitude: float,
        *,
        request_id: int = 0,
        name: Optional[str] = None,
        with_imagery: bool = True,
    ) -> FetchResult:
        today = self._today()
        try:
            location = Location.create(latitude, longitude, name)
        except InvalidCoordinatesError as e:
            # rejected before any network call
            return FetchResult(request_id=request_id, location=None, reading=self._estimated(latitude, today, e))

        data = asyncio.wait_for(
            self.run_blocking(self._load_reading, location, today), timeout=self.settings.fetch_timeout_s
        )
        if with_imagery:
            imagery = self.run_blocking(self.imagery.fetch, location.latitude, location.longitude, today)
            reading_outcome, imagery_outcome = await asyncio.gather(data, imagery, return_exceptions=True)
        else:
            (reading_outcome,) = await asyncio.gather(data, return_exceptions=True)
            imagery_outcome = None

        if isinstance(reading_outcome, BaseException):
            if not isinstance(reading_outcome, Exception):
                raise reading_outcome
            reading = self._estimated(location.latitude, today, reading_outcome)
        else:
            reading = reading_outcome
            logger.info("environment_fetch_ok", location=location.name, request_id=request_id)

        image: Optional[ImageryResult] = None
        if isinstance(imagery_outcome, BaseException):
            if not isinstance(imagery_outcome, Exception):
                raise imagery_outcome
            logger.error("imagery_chain_failed", error=str(imagery_outcome))
        else:
            image = imagery_outcome

        return FetchResult(request_id=request_id, location=location, reading=reading, imagery=image)

    async def fetch_imagery(self, latitude: float, longitude: float) -> ImageryResult:
        """Run only the imagery chain. Raises InvalidCoordinatesError for out-of-range input."""
        location = Location.create(latitude, longitude)
        return await self.run_blocking(self.imagery.fetch, location.latitude, location.longitude, self._today())

    def close(self) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=False)
