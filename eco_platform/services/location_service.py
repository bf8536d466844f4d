from __future__ import annotations

import asyncio
from typing import Optional

import requests
import structlog

from eco_engine.errors import InvalidCoordinatesError, LocationNotFoundError
from eco_engine.ingestion.geocoding import GeocodeResult, NominatimGeocoder
from eco_engine.ingestion.summary import SummaryClient
from eco_engine.models import FunFact, Location, is_valid_coordinates

from .environment_service import EnvironmentService
from .state import EcoSession, FetchResult

logger = structlog.get_logger()

LOCATION_NOT_FOUND = "Location not found. Please try another location."
INVALID_LOCATION_COORDINATES = "Invalid coordinates received for the location."


class LocationService:
    """Search-driven location changes for a session.

    A bad geocode short-circuits the flow: the fun fact goes to its error state
    and no environmental data is fetched for the rejected place.
    """

    def __init__(
        self,
        session: EcoSession,
        environment: EnvironmentService,
        geocoder: Optional[NominatimGeocoder] = None,
        summaries: Optional[SummaryClient] = None,
    ):
        self.session = session
        self.environment = environment
        self.geocoder = geocoder or NominatimGeocoder()
        self.summaries = summaries or SummaryClient()

    async def _geocode(self, query: str) -> Optional[GeocodeResult]:
        try:
            return await self.environment.run_blocking(self.geocoder.geocode, query)
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            logger.warning("geocode_failed", query=query, error=str(e))
            return None

    async def search(self, query: str) -> Optional[FetchResult]:
        query = (query or "").strip()
        if not query:
            return self.session.store.latest()

        request_id = self.session.begin()
        hit = await self._geocode(query)
        if hit is None:
            self.session.set_fun_fact(request_id, FunFact.unavailable())
            raise LocationNotFoundError(LOCATION_NOT_FOUND, detail=query)
        if not is_valid_coordinates(hit.latitude, hit.longitude):
            self.session.set_fun_fact(request_id, FunFact.unavailable())
            raise InvalidCoordinatesError(
                INVALID_LOCATION_COORDINATES, detail=f"lat={hit.latitude}, lon={hit.longitude}"
            )

        location = Location.create(hit.latitude, hit.longitude, hit.place_name(query))
        logger.info("location_resolved", query=query, location=location.name, request_id=request_id)
        return await self._load(location, request_id, with_fun_fact=True)

    async def refresh(self) -> FetchResult:
        request_id = self.session.begin()
        return await self._load(self.session.location, request_id, with_fun_fact=False)

    async def fun_fact(self, name: str) -> FunFact:
        return await self.environment.run_blocking(self.summaries.fetch, name)

    async def _load(self, location: Location, request_id: int, with_fun_fact: bool) -> FetchResult:
        self.session.move_to(request_id, location)
        fetch = self.environment.fetch_reading(
            location.latitude, location.longitude, request_id=request_id, name=location.name
        )
        if with_fun_fact:
            result, fact = await asyncio.gather(fetch, self.fun_fact(location.name))
            self.session.set_fun_fact(request_id, fact)
        else:
            result = await fetch
        await self.session.store.commit(result)
        return result
