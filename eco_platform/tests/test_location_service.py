import asyncio

import pytest
import requests

from eco_engine.errors import InvalidCoordinatesError, LocationNotFoundError
from eco_engine.models import NO_FUN_FACT, EnvironmentalReading, Location
from eco_platform.services.location_service import (
    INVALID_LOCATION_COORDINATES,
    LOCATION_NOT_FOUND,
    LocationService,
)
from eco_platform.services.state import EcoSession, FetchResult

from fakes import FakeGeocoder, FakeSummaries

PLACES = {
    "paris": (48.8566, 2.3522, "Paris"),
    "berlin": (52.52, 13.405, "Berlin"),
    "nowhere": (95.0, 0.0, "Nowhere"),
}


class GatedEnvironment:
    """Runs blocking calls inline and lets a test hold a fetch open per place name."""

    def __init__(self):
        self.gates = {}
        self.started = {}
        self.calls = []

    async def run_blocking(self, func, *args):
        return func(*args)

    async def fetch_reading(self, latitude, longitude, *, request_id=0, name=None, with_imagery=True):
        self.calls.append((name, request_id))
        self.started.setdefault(name, asyncio.Event()).set()
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        reading = EnvironmentalReading.real(float(request_id), 10.0, 100.0, [])
        return FetchResult(request_id=request_id, location=Location.create(latitude, longitude, name), reading=reading)


def _service(geocoder=None):
    session = EcoSession()
    environment = GatedEnvironment()
    service = LocationService(
        session, environment, geocoder=geocoder or FakeGeocoder(PLACES), summaries=FakeSummaries()
    )
    return session, environment, service


def test_search_loads_data_and_fun_fact():
    session, environment, service = _service()
    result = asyncio.run(service.search("  Paris "))

    assert result.location.name == "Paris"
    assert session.location.name == "Paris"
    assert session.store.latest() is result
    assert session.fun_fact.summary == "Paris is a place."
    assert environment.calls == [("Paris", 1)]


def test_blank_query_returns_latest_without_fetching():
    session, environment, service = _service()
    assert asyncio.run(service.search("   ")) is None
    assert environment.calls == []


def test_unknown_place():
    session, environment, service = _service()
    with pytest.raises(LocationNotFoundError) as exc:
        asyncio.run(service.search("atlantis"))
    assert exc.value.message == LOCATION_NOT_FOUND
    assert session.fun_fact.error == NO_FUN_FACT
    assert session.location.name == "New York"
    assert environment.calls == []


def test_geocoder_failure_counts_as_not_found():
    session, environment, service = _service(FakeGeocoder(error=requests.ConnectionError("down")))
    with pytest.raises(LocationNotFoundError):
        asyncio.run(service.search("paris"))
    assert environment.calls == []


def test_geocoder_returns_invalid_coordinates():
    session, environment, service = _service()
    with pytest.raises(InvalidCoordinatesError) as exc:
        asyncio.run(service.search("nowhere"))
    assert exc.value.message == INVALID_LOCATION_COORDINATES
    assert session.fun_fact.error == NO_FUN_FACT
    assert environment.calls == []


def test_refresh_reuses_current_location():
    session, environment, service = _service()
    result = asyncio.run(service.refresh())
    assert result.location.name == "New York"
    assert session.store.latest() is result
    # refresh leaves the fun fact alone
    assert session.fun_fact.summary is None


def test_slow_older_search_cannot_overwrite_newer_one():
    session, environment, service = _service()

    async def run():
        gate = asyncio.Event()
        environment.gates["Paris"] = gate
        environment.started["Paris"] = asyncio.Event()

        slow = asyncio.create_task(service.search("paris"))
        await environment.started["Paris"].wait()

        fast = await service.search("berlin")
        gate.set()
        stale = await slow
        return fast, stale

    fast, stale = asyncio.run(run())

    assert stale.request_id < fast.request_id
    assert session.store.latest() is fast
    assert session.location.name == "Berlin"
    assert session.fun_fact.summary == "Berlin is a place."
