"""Service layer: environmental fetcher, session state and location flow."""

from .environment_service import EnvironmentService
from .location_service import LocationService
from .state import EcoSession, FetchResult, ReadingStore, RequestCounter

__all__ = [
    "EnvironmentService",
    "LocationService",
    "EcoSession",
    "FetchResult",
    "ReadingStore",
    "RequestCounter",
]
