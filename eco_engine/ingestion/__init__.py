"""Ingestion subpackage.

Clients for the upstream services the engine depends on: daily climate data,
NDVI imagery (with its fallback chain), geocoding, place summaries and news.
"""

from .geocoding import GeocodeResult, NominatimGeocoder
from .imagery import ImageryChain, PointEndpoint, WmsEndpoint, first_success
from .news import NewsClient, parse_rss
from .power import ClimateClient, PowerClient, PowerResponse, extract_reading
from .summary import SummaryClient

__all__ = [
    "ClimateClient",
    "PowerClient",
    "PowerResponse",
    "extract_reading",
    "ImageryChain",
    "WmsEndpoint",
    "PointEndpoint",
    "first_success",
    "NominatimGeocoder",
    "GeocodeResult",
    "SummaryClient",
    "NewsClient",
    "parse_rss",
]
