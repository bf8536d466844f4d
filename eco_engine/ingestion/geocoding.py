from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests


@dataclass(frozen=True)
class GeocodeResult:
    latitude: float
    longitude: float
    locality: Optional[str] = None
    admin_area: Optional[str] = None
    country: Optional[str] = None
    display_name: Optional[str] = None

    def place_name(self, fallback: str) -> str:
        return self.locality or self.admin_area or self.country or fallback


@dataclass
class NominatimGeocoder:
    """Free-text place search against OpenStreetMap Nominatim.

    Returns the first hit only, or None when nothing matches. HTTP and
    connection errors propagate to the caller.
    """

    base_url: str = "https://nominatim.openstreetmap.org/search"
    user_agent: str = "EcoScope/0.1 (environmental data service)"
    timeout_connect: float = 5.0
    timeout_read: float = 10.0

    def geocode(self, query: str) -> Optional[GeocodeResult]:
        params = {"q": query, "format": "jsonv2", "limit": 1, "addressdetails": 1}
        headers = {"User-Agent": self.user_agent}
        with requests.Session() as s:
            resp = s.get(self.base_url, params=params, headers=headers, timeout=(self.timeout_connect, self.timeout_read))
            resp.raise_for_status()
            data = resp.json()
        if not data:
            return None

        hit = data[0]
        address = hit.get("address") or {}
        return GeocodeResult(
            latitude=float(hit["lat"]),
            longitude=float(hit["lon"]),
            locality=address.get("city") or address.get("town") or address.get("village") or address.get("hamlet"),
            admin_area=address.get("state") or address.get("county"),
            country=address.get("country"),
            display_name=hit.get("display_name"),
        )
