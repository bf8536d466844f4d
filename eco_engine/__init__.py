"""Environmental data engine for EcoScope.

Subpackages:
- ingestion: Upstream clients (climate data, NDVI imagery, geocoding, summaries, news).
- estimation: Latitude/season heuristics used when live data is unavailable.
- tests: Unit tests for the eco_engine package.
"""

__all__ = [
    "ingestion",
    "estimation",
    "models",
    "errors",
    "carbon",
]
