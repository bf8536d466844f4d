"""Estimation subpackage.

Latitude/season heuristics that stand in for live data: temperature, cloud
cover, solar radiation, a 7-day history and a placeholder NDVI raster.
"""

from .climate import (
    estimate_cloud_cover,
    estimate_reading,
    estimate_solar_radiation,
    estimate_temperature,
    generate_fallback_history,
    latitude_factor,
)
from .ndvi import describe_ndvi, estimate_ndvi, ndvi_color, ndvi_legend_color, synthesize_ndvi_image

__all__ = [
    "estimate_temperature",
    "estimate_cloud_cover",
    "estimate_solar_radiation",
    "estimate_reading",
    "generate_fallback_history",
    "latitude_factor",
    "estimate_ndvi",
    "describe_ndvi",
    "ndvi_color",
    "ndvi_legend_color",
    "synthesize_ndvi_image",
]
