"""NDVI heuristics and the placeholder raster used when no imagery source answers."""
from __future__ import annotations

import datetime as dt
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw

from ..models import IMAGE_SIZE
from .climate import _check_month, is_northern

GRID_CELLS = 16
CELL_JITTER = 0.1
GRID_LINE_RGBA = (0, 0, 0, 50)
BACKGROUND_FROM = 200  # light gray, top-left
BACKGROUND_TO = 240  # almost white, bottom-right

Color = Tuple[int, int, int]

# (upper bound, color); values at or above the last bound are dense vegetation
NDVI_RAMP = (
    (0.2, (189, 89, 89)),  # brown-red
    (0.4, (255, 204, 102)),  # yellow
    (0.6, (159, 193, 110)),  # light green
    (0.8, (76, 175, 80)),  # medium green
)
NDVI_DENSE_COLOR: Color = (27, 94, 32)

# month group -> (northern factor, southern factor)
_NDVI_SEASONS = {
    (12, 1, 2): (0.6, 1.2),
    (3, 4, 5): (1.0, 0.8),
    (6, 7, 8): (1.2, 0.6),
    (9, 10, 11): (0.8, 1.0),
}


def base_ndvi(latitude: float) -> float:
    lat = abs(latitude)
    if lat > 60:
        return 0.2  # tundra / ice
    if lat > 45:
        return 0.5  # temperate
    if lat > 23:
        return 0.7  # subtropical
    return 0.8  # tropical


def ndvi_seasonal_factor(latitude: float, month: int) -> float:
    _check_month(month)
    for months, (north, south) in _NDVI_SEASONS.items():
        if month in months:
            return north if is_northern(latitude) else south
    raise AssertionError("unreachable")


def estimate_ndvi(latitude: float, month: int) -> float:
    value = base_ndvi(latitude) * ndvi_seasonal_factor(latitude, month)
    return min(1.0, max(0.0, value))


def ndvi_color(value: float) -> Color:
    for bound, color in NDVI_RAMP:
        if value < bound:
            return color
    return NDVI_DENSE_COLOR


def describe_ndvi(value: float) -> str:
    if value < 0.1:
        return "Barren/Very Sparse Vegetation"
    if value < 0.2:
        return "Sparse Vegetation"
    if value < 0.4:
        return "Moderate Vegetation"
    if value < 0.6:
        return "Dense Vegetation"
    return "Very Dense Vegetation"


def ndvi_legend_color(value: float) -> str:
    if value < 0.1:
        return "#E57373"
    if value < 0.2:
        return "#FFB74D"
    if value < 0.4:
        return "#FFF176"
    if value < 0.6:
        return "#81C784"
    return "#43A047"


def _background(size: int) -> np.ndarray:
    idx = np.arange(size, dtype=np.float64)
    t = (idx[:, None] + idx[None, :]) / (2.0 * (size - 1))
    shade = (BACKGROUND_FROM + (BACKGROUND_TO - BACKGROUND_FROM) * t).round().astype(np.uint8)
    canvas = np.empty((size, size, 4), dtype=np.uint8)
    canvas[..., :3] = shade[..., None]
    canvas[..., 3] = 255
    return canvas


def synthesize_ndvi_image(
    latitude: float,
    day: dt.date,
    rng: Optional[np.random.Generator] = None,
    size: int = IMAGE_SIZE,
) -> Image.Image:
    """Render a color-coded 16x16 NDVI grid over a light gradient, with thin grid lines.

    Each cell gets the seasonal NDVI estimate plus uniform jitter in
    [-0.1, 0.1], clamped to [0, 1]. Returns an RGBA image of `size` x `size`.
    """
    rng = rng or np.random.default_rng()
    ndvi = estimate_ndvi(latitude, day.month)
    cell = size // GRID_CELLS

    canvas = _background(size)
    cells = np.clip(ndvi + rng.uniform(-CELL_JITTER, CELL_JITTER, size=(GRID_CELLS, GRID_CELLS)), 0.0, 1.0)
    for row in range(GRID_CELLS):
        for col in range(GRID_CELLS):
            color = ndvi_color(float(cells[row, col]))
            canvas[row * cell:(row + 1) * cell, col * cell:(col + 1) * cell, :3] = color

    image = Image.fromarray(canvas)
    overlay = Image.new("RGBA", image.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    last = size - 1
    for i in range(GRID_CELLS + 1):
        pos = min(i * cell, last)
        draw.line([(pos, 0), (pos, last)], fill=GRID_LINE_RGBA, width=1)
        draw.line([(0, pos), (last, pos)], fill=GRID_LINE_RGBA, width=1)
    return Image.alpha_composite(image, overlay)
