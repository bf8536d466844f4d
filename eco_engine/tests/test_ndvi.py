import datetime as dt

import numpy as np
import pytest

from eco_engine.estimation.ndvi import (
    GRID_CELLS,
    NDVI_DENSE_COLOR,
    NDVI_RAMP,
    base_ndvi,
    describe_ndvi,
    estimate_ndvi,
    ndvi_color,
    ndvi_legend_color,
    ndvi_seasonal_factor,
    synthesize_ndvi_image,
)
from eco_engine.models import IMAGE_SIZE


@pytest.mark.parametrize(
    "lat,expected",
    [(75.0, 0.2), (-61.0, 0.2), (50.0, 0.5), (-46.0, 0.5), (30.0, 0.7), (-24.0, 0.7), (10.0, 0.8), (0.0, 0.8)],
)
def test_base_ndvi_by_band(lat, expected):
    assert base_ndvi(lat) == expected


def test_band_boundaries_are_exclusive():
    assert base_ndvi(60.0) == 0.5
    assert base_ndvi(45.0) == 0.7
    assert base_ndvi(23.0) == 0.8


def test_seasonal_factor_per_hemisphere():
    assert ndvi_seasonal_factor(40.0, 1) == 0.6
    assert ndvi_seasonal_factor(40.0, 7) == 1.2
    assert ndvi_seasonal_factor(-40.0, 1) == 1.2
    assert ndvi_seasonal_factor(-40.0, 7) == 0.6
    assert ndvi_seasonal_factor(-40.0, 10) == 1.0
    assert ndvi_seasonal_factor(0.0, 1) == ndvi_seasonal_factor(10.0, 1)


def test_estimate_ndvi_is_clamped():
    for lat in (-80.0, -30.0, 0.0, 30.0, 80.0):
        for month in range(1, 13):
            assert 0.0 <= estimate_ndvi(lat, month) <= 1.0
    # 0.8 * 1.2 = 0.96 stays below 1
    assert estimate_ndvi(0.0, 7) == pytest.approx(0.96)


def test_color_ramp():
    assert ndvi_color(0.0) == NDVI_RAMP[0][1]
    assert ndvi_color(0.3) == (255, 204, 102)
    assert ndvi_color(0.5) == (159, 193, 110)
    assert ndvi_color(0.7) == (76, 175, 80)
    assert ndvi_color(0.8) == NDVI_DENSE_COLOR
    assert ndvi_color(1.0) == NDVI_DENSE_COLOR


def test_descriptions_and_legend():
    assert describe_ndvi(0.05) == "Barren/Very Sparse Vegetation"
    assert describe_ndvi(0.5) == "Dense Vegetation"
    assert describe_ndvi(0.9) == "Very Dense Vegetation"
    assert ndvi_legend_color(0.05) == "#E57373"
    assert ndvi_legend_color(0.9) == "#43A047"


def test_placeholder_image_dimensions():
    img = synthesize_ndvi_image(52.0, dt.date(2024, 1, 15))
    assert img.size == (IMAGE_SIZE, IMAGE_SIZE)
    assert img.mode == "RGBA"


def test_placeholder_cells_use_ramp_colors():
    # tropical summer: 0.96 +/- 0.1 is always dense vegetation
    img = synthesize_ndvi_image(0.0, dt.date(2024, 7, 1), rng=np.random.default_rng(1))
    cell = IMAGE_SIZE // GRID_CELLS
    for row in range(GRID_CELLS):
        for col in range(GRID_CELLS):
            x, y = col * cell + cell // 2, row * cell + cell // 2
            assert img.getpixel((x, y))[:3] == NDVI_DENSE_COLOR


def test_placeholder_has_grid_lines():
    img = synthesize_ndvi_image(0.0, dt.date(2024, 7, 1))
    inside = img.getpixel((10, 10))
    on_line = img.getpixel((32, 10))
    assert on_line[0] < inside[0]
    assert on_line[3] == 255


def test_placeholder_cells_vary_in_sparse_regions():
    # 0.7 * 0.8 = 0.56, jitter straddles the 0.6 threshold
    colors = set()
    img = synthesize_ndvi_image(30.0, dt.date(2024, 10, 1), rng=np.random.default_rng(3))
    cell = IMAGE_SIZE // GRID_CELLS
    for row in range(GRID_CELLS):
        for col in range(GRID_CELLS):
            colors.add(img.getpixel((col * cell + 5, row * cell + 5))[:3])
    assert colors <= {c for _, c in NDVI_RAMP} | {NDVI_DENSE_COLOR}
    assert len(colors) >= 2
