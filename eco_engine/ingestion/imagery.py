"""NDVI imagery fallback chain.

Sources are tried in order, one at a time, and the first decoded image wins.
When every source fails a placeholder is synthesized, so `ImageryChain.fetch`
always returns exactly one 512x512 image.
"""
from __future__ import annotations

import datetime as dt
import io
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Tuple, TypeVar

import requests
import structlog
from PIL import Image, UnidentifiedImageError

from ..dates import utc_today
from ..estimation.ndvi import synthesize_ndvi_image
from ..models import IMAGE_SIZE, ImageryResult, ImagerySource

logger = structlog.get_logger()

T = TypeVar("T")

BBOX_OFFSET_DEG = 0.5


def bounding_box(latitude: float, longitude: float, offset: float = BBOX_OFFSET_DEG) -> str:
    """`minLon,minLat,maxLon,maxLat` around the point."""
    return f"{longitude - offset},{latitude - offset},{longitude + offset},{latitude + offset}"


def first_success(attempts: Iterable[Callable[[], Optional[T]]]) -> Optional[T]:
    """Run attempts in order and return the first non-None result."""
    for attempt in attempts:
        result = attempt()
        if result is not None:
            return result
    return None


class ImageryEndpoint(Protocol):
    source: ImagerySource

    def request(self, latitude: float, longitude: float, day: dt.date) -> Tuple[str, Dict[str, str]]:
        """Return the (url, query params) for one image."""
        ...


@dataclass
class WmsEndpoint:
    """OGC WMS GetMap endpoint serving an NDVI layer as PNG."""

    source: ImagerySource
    base_url: str
    layer: str
    upper_case_params: bool = False
    size: int = IMAGE_SIZE

    def request(self, latitude: float, longitude: float, day: dt.date) -> Tuple[str, Dict[str, str]]:
        params = {
            "service": "WMS",
            "request": "GetMap",
            "layers": self.layer,
            "version": "1.3.0",
            "bbox": bounding_box(latitude, longitude),
            "width": str(self.size),
            "height": str(self.size),
            "crs": "EPSG:4326",
            "format": "image/png",
            "time": day.isoformat(),
        }
        if self.upper_case_params:
            params = {k.upper(): v for k, v in params.items()}
        return self.base_url, params


@dataclass
class PointEndpoint:
    """Point-based product endpoint: coordinates and date, no bounding box."""

    source: ImagerySource
    base_url: str
    product: str = "MOD13Q1"
    size: int = IMAGE_SIZE

    def request(self, latitude: float, longitude: float, day: dt.date) -> Tuple[str, Dict[str, str]]:
        url = f"{self.base_url.rstrip('/')}/{self.product}"
        params = {
            "latitude": str(latitude),
            "longitude": str(longitude),
            "date": day.isoformat(),
            "width": str(self.size),
            "height": str(self.size),
        }
        return url, params


def default_endpoints() -> List[ImageryEndpoint]:
    return [
        WmsEndpoint(ImagerySource.PRIMARY, "https://proba-v-mep.esa.int/api/v1/wms", "NDVI"),
        WmsEndpoint(
            ImagerySource.SECONDARY,
            "https://gibs.earthdata.nasa.gov/wms/epsg4326/best/wms.cgi",
            "MODIS_Terra_NDVI_8Day",
            upper_case_params=True,
        ),
        PointEndpoint(ImagerySource.TERTIARY, "https://modis.ornl.gov/rst/api/v1"),
    ]


def decode_image(content: bytes, size: int = IMAGE_SIZE) -> Image.Image:
    """Decode raw bytes into an RGBA image of `size` x `size`.

    Raises `PIL.UnidentifiedImageError` (or `OSError`) for undecodable bodies.
    """
    with Image.open(io.BytesIO(content)) as img:
        img.load()
        image = img.convert("RGBA")
    if image.size != (size, size):
        image = image.resize((size, size), Image.NEAREST)
    return image


@dataclass
class ImageryChain:
    endpoints: List[ImageryEndpoint] = field(default_factory=default_endpoints)
    timeout_connect: float = 5.0
    timeout_read: float = 5.0
    user_agent: Optional[str] = None

    def _session(self) -> requests.Session:
        # no retry adapter: each source gets exactly one short attempt
        s = requests.Session()
        if self.user_agent:
            s.headers["User-Agent"] = self.user_agent
        return s

    def _attempt(
        self, session: requests.Session, endpoint: ImageryEndpoint, latitude: float, longitude: float, day: dt.date
    ) -> Optional[ImageryResult]:
        try:
            url, params = endpoint.request(latitude, longitude, day)
            resp = session.get(url, params=params, timeout=(self.timeout_connect, self.timeout_read))
            if resp.status_code != 200:
                logger.warning("imagery_bad_status", source=endpoint.source.value, status=resp.status_code)
                return None
            image = decode_image(resp.content)
        except (requests.RequestException, UnidentifiedImageError, OSError) as e:
            logger.warning("imagery_source_failed", source=endpoint.source.value, error=str(e))
            return None
        except Exception as e:
            logger.error("imagery_source_error", source=endpoint.source.value, error=str(e))
            return None
        logger.info("imagery_source_ok", source=endpoint.source.value)
        return ImageryResult(image=image, source=endpoint.source)

    def fetch(self, latitude: float, longitude: float, day: Optional[dt.date] = None) -> ImageryResult:
        day = day or utc_today()
        with self._session() as session:
            result = first_success(
                partial(self._attempt, session, endpoint, latitude, longitude, day) for endpoint in self.endpoints
            )
        if result is not None:
            return result
        logger.info("imagery_synthesized", latitude=latitude, longitude=longitude, day=day.isoformat())
        return ImageryResult(image=synthesize_ndvi_image(latitude, day), source=ImagerySource.SYNTHESIZED)
