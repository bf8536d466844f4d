from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

import requests
import structlog

from ..models import FunFact

logger = structlog.get_logger()


@dataclass
class SummaryClient:
    """Short encyclopedia extract for a place name (Wikipedia REST summary).

    Never raises: any failure yields `FunFact.unavailable()`.
    """

    base_url: str = "https://en.wikipedia.org/api/rest_v1/page/summary/"
    user_agent: str = "EcoScope/0.1 (environmental data service)"
    timeout_connect: float = 5.0
    timeout_read: float = 10.0

    def url_for(self, name: str) -> str:
        return self.base_url.rstrip("/") + "/" + quote(name.strip(), safe="")

    def fetch(self, name: str) -> FunFact:
        if not name or not name.strip():
            return FunFact.unavailable()
        try:
            with requests.Session() as s:
                resp = s.get(
                    self.url_for(name),
                    headers={"User-Agent": self.user_agent},
                    timeout=(self.timeout_connect, self.timeout_read),
                )
                resp.raise_for_status()
                data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("summary_fetch_failed", name=name, error=str(e))
            return FunFact.unavailable()

        extract = data.get("extract") if isinstance(data, dict) else None
        if not extract:
            return FunFact.unavailable()
        thumbnail = data.get("thumbnail")
        image_url = thumbnail.get("source") if isinstance(thumbnail, dict) else None
        if not isinstance(extract, str):
            return FunFact.unavailable()
        return FunFact(summary=extract, image_url=image_url if isinstance(image_url, str) else None)
