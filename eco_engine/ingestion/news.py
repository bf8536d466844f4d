from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import List

import requests

from ..models import NewsItem


def parse_rss(payload: str) -> List[NewsItem]:
    """Parse RSS `<item>` entries. Items missing a title, link or pubDate are skipped."""
    root = ET.fromstring(payload)
    items: List[NewsItem] = []
    for item in root.iter("item"):
        title = (item.findtext("title") or "").strip()
        link = (item.findtext("link") or "").strip()
        pub_date = (item.findtext("pubDate") or "").strip()
        if title and link and pub_date:
            items.append(NewsItem(title=title, pub_date=pub_date, link=link))
    return items


@dataclass
class NewsClient:
    url: str = "https://www.nasa.gov/rss/dyn/breaking_news.rss"
    user_agent: str = "Mozilla/5.0"
    timeout_connect: float = 5.0
    timeout_read: float = 10.0
    limit: int = 20

    def fetch(self) -> List[NewsItem]:
        with requests.Session() as s:
            resp = s.get(self.url, headers={"User-Agent": self.user_agent}, timeout=(self.timeout_connect, self.timeout_read))
            resp.raise_for_status()
            text = resp.text
        return parse_rss(text)[: self.limit]
