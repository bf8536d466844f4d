from __future__ import annotations

import datetime as dt
from typing import Tuple

COMPACT_DATE_FORMAT = "%Y%m%d"


def utc_today() -> dt.date:
    """Calendar date used for "today" everywhere in the engine (UTC, not device-local)."""
    return dt.datetime.now(dt.timezone.utc).date()


def compact_date(day: dt.date) -> str:
    return day.strftime(COMPACT_DATE_FORMAT)


def trailing_window(today: dt.date, days: int = 7) -> Tuple[str, str]:
    """Return the (start, end) compact dates of a trailing window ending on `today`.

    The window is inclusive on both ends, so `days=7` yields start = today - 7 days.
    """
    if days <= 0:
        raise ValueError("days must be > 0")
    start = today - dt.timedelta(days=days)
    return compact_date(start), compact_date(today)
