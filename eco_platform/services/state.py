"""Latest-result store and the session context that owns it.

Every fetch carries a request id from a monotonic counter. Only a result newer
than the one already stored may be committed, so a slow request for an old
location can never overwrite state produced for a newer query.
"""
from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from eco_engine.models import DEFAULT_LOCATION, EnvironmentalReading, FunFact, ImageryResult, Location

logger = structlog.get_logger()


@dataclass(frozen=True)
class FetchResult:
    request_id: int
    location: Optional[Location]  # None when the coordinates were rejected
    reading: EnvironmentalReading
    imagery: Optional[ImageryResult] = None


class RequestCounter:
    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self.last_issued = 0

    def next(self) -> int:
        self.last_issued = next(self._counter)
        return self.last_issued


class ReadingStore:
    def __init__(self) -> None:
        self._latest: Optional[FetchResult] = None
        self._lock = asyncio.Lock()
        self._subscribers: List[asyncio.Queue] = []

    def latest(self) -> Optional[FetchResult]:
        return self._latest

    def subscribe(self) -> asyncio.Queue:
        """Queue holding at most the newest committed snapshot; older unread ones are replaced."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    async def commit(self, result: FetchResult) -> bool:
        """Store `result` if it is newer than the current one. Returns whether it was kept."""
        async with self._lock:
            current = self._latest
            if current is not None and result.request_id <= current.request_id:
                logger.info("stale_result_dropped", request_id=result.request_id, current_request_id=current.request_id)
                return False
            self._latest = result
            for queue in list(self._subscribers):
                if queue.full():
                    queue.get_nowait()
                queue.put_nowait(result)
            return True


@dataclass
class EcoSession:
    """Single-writer owner of the current location, reading and fun fact."""

    location: Location = DEFAULT_LOCATION
    fun_fact: FunFact = field(default_factory=FunFact)
    store: ReadingStore = field(default_factory=ReadingStore)
    counter: RequestCounter = field(default_factory=RequestCounter)
    _location_request_id: int = 0
    _fun_fact_request_id: int = 0

    def begin(self) -> int:
        return self.counter.next()

    def move_to(self, request_id: int, location: Location) -> bool:
        if request_id < self._location_request_id:
            return False
        self._location_request_id = request_id
        self.location = location
        return True

    def set_fun_fact(self, request_id: int, fun_fact: FunFact) -> bool:
        if request_id < self._fun_fact_request_id:
            return False
        self._fun_fact_request_id = request_id
        self.fun_fact = fun_fact
        return True
