from __future__ import annotations

import time
import uuid

import structlog
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from eco_engine.errors import EcoScopeError

logger = structlog.get_logger()

STATUS_BY_CATEGORY = {
    "location_not_found": 404,
    "invalid_coordinates": 422,
    "rate_limited": 429,
    "no_data": 404,
    "network_unreachable": 503,
    "server_error": 502,
    "unknown": 500,
}


class RequestIDMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        request_id = uuid.uuid4().hex
        scope.setdefault("state", {})
        scope["state"]["request_id"] = request_id

        start = time.perf_counter()

        async def send_wrapper(message):
            if message.get("type") == "http.response.start":
                headers = message.setdefault("headers", [])
                headers.append((b"x-request-id", request_id.encode()))
            await send(message)

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            try:
                await self.app(scope, receive, send_wrapper)
            finally:
                dur_ms = int((time.perf_counter() - start) * 1000)
                logger.info(
                    "request_completed",
                    method=scope.get("method", ""),
                    path=scope.get("path", ""),
                    duration_ms=dur_ms,
                )


def _request_id(request: Request) -> str:
    return getattr(getattr(request, "state", None), "request_id", None) or ""


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    code = "service_unavailable" if exc.status_code == 503 else "http_error"
    body = {"error": {"code": code, "message": str(exc.detail), "request_id": _request_id(request)}}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def eco_error_handler(request: Request, exc: EcoScopeError) -> JSONResponse:
    status = STATUS_BY_CATEGORY.get(exc.category, 500)
    body = {"error": {"code": exc.category, "message": exc.message, "request_id": _request_id(request)}}
    return JSONResponse(status_code=status, content=body)
