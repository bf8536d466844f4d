"""Classified errors surfaced to clients instead of raw exceptions."""
from __future__ import annotations

import asyncio
from typing import Optional

import requests


class EcoScopeError(RuntimeError):
    """Base class for user-facing failures.

    `category` is a stable machine-readable key, `message` is what a client
    shows to the user, and `detail` keeps the underlying description for logs.
    """

    category = "unknown"
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class NetworkUnreachableError(EcoScopeError):
    category = "network_unreachable"
    default_message = "Network error: Please check your internet connection"


class LocationNotFoundError(EcoScopeError):
    category = "location_not_found"
    default_message = "Location data not available"


class InvalidCoordinatesError(EcoScopeError):
    category = "invalid_coordinates"
    default_message = "Invalid location coordinates"


class RateLimitedError(EcoScopeError):
    category = "rate_limited"
    default_message = "Too many requests. Please try again later"


class ServerError(EcoScopeError):
    category = "server_error"

    def __init__(self, status_code: Optional[int] = None, *, detail: Optional[str] = None) -> None:
        self.status_code = status_code
        code = status_code if status_code is not None else "unknown"
        super().__init__(f"Server error: {code}", detail=detail)


class NoDataAvailableError(EcoScopeError):
    category = "no_data"
    default_message = "No data available for this location"


class UnknownError(EcoScopeError):
    category = "unknown"

    def __init__(self, description: Optional[str] = None, *, detail: Optional[str] = None) -> None:
        super().__init__(f"Error: {description or 'Unknown error'}", detail=detail or description)


def error_for_status(status_code: Optional[int], detail: Optional[str] = None) -> EcoScopeError:
    if status_code == 404:
        return LocationNotFoundError(detail=detail)
    if status_code == 422:
        return InvalidCoordinatesError(detail=detail)
    if status_code == 429:
        return RateLimitedError(detail=detail)
    return ServerError(status_code, detail=detail)


def classify_error(exc: BaseException) -> EcoScopeError:
    """Map any exception onto the classified taxonomy. Never raises."""
    if isinstance(exc, EcoScopeError):
        return exc
    # HTTPError is itself a RequestException, so it must be checked first
    if isinstance(exc, requests.HTTPError):
        status = exc.response.status_code if exc.response is not None else None
        return error_for_status(status, detail=str(exc))
    if isinstance(exc, (requests.RequestException, asyncio.TimeoutError, TimeoutError, ConnectionError)):
        return NetworkUnreachableError(detail=str(exc) or exc.__class__.__name__)
    if isinstance(exc, OSError):
        return NetworkUnreachableError(detail=str(exc) or exc.__class__.__name__)
    return UnknownError(str(exc) or exc.__class__.__name__)
