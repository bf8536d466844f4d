from typing import Optional

import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, HTTPException

from eco_engine.errors import EcoScopeError
from eco_engine.ingestion.geocoding import NominatimGeocoder
from eco_engine.ingestion.news import NewsClient
from eco_engine.ingestion.summary import SummaryClient
from eco_engine.models import DEFAULT_LOCATION, Location

from ..config import AppSettings
from ..logging import init_logging
from ..services.environment_service import EnvironmentService
from ..services.location_service import LocationService
from ..services.state import EcoSession
from .middleware import RequestIDMiddleware, eco_error_handler, http_exception_handler
from .routes import carbon, environment, funfact, health, location, news

logger = structlog.get_logger()


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    settings = settings or AppSettings()
    init_logging(settings.log_level, settings.app_name, settings.app_env)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.prefetch_on_startup:
            result = await app.state.location_service.refresh()
            logger.info("startup_prefetch_done", estimated=result.reading.is_estimated)
        yield
        app.state.environment_service.close()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "health", "description": "Service health and uptime"},
            {"name": "environment", "description": "Temperature, cloud cover, solar radiation and NDVI imagery"},
            {"name": "location", "description": "Session location search and current snapshot"},
            {"name": "funfact", "description": "Short encyclopedia summary for a place"},
            {"name": "carbon", "description": "Daily carbon footprint calculator"},
            {"name": "news", "description": "Environmental news feed"},
        ],
    )
    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(EcoScopeError, eco_error_handler)

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(environment.router, prefix="/v1/environment", tags=["environment"])
    app.include_router(location.router, prefix="/v1/location", tags=["location"])
    app.include_router(funfact.router, prefix="/v1/funfact", tags=["funfact"])
    app.include_router(carbon.router, prefix="/v1/carbon", tags=["carbon"])
    app.include_router(news.router, prefix="/v1/news", tags=["news"])

    app.state.settings = settings
    app.state.start_time = time.time()
    # Initialize non-IO services immediately so tests without lifespan still work
    start_location = DEFAULT_LOCATION
    if settings.default_location_name:
        start_location = Location.create(DEFAULT_LOCATION.latitude, DEFAULT_LOCATION.longitude, settings.default_location_name)
    app.state.session = EcoSession(location=start_location)
    app.state.environment_service = EnvironmentService(settings)
    app.state.location_service = LocationService(
        app.state.session,
        app.state.environment_service,
        geocoder=NominatimGeocoder(
            base_url=settings.geocoder_url,
            user_agent=settings.http_user_agent,
        ),
        summaries=SummaryClient(base_url=settings.summary_url, user_agent=settings.http_user_agent),
    )
    app.state.news_client = NewsClient(url=settings.news_url)

    return app


if __name__ == "__main__":
    import uvicorn

    s = AppSettings()
    uvicorn.run(create_app(s), host=s.host, port=s.port)
