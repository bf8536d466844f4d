from fastapi import APIRouter, HTTPException, Request, Response

import structlog
from ...schemas.environment import (
    EnvironmentResponse,
    FunFactModel,
    LocationModel,
    SearchRequest,
    SessionSnapshot,
)

router = APIRouter()
logger = structlog.get_logger()


def _snapshot(request: Request) -> SessionSnapshot:
    session = request.app.state.session
    latest = session.store.latest()
    return SessionSnapshot(
        location=LocationModel.from_location(session.location),
        current=EnvironmentResponse.from_result(latest) if latest else None,
        fun_fact=FunFactModel.from_fun_fact(session.fun_fact),
    )


@router.get("/", response_model=SessionSnapshot, summary="Current location and latest reading")
async def current(request: Request) -> SessionSnapshot:
    return _snapshot(request)


@router.post(
    "/search",
    response_model=SessionSnapshot,
    summary="Resolve a place name and load its environmental data",
    responses={404: {"description": "Location not found"}, 422: {"description": "Invalid coordinates"}},
)
async def search(request: Request, body: SearchRequest) -> SessionSnapshot:
    # LocationNotFoundError / InvalidCoordinatesError are mapped by the app's error handler
    await request.app.state.location_service.search(body.query)
    return _snapshot(request)


@router.post("/refresh", response_model=SessionSnapshot, summary="Re-fetch data for the current location")
async def refresh(request: Request) -> SessionSnapshot:
    await request.app.state.location_service.refresh()
    return _snapshot(request)


@router.get(
    "/ndvi.png",
    summary="NDVI image of the latest committed reading",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}, 404: {"description": "No image loaded yet"}},
)
async def current_ndvi(request: Request) -> Response:
    latest = request.app.state.session.store.latest()
    if latest is None or latest.imagery is None:
        raise HTTPException(status_code=404, detail="No NDVI image available")
    return Response(
        content=latest.imagery.to_png_bytes(),
        media_type="image/png",
        headers={"X-Imagery-Source": latest.imagery.source.value},
    )
