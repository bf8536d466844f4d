from fastapi import APIRouter, Query, Request, Response

import structlog
from ...schemas.environment import EnvironmentResponse

router = APIRouter()
logger = structlog.get_logger()


@router.get(
    "/",
    response_model=EnvironmentResponse,
    summary="Environmental reading for coordinates",
    responses={
        200: {
            "description": "Live reading, or an estimated one carrying the classified error",
        },
    },
)
async def environment(
    request: Request,
    # range checks happen in the service so bad input still yields an estimated reading
    lat: float = Query(..., description="Latitude in decimal degrees"),
    lon: float = Query(..., description="Longitude in decimal degrees"),
    imagery: bool = Query(True, description="Also run the NDVI imagery chain"),
) -> EnvironmentResponse:
    service = request.app.state.environment_service
    result = await service.fetch_reading(lat, lon, with_imagery=imagery)
    return EnvironmentResponse.from_result(result)


@router.get(
    "/ndvi.png",
    summary="NDVI image for coordinates",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}, "description": "512x512 PNG"}},
)
async def ndvi_image(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
) -> Response:
    service = request.app.state.environment_service
    result = await service.fetch_imagery(lat, lon)
    logger.info("ndvi_image_served", source=result.source.value)
    return Response(
        content=result.to_png_bytes(),
        media_type="image/png",
        headers={"X-Imagery-Source": result.source.value},
    )
