from typing import List

from fastapi import APIRouter

from eco_engine.carbon import FOOTPRINT_TIPS, estimate_footprint
from ...schemas.extras import CarbonRequest, CarbonResponse

router = APIRouter()


@router.post(
    "/",
    response_model=CarbonResponse,
    summary="Estimate daily carbon footprint",
    responses={
        200: {
            "content": {
                "application/json": {"example": {"kg_co2_per_day": 20.5, "tips": FOOTPRINT_TIPS[:2]}}
            }
        }
    },
)
def carbon(body: CarbonRequest) -> CarbonResponse:
    total = estimate_footprint(body.transport_km, body.energy_kwh, body.meat_meals)
    return CarbonResponse(kg_co2_per_day=round(total, 1), tips=FOOTPRINT_TIPS)


@router.get("/tips", response_model=List[str], summary="Tips to reduce your footprint")
def tips() -> List[str]:
    return FOOTPRINT_TIPS
