from typing import Optional

from fastapi import APIRouter, Query, Request

from ...schemas.environment import FunFactModel

router = APIRouter()


@router.get("/", response_model=FunFactModel, summary="Encyclopedia summary for a place")
async def fun_fact(
    request: Request,
    name: Optional[str] = Query(None, description="Place name; defaults to the session's current fun fact"),
) -> FunFactModel:
    if not name:
        return FunFactModel.from_fun_fact(request.app.state.session.fun_fact)
    fact = await request.app.state.location_service.fun_fact(name)
    return FunFactModel.from_fun_fact(fact)
